import json

import pytest
from django.core.cache import cache

from canteen.hashers import hash_password
from canteen.models import MenuItem, User, UserRole


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api(client):
    """Django test client with JSON helpers: api.post(url, body) etc. return (status, data)."""

    class Api:
        def _send(self, method, url, body):
            kwargs = {}
            if body is not None:
                kwargs = {'data': json.dumps(body), 'content_type': 'application/json'}
            response = getattr(client, method)(url, **kwargs)
            return response.status_code, response.json()

        def get(self, url, params=None):
            response = client.get(url, params or {})
            return response.status_code, response.json()

        def post(self, url, body=None):
            return self._send('post', url, body)

        def put(self, url, body=None):
            return self._send('put', url, body)

        def patch(self, url, body=None):
            return self._send('patch', url, body)

        def delete(self, url):
            return self._send('delete', url, None)

    return Api()


@pytest.fixture
def make_user(db):
    def _make(email='student@example.edu', password='secret1', role=UserRole.CUSTOMER,
              name='Student', department='CSE'):
        return User.objects.create(
            username=email,
            email=email,
            password=hash_password(password),
            role=role,
            name=name,
            department=department,
        )
    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(email='admin@example.edu', password='admin123', role=UserRole.ADMIN, name='Admin',
                     department='Administration')


@pytest.fixture
def make_menu_item(db):
    def _make(name='Tea', price=10, category='beverages', available=True, description=None):
        return MenuItem.objects.create(
            name=name, price=price, category=category, available=available, description=description
        )
    return _make
