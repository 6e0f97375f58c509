from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from canteen import order_notify
from canteen.models import MenuItem, Order, OrderItem

pytestmark = pytest.mark.django_db


def _order_body(user, items, **overrides):
    body = {
        'userId': user.pk,
        'orderType': 'instant',
        'paymentMethod': 'bkash',
        'department': 'CSE',
        'items': items,
    }
    body.update(overrides)
    return body


def test_place_order_computes_total_and_snapshots_prices(api, customer, make_menu_item):
    tea = make_menu_item(name='Tea', price=10)
    singara = make_menu_item(name='Singara', price=15, category='snacks')
    status, data = api.post('/api/orders', _order_body(customer, [
        {'menuItemId': tea.pk, 'quantity': 2},
        {'menuItemId': singara.pk, 'quantity': 3},
    ]))
    assert status == 201
    order = data['order']
    assert order['totalAmount'] == 65
    assert order['orderStatus'] == 'pending'
    assert order['paymentStatus'] == 'pending'
    assert order['scheduledDate'] is None
    assert [(i['menuItemId'], i['quantity'], i['price']) for i in data['orderItems']] == [
        (tea.pk, 2, 10), (singara.pk, 3, 15),
    ]
    assert OrderItem.objects.filter(order_id=order['id']).count() == 2


def test_line_price_is_not_affected_by_later_menu_changes(api, customer, make_menu_item):
    tea = make_menu_item(price=10)
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    MenuItem.objects.filter(pk=tea.pk).update(price=99)

    _, detail = api.get(f'/api/orders/{data["order"]["id"]}')
    assert detail['order']['totalAmount'] == 10
    assert detail['orderItems'][0]['price'] == 10
    assert detail['orderItems'][0]['menuItem']['price'] == 99


@pytest.mark.parametrize('bad_item, status, code', [
    ('missing', 404, 'MENU_ITEM_NOT_FOUND'),
    ('unavailable', 400, 'MENU_ITEM_UNAVAILABLE'),
])
def test_failed_line_persists_nothing(api, customer, make_menu_item, bad_item, status, code):
    tea = make_menu_item()
    off_menu = make_menu_item(name='Coffee', available=False)
    bad_id = 999 if bad_item == 'missing' else off_menu.pk
    got_status, data = api.post('/api/orders', _order_body(customer, [
        {'menuItemId': tea.pk, 'quantity': 1},
        {'menuItemId': bad_id, 'quantity': 1},
    ]))
    assert got_status == status
    assert data['code'] == code
    assert data['menuItemId'] == bad_id
    assert not Order.objects.exists()
    assert not OrderItem.objects.exists()


@pytest.mark.parametrize('overrides, code', [
    ({'userId': None}, 'MISSING_REQUIRED_FIELDS'),
    ({'department': ''}, 'MISSING_REQUIRED_FIELDS'),
    ({'orderType': 'later'}, 'INVALID_ORDER_TYPE'),
    ({'orderType': 'scheduled'}, 'MISSING_SCHEDULED_DATE'),
    ({'paymentMethod': 'cash'}, 'INVALID_PAYMENT_METHOD'),
    ({'items': []}, 'EMPTY_ORDER'),
])
def test_place_order_validation(api, customer, make_menu_item, overrides, code):
    tea = make_menu_item()
    body = _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}])
    body.update(overrides)
    status, data = api.post('/api/orders', body)
    assert status == 400
    assert data['code'] == code
    assert not Order.objects.exists()


def test_order_and_lines_roll_back_together(api, customer, make_menu_item, monkeypatch):
    tea = make_menu_item(name='Tea')
    roll = make_menu_item(name='Roll', price=50, category='snacks')
    create_line = OrderItem.objects.create
    calls = []

    def fail_second_line(**kwargs):
        calls.append(kwargs)
        if len(calls) == 2:
            raise RuntimeError('disk full')
        return create_line(**kwargs)

    monkeypatch.setattr(OrderItem.objects, 'create', fail_second_line)
    status, data = api.post('/api/orders', _order_body(customer, [
        {'menuItemId': tea.pk, 'quantity': 1},
        {'menuItemId': roll.pk, 'quantity': 1},
    ]))
    assert status == 500
    assert data == {'error': 'Internal server error: disk full'}
    assert len(calls) == 2
    assert not Order.objects.exists()
    assert not OrderItem.objects.exists()


@pytest.mark.parametrize('raw_id', ['{pk}abc', '{pk}.0', ' ', True])
def test_menu_item_id_in_body_must_be_a_whole_id(api, customer, make_menu_item, raw_id):
    tea = make_menu_item()
    menu_item_id = raw_id.format(pk=tea.pk) if isinstance(raw_id, str) else raw_id
    status, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': menu_item_id, 'quantity': 1}]))
    assert status == 404
    assert data['code'] == 'MENU_ITEM_NOT_FOUND'
    assert not Order.objects.exists()


def test_menu_item_id_as_digit_string_is_accepted(api, customer, make_menu_item):
    tea = make_menu_item()
    status, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': str(tea.pk), 'quantity': 1}]))
    assert status == 201
    assert data['orderItems'][0]['menuItemId'] == tea.pk


def test_user_id_in_body_must_be_a_whole_id(api, customer, make_menu_item):
    tea = make_menu_item()
    body = _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}], userId=f'{customer.pk}x')
    status, data = api.post('/api/orders', body)
    assert status == 404
    assert data['code'] == 'USER_NOT_FOUND'


@pytest.mark.parametrize('quantity', [0, -2, 1.5, '2'])
def test_place_order_rejects_bad_quantity(api, customer, make_menu_item, quantity):
    tea = make_menu_item()
    status, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': quantity}]))
    assert status == 400
    assert data['code'] == 'INVALID_QUANTITY'
    assert not Order.objects.exists()


def test_place_order_unknown_user(api, customer, make_menu_item):
    tea = make_menu_item()
    body = _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}], userId=12345)
    status, data = api.post('/api/orders', body)
    assert status == 404
    assert data['code'] == 'USER_NOT_FOUND'


def test_scheduled_order_keeps_date(api, customer, make_menu_item):
    tea = make_menu_item()
    status, data = api.post('/api/orders', _order_body(
        customer, [{'menuItemId': tea.pk, 'quantity': 1}],
        orderType='scheduled', scheduledDate='2026-10-20',
    ))
    assert status == 201
    assert data['order']['orderType'] == 'scheduled'
    assert data['order']['scheduledDate'] == '2026-10-20'


def test_list_orders_filters_and_paging(api, make_user, make_menu_item):
    alice = make_user(email='alice@example.edu')
    bob = make_user(email='bob@example.edu')
    tea = make_menu_item()
    for user in (alice, alice, bob):
        api.post('/api/orders', _order_body(user, [{'menuItemId': tea.pk, 'quantity': 1}]))
    newest = Order.objects.order_by('-id').first()
    newest.order_status = 'ready'
    newest.save()

    _, everything = api.get('/api/orders')
    assert [o['id'] for o in everything] == list(Order.objects.order_by('-id').values_list('id', flat=True))

    _, alices = api.get('/api/orders', {'userId': alice.pk})
    assert {o['userId'] for o in alices} == {alice.pk}
    assert len(alices) == 2

    _, ready = api.get('/api/orders', {'status': 'ready'})
    assert [o['id'] for o in ready] == [newest.pk]

    _, page = api.get('/api/orders', {'limit': 1, 'offset': 1})
    assert len(page) == 1
    assert page[0]['id'] == everything[1]['id']

    _, capped = api.get('/api/orders', {'limit': 1000})
    assert len(capped) == 3


def test_list_orders_include_status_eta(api, customer, make_menu_item):
    tea = make_menu_item()
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    order = Order.objects.get(pk=data['order']['id'])

    _, listed = api.get('/api/orders')
    expected = order.created_at + timedelta(minutes=15)
    assert listed[0]['estimatedReadyTime'] == expected.isoformat()

    order.order_status = 'cancelled'
    order.save()
    _, listed = api.get('/api/orders')
    assert listed[0]['estimatedReadyTime'] is None
    assert listed[0]['estimatedMinutes'] is None


def test_order_detail_uses_confirmation_eta(api, customer, make_menu_item):
    combo = make_menu_item(name='Tea Combo', price=40)
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': combo.pk, 'quantity': 3}]))
    before = timezone.now()
    status, detail = api.get(f'/api/orders/{data["order"]["id"]}')
    assert status == 200
    # 15 base + 3 items * 2 + 10 for a combo
    assert detail['estimatedMinutes'] == 31
    assert datetime.fromisoformat(detail['estimatedReadyTime']) > before + timedelta(minutes=30)


def test_order_detail_errors(api):
    assert api.get('/api/orders/x') == (400, {'error': 'Valid order ID is required', 'code': 'INVALID_ID'})
    assert api.get('/api/orders/77') == (404, {'error': 'Order not found', 'code': 'NOT_FOUND'})


def test_order_detail_survives_deleted_menu_item(api, customer, make_menu_item):
    tea = make_menu_item()
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    api.delete(f'/api/menu/{tea.pk}')
    status, detail = api.get(f'/api/orders/{data["order"]["id"]}')
    assert status == 200
    assert detail['orderItems'][0]['menuItemId'] is None
    assert detail['orderItems'][0]['menuItem'] is None


def test_admin_can_set_any_status(api, customer, make_menu_item):
    tea = make_menu_item()
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    order_id = data['order']['id']
    for new_status in ('delivered', 'pending', 'cancelled', 'preparing'):
        status, updated = api.put(f'/api/orders/{order_id}', {'orderStatus': new_status})
        assert status == 200
        assert updated['orderStatus'] == new_status
    status, updated = api.put(f'/api/orders/{order_id}', {'paymentStatus': 'completed', 'scheduledDate': '2026-11-01'})
    assert status == 200
    assert updated['paymentStatus'] == 'completed'
    assert updated['scheduledDate'] == '2026-11-01'
    assert updated['orderStatus'] == 'preparing'


@pytest.mark.parametrize('body, code', [
    ({'orderStatus': 'lost'}, 'INVALID_ORDER_STATUS'),
    ({'paymentStatus': 'refunded'}, 'INVALID_PAYMENT_STATUS'),
])
def test_update_order_validation(api, customer, make_menu_item, body, code):
    tea = make_menu_item()
    _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    status, resp = api.put(f'/api/orders/{data["order"]["id"]}', body)
    assert status == 400
    assert resp['code'] == code
    assert Order.objects.get(pk=data['order']['id']).order_status == 'pending'


def test_update_unknown_order(api):
    status, data = api.put('/api/orders/555', {'orderStatus': 'ready'})
    assert status == 404
    assert data['code'] == 'NOT_FOUND'


def test_order_changes_are_pushed_after_commit(api, customer, make_menu_item, monkeypatch,
                                               django_capture_on_commit_callbacks):
    pushed = []
    monkeypatch.setattr(order_notify, 'broadcast_order_event', pushed.append)
    tea = make_menu_item()
    with django_capture_on_commit_callbacks(execute=True):
        _, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    with django_capture_on_commit_callbacks(execute=True):
        api.put(f'/api/orders/{data["order"]["id"]}', {'orderStatus': 'confirmed'})
    assert [p['event'] for p in pushed] == ['order.created', 'order.updated']
    assert pushed[1]['order']['orderStatus'] == 'confirmed'


def test_unhandled_error_becomes_500(api, customer, make_menu_item, monkeypatch):
    from canteen import services

    def boom(*args, **kwargs):
        raise RuntimeError('database is locked')

    monkeypatch.setattr(services, 'place_order', boom)
    tea = make_menu_item()
    status, data = api.post('/api/orders', _order_body(customer, [{'menuItemId': tea.pk, 'quantity': 1}]))
    assert status == 500
    assert data == {'error': 'Internal server error: database is locked'}


def test_end_to_end_campus_order(api):
    status, registered = api.post('/api/auth/register', {
        'email': 'a@x.com', 'password': 'secret1', 'name': 'A', 'department': 'CSE',
    })
    assert status == 201
    status, logged_in = api.post('/api/auth/login', {'email': 'a@x.com', 'password': 'secret1'})
    assert status == 200
    assert logged_in['user']['role'] == 'customer'

    status, tea = api.post('/api/menu', {'name': 'Tea', 'price': 10, 'category': 'beverages'})
    assert status == 201
    assert tea['available'] is True

    user_id = logged_in['user']['id']
    status, placed = api.post('/api/orders', {
        'userId': user_id, 'orderType': 'instant', 'paymentMethod': 'nagad',
        'department': 'CSE', 'items': [{'menuItemId': tea['id'], 'quantity': 2}],
    })
    assert status == 201
    assert placed['order']['totalAmount'] == 20
    assert Order.objects.count() == 1
    assert OrderItem.objects.count() == 1

    status, detail = api.get(f'/api/orders/{placed["order"]["id"]}')
    assert status == 200
    assert detail['order']['id'] == placed['order']['id']
    assert detail['orderItems'][0]['menuItem']['name'] == 'Tea'
    assert detail['user'] == {'id': user_id, 'email': 'a@x.com', 'name': 'A', 'department': 'CSE'}
