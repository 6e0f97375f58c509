"""
Function-based auth views: register, login, logout.
Login also issues a DRF token, used by the admin live order feed.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import csrf_exempt
from rest_framework.authtoken.models import Token

from canteen import services
from canteen.utils import api_errors, is_blank, json_error, parse_json_body, serialize_value


def _user_to_dict(user):
    """Public user fields; the password hash is never included."""
    if not user:
        return None
    return {
        'id': user.id,
        'email': user.email,
        'role': user.role,
        'name': user.name,
        'department': user.department,
        'designation': user.designation,
        'phone': user.phone,
        'createdAt': serialize_value(user.created_at),
    }


@csrf_exempt
@require_http_methods(['POST'])
@api_errors
def register(request):
    """POST JSON: email, password, name (required), department, phone."""
    body = parse_json_body(request)
    email = body.get('email')
    password = body.get('password')
    name = body.get('name')
    if is_blank(email) or is_blank(password) or is_blank(name):
        return json_error('Email, password, and name are required', 'MISSING_REQUIRED_FIELDS', 400)
    user = services.register_user(
        email,
        password,
        name,
        department=body.get('department'),
        phone=body.get('phone'),
    )
    return JsonResponse(
        {'user': _user_to_dict(user), 'message': 'Registration successful'},
        status=201,
    )


@csrf_exempt
@require_http_methods(['POST'])
@api_errors
def login(request):
    """POST JSON: email, password. Returns { user, token, message } or 401."""
    body = parse_json_body(request)
    email = body.get('email')
    password = body.get('password')
    if is_blank(email) or is_blank(password):
        return json_error('Email and password are required', 'MISSING_CREDENTIALS', 400)
    user = services.authenticate_user(email, password)
    token, _ = Token.objects.get_or_create(user=user)
    return JsonResponse({
        'user': _user_to_dict(user),
        'token': token.key,
        'message': 'Login successful',
    })


@csrf_exempt
@require_http_methods(['POST'])
@api_errors
def logout(request):
    """Invalidate the bearer token, if any."""
    auth_header = request.META.get('HTTP_AUTHORIZATION')
    if auth_header and auth_header.startswith('Bearer '):
        key = auth_header[7:].strip()
        Token.objects.filter(key=key).delete()
    return JsonResponse({'success': True})
