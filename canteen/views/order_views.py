"""Orders: list, create (checkout), detail and admin update. Function-based."""
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import csrf_exempt

from canteen import eta, services
from canteen.constants import (
    ORDER_LIST_DEFAULT_LIMIT,
    ORDER_LIST_MAX_LIMIT,
    VALID_ORDER_TYPES,
    VALID_PAYMENT_METHODS,
)
from canteen.models import Order, OrderType, User
from canteen.utils import ApiError, api_errors, is_blank, json_error, parse_body_id, parse_id, parse_json_body, serialize_value
from canteen.views.menu_views import _menu_item_to_dict


def _order_to_dict(o, include_eta=False):
    d = {
        'id': o.id,
        'userId': o.user_id,
        'orderType': o.order_type,
        'scheduledDate': o.scheduled_date,
        'totalAmount': o.total_amount,
        'paymentMethod': o.payment_method,
        'paymentStatus': o.payment_status,
        'orderStatus': o.order_status,
        'department': o.department,
        'createdAt': serialize_value(o.created_at),
        'updatedAt': serialize_value(o.updated_at),
    }
    if include_eta:
        d.update(eta.summarize(eta.estimate_for_order(o, eta.STATUS)))
    return d


def _order_item_to_dict(i, include_menu_item=False):
    d = {
        'id': i.id,
        'orderId': i.order_id,
        'menuItemId': i.menu_item_id,
        'quantity': i.quantity,
        'price': i.price,
        'createdAt': serialize_value(i.created_at),
    }
    if include_menu_item:
        m = i.menu_item if i.menu_item_id else None
        d['menuItem'] = {
            k: v for k, v in _menu_item_to_dict(m).items()
            if k in ('id', 'name', 'description', 'category', 'imageUrl', 'price')
        } if m else None
    return d


def _get_order(pk):
    order_id = parse_id(pk)
    if order_id is None:
        raise ApiError('Valid order ID is required', 'INVALID_ID', 400)
    order = Order.objects.select_related('user').filter(pk=order_id).first()
    if order is None:
        raise ApiError('Order not found', 'NOT_FOUND', 404)
    return order


def _int_param(raw, default):
    value = parse_id(raw) if raw not in (None, '') else None
    return default if value is None else value


def _order_list(request):
    qs = Order.objects.all()
    user_id = request.GET.get('userId')
    if user_id:
        parsed = parse_id(user_id)
        if parsed is None:
            return JsonResponse([], safe=False)
        qs = qs.filter(user_id=parsed)
    status = request.GET.get('status')
    if status:
        qs = qs.filter(order_status=status)
    order_type = request.GET.get('orderType')
    if order_type:
        qs = qs.filter(order_type=order_type)
    limit = max(0, min(_int_param(request.GET.get('limit'), ORDER_LIST_DEFAULT_LIMIT), ORDER_LIST_MAX_LIMIT))
    offset = max(0, _int_param(request.GET.get('offset'), 0))
    qs = qs.order_by('-created_at', '-id')[offset:offset + limit]
    return JsonResponse([_order_to_dict(o, include_eta=True) for o in qs], safe=False)


def _order_create(request):
    body = parse_json_body(request)
    user_id = body.get('userId')
    order_type = body.get('orderType')
    scheduled_date = body.get('scheduledDate')
    payment_method = body.get('paymentMethod')
    department = body.get('department')
    items = body.get('items')
    if any(is_blank(v) for v in (user_id, order_type, payment_method, department, items)):
        return json_error(
            'userId, orderType, paymentMethod, department and items are required',
            'MISSING_REQUIRED_FIELDS',
            400,
        )
    if order_type not in VALID_ORDER_TYPES:
        return json_error('orderType must be instant or scheduled', 'INVALID_ORDER_TYPE', 400)
    if order_type == OrderType.SCHEDULED and is_blank(scheduled_date):
        return json_error('scheduledDate is required for scheduled orders', 'MISSING_SCHEDULED_DATE', 400)
    if payment_method not in VALID_PAYMENT_METHODS:
        return json_error('paymentMethod must be bkash, nagad, or card', 'INVALID_PAYMENT_METHOD', 400)
    if not isinstance(items, list) or not items:
        return json_error('Order must contain at least one item', 'EMPTY_ORDER', 400)
    parsed_user_id = parse_body_id(user_id)
    user = User.objects.filter(pk=parsed_user_id).first() if parsed_user_id is not None else None
    if user is None:
        return json_error('User not found', 'USER_NOT_FOUND', 404)
    order, order_items = services.place_order(
        user,
        order_type,
        payment_method,
        str(department),
        items,
        scheduled_date=scheduled_date,
    )
    return JsonResponse(
        {
            'order': _order_to_dict(order),
            'orderItems': [_order_item_to_dict(i) for i in order_items],
        },
        status=201,
    )


@csrf_exempt
@require_http_methods(['GET', 'POST'])
@api_errors
def order_collection(request):
    """
    GET /api/orders - newest first; filters: userId, status, orderType, limit (<= 100), offset.
    POST /api/orders - checkout. Required: userId, orderType, paymentMethod, department, items
    ([{menuItemId, quantity}]); scheduledDate when orderType is scheduled.
    """
    if request.method == 'POST':
        return _order_create(request)
    return _order_list(request)


def _order_detail(request, pk):
    order = _get_order(pk)
    items = order.items.select_related('menu_item').all()
    user = order.user
    d = {
        'order': _order_to_dict(order),
        'orderItems': [_order_item_to_dict(i, include_menu_item=True) for i in items],
        'user': {
            'id': user.id,
            'email': user.email,
            'name': user.name,
            'department': user.department,
        } if user else None,
    }
    d.update(eta.summarize(eta.estimate_for_order(order, eta.CONFIRMATION)))
    return JsonResponse(d)


def _order_update(request, pk):
    order = _get_order(pk)
    body = parse_json_body(request)
    fields = [k for k in ('orderStatus', 'paymentStatus', 'scheduledDate') if k in body]
    order = services.update_order(
        order,
        order_status=body.get('orderStatus'),
        payment_status=body.get('paymentStatus'),
        scheduled_date=body.get('scheduledDate'),
        fields=fields,
    )
    return JsonResponse(_order_to_dict(order))


@csrf_exempt
@require_http_methods(['GET', 'PUT'])
@api_errors
def order_detail(request, pk):
    """
    GET /api/orders/<id> - order, its lines (with menu item) and the customer; plus the
    confirmation-screen ETA (estimatedReadyTime, estimatedMinutes).
    PUT /api/orders/<id> - admin update of orderStatus, paymentStatus, scheduledDate.
    """
    if request.method == 'PUT':
        return _order_update(request, pk)
    return _order_detail(request, pk)
