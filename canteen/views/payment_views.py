from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import csrf_exempt

from canteen import services
from canteen.constants import VALID_PAYMENT_METHODS, VALID_PAYMENT_STATUSES
from canteen.models import Order
from canteen.utils import api_errors, is_blank, is_positive_number, json_error, parse_body_id, parse_json_body, serialize_value


def _payment_to_dict(p):
    return {
        'id': p.id,
        'orderId': p.order_id,
        'amount': p.amount,
        'paymentMethod': p.payment_method,
        'transactionId': p.transaction_id,
        'paymentStatus': p.payment_status,
        'createdAt': serialize_value(p.created_at),
    }


@csrf_exempt
@require_http_methods(['POST'])
@api_errors
def payment_create(request):
    """
    POST /api/payments - orderId, amount, paymentMethod (required), transactionId, paymentStatus
    (default completed). A completed payment marks the order as paid.
    """
    body = parse_json_body(request)
    order_id = body.get('orderId')
    amount = body.get('amount')
    payment_method = body.get('paymentMethod')
    payment_status = body.get('paymentStatus')
    if is_blank(order_id) or is_blank(amount) or is_blank(payment_method):
        return json_error('orderId, amount and paymentMethod are required', 'MISSING_REQUIRED_FIELDS', 400)
    if not is_positive_number(amount):
        return json_error('Amount must be a positive number', 'INVALID_AMOUNT', 400)
    if payment_method not in VALID_PAYMENT_METHODS:
        return json_error('paymentMethod must be bkash, nagad, or card', 'INVALID_PAYMENT_METHOD', 400)
    if not is_blank(payment_status) and payment_status not in VALID_PAYMENT_STATUSES:
        return json_error('paymentStatus must be pending or completed', 'INVALID_PAYMENT_STATUS', 400)
    parsed_order_id = parse_body_id(order_id)
    order = Order.objects.filter(pk=parsed_order_id).first() if parsed_order_id is not None else None
    if order is None:
        return json_error('Order not found', 'ORDER_NOT_FOUND', 404)
    payment = services.record_payment(
        order,
        amount,
        payment_method,
        transaction_id=body.get('transactionId'),
        payment_status=payment_status or None,
    )
    return JsonResponse(
        {'payment': _payment_to_dict(payment), 'message': 'Payment recorded successfully'},
        status=201,
    )
