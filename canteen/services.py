"""
Reusable business logic for checkout, order status, payments and accounts.
Views parse and validate transport details; the rules live here.
"""
import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from .constants import (
    DEFAULT_DEPARTMENT,
    MIN_PASSWORD_LENGTH,
    VALID_ORDER_STATUSES,
    VALID_PAYMENT_STATUSES,
)
from .hashers import hash_password, verify_password
from .models import (
    MenuItem,
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentStatus,
    User,
    UserRole,
)
from .order_notify import notify_order_update
from .utils import ApiError, is_blank, parse_body_id

logger = logging.getLogger(__name__)


# --- Pricing ---

@dataclass(frozen=True)
class PricedLine:
    menu_item: MenuItem
    quantity: int
    price: float

    @property
    def total(self):
        return self.price * self.quantity


def _parse_quantity(raw):
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if not isinstance(raw, int) or raw <= 0:
        return None
    return raw


def price_order_lines(items):
    """
    Validate requested lines against the current menu and compute the total.
    items: sequence of {"menuItemId", "quantity"}. Reads only; raises ApiError on the
    first unknown or unavailable item. Returns (lines, total).
    """
    lines = []
    total = 0
    for entry in items:
        entry = entry if isinstance(entry, dict) else {}
        raw_id = entry.get('menuItemId')
        quantity = _parse_quantity(entry.get('quantity'))
        if quantity is None:
            raise ApiError(
                'Quantity must be a positive integer',
                'INVALID_QUANTITY',
                400,
                menuItemId=raw_id,
            )
        menu_item_id = parse_body_id(raw_id)
        menu_item = MenuItem.objects.filter(pk=menu_item_id).first() if menu_item_id is not None else None
        if menu_item is None:
            raise ApiError('Menu item not found', 'MENU_ITEM_NOT_FOUND', 404, menuItemId=raw_id)
        if not menu_item.available:
            raise ApiError('Menu item not available', 'MENU_ITEM_UNAVAILABLE', 400, menuItemId=raw_id)
        line = PricedLine(menu_item=menu_item, quantity=quantity, price=menu_item.price)
        total += line.total
        lines.append(line)
    return lines, total


def place_order(user, order_type, payment_method, department, items, scheduled_date=None):
    """
    Price the lines, then write the Order and its OrderItems in one transaction.
    Nothing is written when any line fails validation. Returns (order, order_items).
    """
    lines, total = price_order_lines(items)
    with transaction.atomic():
        order = Order.objects.create(
            user=user,
            order_type=order_type,
            scheduled_date=scheduled_date or None,
            total_amount=total,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING,
            order_status=OrderStatus.PENDING,
            department=department,
        )
        order_items = [
            OrderItem.objects.create(
                order=order,
                menu_item=line.menu_item,
                quantity=line.quantity,
                price=line.price,
            )
            for line in lines
        ]
        notify_order_update(order, 'order.created')
    logger.info('Order %s placed by user %s: %s line(s), total %s', order.pk, user.pk, len(order_items), total)
    return order, order_items


# --- Order status ---

# None: every status may move to every other status.
# A stricter pipeline can be set here, e.g. {'pending': {'confirmed', 'cancelled'}, ...}
ALLOWED_STATUS_TRANSITIONS = None


def can_transition(current, new):
    if new not in VALID_ORDER_STATUSES:
        return False
    if ALLOWED_STATUS_TRANSITIONS is None:
        return True
    return new == current or new in ALLOWED_STATUS_TRANSITIONS.get(current, ())


def set_order_status(order, new_status):
    """Single entry point for order status changes. Does not save."""
    if not can_transition(order.order_status, new_status):
        raise ApiError('Invalid order status', 'INVALID_ORDER_STATUS', 400)
    if order.order_status != new_status:
        logger.info('Order %s status %s -> %s', order.pk, order.order_status, new_status)
    order.order_status = new_status
    return order


def update_order(order, order_status=None, payment_status=None, scheduled_date=None, fields=()):
    """Apply an admin update. fields names which of the keyword values were supplied."""
    if 'orderStatus' in fields and order_status not in VALID_ORDER_STATUSES:
        raise ApiError('Invalid order status', 'INVALID_ORDER_STATUS', 400)
    if 'paymentStatus' in fields and payment_status not in VALID_PAYMENT_STATUSES:
        raise ApiError('Invalid payment status', 'INVALID_PAYMENT_STATUS', 400)
    with transaction.atomic():
        if 'orderStatus' in fields:
            set_order_status(order, order_status)
        if 'paymentStatus' in fields:
            order.payment_status = payment_status
        if 'scheduledDate' in fields:
            order.scheduled_date = scheduled_date
        order.save()
        notify_order_update(order, 'order.updated')
    return order


# --- Payments ---

def record_payment(order, amount, payment_method, transaction_id=None, payment_status=None):
    """Create a Payment; a completed payment marks the order's payment as completed."""
    status = payment_status or PaymentStatus.COMPLETED
    with transaction.atomic():
        payment = Payment.objects.create(
            order=order,
            amount=amount,
            payment_method=payment_method,
            transaction_id=transaction_id or None,
            payment_status=status,
        )
        if status == PaymentStatus.COMPLETED:
            Order.objects.filter(pk=order.pk).update(
                payment_status=PaymentStatus.COMPLETED,
                updated_at=timezone.now(),
            )
            order.refresh_from_db()
            notify_order_update(order, 'payment.completed')
    logger.info('Payment %s recorded for order %s (%s, %s)', payment.pk, order.pk, payment_method, status)
    return payment


# --- Accounts ---

def normalize_email(email):
    return str(email).strip().lower()


def register_user(email, password, name, department=None, phone=None):
    """Create a customer account. Self-registration never creates admins."""
    email = normalize_email(email)
    if '@' not in email:
        raise ApiError('Invalid email or password format', 'INVALID_FORMAT', 400)
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ApiError('Invalid email or password format', 'INVALID_FORMAT', 400)
    if User.objects.filter(email=email).exists():
        raise ApiError('User with this email already exists', 'USER_EXISTS', 409)
    department = str(department).strip() if not is_blank(department) else DEFAULT_DEPARTMENT
    user = User.objects.create(
        username=email,
        email=email,
        password=hash_password(password),
        role=UserRole.CUSTOMER,
        name=str(name).strip(),
        department=department,
        phone=phone or None,
    )
    logger.info('Registered user %s', user.pk)
    return user


INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'


def authenticate_user(email, password):
    """Return the user for valid credentials; same ApiError for unknown email and wrong password."""
    user = User.objects.filter(email=normalize_email(email)).first()
    if user is None or not verify_password(str(password), user.password):
        raise ApiError(INVALID_CREDENTIALS_MESSAGE, 'INVALID_CREDENTIALS', 401)
    return user


PROFILE_FIELDS = ('name', 'designation', 'department', 'phone')


def update_profile(user, body):
    """Profile completion: only non-empty values overwrite."""
    changed = []
    for field in PROFILE_FIELDS:
        value = body.get(field)
        if not is_blank(value):
            setattr(user, field, value)
            changed.append(field)
    if changed:
        user.save(update_fields=changed)
    return user
