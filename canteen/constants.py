"""Shared constants for validation and static lookups."""
from canteen.models import MenuCategory, OrderStatus, OrderType, PaymentMethod, PaymentStatus

DEPARTMENTS = (
    {'code': 'CSE', 'name': 'Computer Science and Engineering'},
    {'code': 'EEE', 'name': 'Electrical and Electronic Engineering'},
    {'code': 'CE', 'name': 'Civil Engineering'},
    {'code': 'ME', 'name': 'Mechanical Engineering'},
    {'code': 'TE', 'name': 'Textile Engineering'},
    {'code': 'Architecture', 'name': 'Architecture'},
    {'code': 'BBA', 'name': 'Business Administration'},
    {'code': 'English', 'name': 'English'},
    {'code': 'Law', 'name': 'Law'},
    {'code': 'Administration', 'name': 'Administration'},
)

DEFAULT_DEPARTMENT = 'Not Specified'

MIN_PASSWORD_LENGTH = 6

VALID_CATEGORIES = frozenset(MenuCategory.values)
VALID_ORDER_TYPES = frozenset(OrderType.values)
VALID_ORDER_STATUSES = frozenset(OrderStatus.values)
VALID_PAYMENT_METHODS = frozenset(PaymentMethod.values)
VALID_PAYMENT_STATUSES = frozenset(PaymentStatus.values)

ORDER_LIST_DEFAULT_LIMIT = 50
ORDER_LIST_MAX_LIMIT = 100

# Payload printed on menu item QR codes and read back by the scanner page
MENU_QR_PREFIX = 'MENU_ITEM_ID:'
