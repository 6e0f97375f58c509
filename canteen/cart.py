"""
Shopping cart and client session state.

The cart is a mapping of menu item id -> (menu item snapshot, quantity). Carts are
persisted in a keyed store (Django cache) under one key per user, or a guest key.
ClientSession ties the signed-in user to their cart: switching to another user or
logging out clears the cart.
"""
from django.core.cache import cache

GUEST_CART_KEY = 'cart-storage-guest'
CART_TTL = None  # keep until cleared


class CartLine:
    __slots__ = ('menu_item', 'quantity')

    def __init__(self, menu_item, quantity):
        self.menu_item = dict(menu_item)
        self.quantity = quantity

    @property
    def menu_item_id(self):
        return self.menu_item['id']

    @property
    def total(self):
        return self.menu_item['price'] * self.quantity

    def to_dict(self):
        return {'menuItem': self.menu_item, 'quantity': self.quantity}


class Cart:
    """menu_item arguments are the API's menu item dicts (id, name, price, ...)."""

    def __init__(self, lines=None):
        self._lines = {}
        for line in lines or ():
            self._lines[line.menu_item_id] = line

    @property
    def lines(self):
        return list(self._lines.values())

    def __len__(self):
        return len(self._lines)

    def __contains__(self, menu_item_id):
        return menu_item_id in self._lines

    def get(self, menu_item_id):
        return self._lines.get(menu_item_id)

    def add(self, menu_item, quantity=1):
        line = self._lines.get(menu_item['id'])
        if line:
            line.quantity += quantity
        else:
            self._lines[menu_item['id']] = CartLine(menu_item, quantity)

    def remove(self, menu_item_id):
        self._lines.pop(menu_item_id, None)

    def set_quantity(self, menu_item_id, quantity):
        if quantity <= 0:
            self.remove(menu_item_id)
            return
        line = self._lines.get(menu_item_id)
        if line:
            line.quantity = quantity

    def clear(self):
        self._lines.clear()

    @property
    def total_price(self):
        return sum(line.total for line in self._lines.values())

    @property
    def total_items(self):
        return sum(line.quantity for line in self._lines.values())

    def to_order_items(self):
        """Checkout payload for POST /api/orders ("items")."""
        return [
            {'menuItemId': line.menu_item_id, 'quantity': line.quantity}
            for line in self._lines.values()
        ]

    def to_dict(self):
        return {'items': [line.to_dict() for line in self._lines.values()]}

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls([
            CartLine(entry['menuItem'], entry['quantity'])
            for entry in data.get('items', [])
        ])


def cart_key(user_id=None):
    return f'cart-storage-{user_id}' if user_id is not None else GUEST_CART_KEY


class CartStore:
    """Persist carts per user id (None = guest) in the default cache."""

    def __init__(self, backend=None):
        self.backend = backend or cache

    def load(self, user_id=None):
        return Cart.from_dict(self.backend.get(cart_key(user_id)))

    def save(self, cart, user_id=None):
        self.backend.set(cart_key(user_id), cart.to_dict(), timeout=CART_TTL)

    def clear(self, user_id=None):
        self.backend.delete(cart_key(user_id))


class ClientSession:
    """Signed-in user (API user dict or None) plus that user's cart."""

    def __init__(self, store=None, user=None):
        self.store = store or CartStore()
        self.user = user
        self.cart = self.store.load(self.user_id)

    @property
    def user_id(self):
        return self.user['id'] if self.user else None

    def set_user(self, user):
        """Sign in. A different user than before starts with an empty cart."""
        previous_id = self.user_id
        self.user = user
        if user is not None and previous_id != user['id']:
            self.store.clear(self.user_id)
            self.cart = Cart()
        else:
            self.cart = self.store.load(self.user_id)

    def logout(self):
        self.store.clear(self.user_id)
        self.user = None
        self.cart = Cart()
        self.store.clear(None)

    def save(self):
        self.store.save(self.cart, self.user_id)
