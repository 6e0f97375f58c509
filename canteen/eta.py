"""
Estimated ready time for orders. Derived on every read, never stored.

Two formulas are in use:
- STATUS: order lists (customer and admin). Measured from the order's creation
  time and shortened as the order moves through the kitchen.
- CONFIRMATION: order confirmation screen. Measured from now and driven by
  basket size and complex items; ignores status.
"""
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional, Tuple

from django.utils import timezone

STATUS = 'status'
CONFIRMATION = 'confirmation'

BASE_MINUTES = 15
SCHEDULED_EXTRA_MINUTES = 10

STATUS_MULTIPLIERS = {
    'pending': 1.0,
    'confirmed': 0.7,
    'preparing': 0.3,
}
DEFAULT_MULTIPLIER = 1.0
NO_ESTIMATE_STATUSES = frozenset({'delivered', 'cancelled'})
READY_STATUS = 'ready'

PER_ITEM_MINUTES = 2
MAX_ITEM_MINUTES = 20
COMPLEX_ITEM_MINUTES = 10
COMPLEX_ITEM_MARKERS = ('special', 'combo')


def _base_minutes(order_type: str) -> float:
    minutes = BASE_MINUTES
    if order_type == 'scheduled':
        minutes += SCHEDULED_EXTRA_MINUTES
    return minutes


def status_minutes(order_type: str, order_status: str) -> float:
    """Minutes after creation for the STATUS formula (statuses without an estimate excluded)."""
    multiplier = STATUS_MULTIPLIERS.get(order_status, DEFAULT_MULTIPLIER)
    return _base_minutes(order_type) * multiplier


def confirmation_minutes(order_type: str, items: Iterable[Tuple[str, int]]) -> float:
    """Minutes from now for the CONFIRMATION formula. items: (menu item name, quantity) pairs."""
    items = list(items)
    item_count = sum(quantity for _, quantity in items)
    minutes = _base_minutes(order_type) + min(item_count * PER_ITEM_MINUTES, MAX_ITEM_MINUTES)
    if any(
        marker in (name or '').lower()
        for name, _ in items
        for marker in COMPLEX_ITEM_MARKERS
    ):
        minutes += COMPLEX_ITEM_MINUTES
    return minutes


def estimate_ready_time(
    order_type: str,
    order_status: str,
    created_at: Optional[datetime],
    *,
    variant: str = STATUS,
    items: Iterable[Tuple[str, int]] = (),
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Return the estimated ready time for an order, or None when there is none.

    variant=STATUS uses (order_type, order_status, created_at);
    variant=CONFIRMATION uses (order_type, items) and the current time.
    """
    now = now or timezone.now()
    if variant == CONFIRMATION:
        return now + timedelta(minutes=confirmation_minutes(order_type, items))
    if variant != STATUS:
        raise ValueError(f'Unknown ETA variant: {variant}')
    if order_status in NO_ESTIMATE_STATUSES:
        return None
    if order_status == READY_STATUS:
        return now
    if created_at is None:
        return None
    return created_at + timedelta(minutes=status_minutes(order_type, order_status))


def estimate_for_order(order, variant: str = STATUS, now: Optional[datetime] = None) -> Optional[datetime]:
    """Estimate for a saved Order. CONFIRMATION reads the order's lines and menu item names."""
    items = ()
    if variant == CONFIRMATION:
        items = [
            (line.menu_item.name if line.menu_item_id and line.menu_item else '', line.quantity)
            for line in order.items.select_related('menu_item').all()
        ]
    return estimate_ready_time(
        order.order_type,
        order.order_status,
        order.created_at,
        variant=variant,
        items=items,
        now=now,
    )


def summarize(estimate: Optional[datetime], now: Optional[datetime] = None) -> Mapping[str, object]:
    """Wire form: ISO timestamp plus whole minutes remaining (None when no estimate)."""
    if estimate is None:
        return {'estimatedReadyTime': None, 'estimatedMinutes': None}
    now = now or timezone.now()
    return {
        'estimatedReadyTime': estimate.isoformat(),
        'estimatedMinutes': round((estimate - now).total_seconds() / 60),
    }
