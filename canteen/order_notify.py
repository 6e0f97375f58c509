"""
Push order changes to the admin live feed (WebSocket group).
Call inside the write transaction; the push happens after commit.
"""
import logging

from django.db import transaction

logger = logging.getLogger(__name__)

ORDER_FEED_GROUP = 'orders_feed'

EVENT_LABELS = {
    'order.created': 'New order',
    'order.updated': 'Order updated',
    'payment.completed': 'Payment received',
}


def broadcast_order_event(payload):
    """Send payload to every connected admin. Returns False when the push failed."""
    try:
        from asgiref.sync import async_to_sync
        from channels.layers import get_channel_layer
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.info('No channel layer configured; skipping order feed push')
            return False
        async_to_sync(channel_layer.group_send)(
            ORDER_FEED_GROUP,
            {'type': 'order.update', 'payload': payload},
        )
        return True
    except Exception as e:
        logger.exception('Order feed push failed: %s', e)
        return False


def notify_order_update(order, event):
    """Queue a feed push for this order once the surrounding transaction commits."""
    from canteen.views.order_views import _order_to_dict

    payload = {
        'event': event,
        'label': EVENT_LABELS.get(event, event),
        'order': _order_to_dict(order),
    }
    transaction.on_commit(lambda: broadcast_order_event(payload))
