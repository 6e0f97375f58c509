"""
WebSocket consumer for the admin live order feed. Replaces polling the order list:
admins connect once and receive order created / updated / paid events.
"""
import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from rest_framework.authtoken.models import Token

from canteen.order_notify import ORDER_FEED_GROUP

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_admin_for_token(token_key):
    """Resolve an admin User from a DRF Token. Returns (user, None) or (None, error)."""
    try:
        token = Token.objects.select_related('user').get(key=token_key)
    except Token.DoesNotExist:
        return None, 'Invalid token'
    if not token.user.is_admin:
        return None, 'Forbidden'
    return token.user, None


class OrderFeedConsumer(AsyncJsonWebsocketConsumer):
    """URL: /ws/orders/?token=..."""

    async def connect(self):
        params = parse_qs(self.scope.get('query_string', b'').decode())
        token = (params.get('token') or [''])[0]
        if not token:
            await self.close(code=4001)
            return
        user, err = await get_admin_for_token(token)
        if err:
            logger.info('Order feed connection refused: %s', err)
            await self.close(code=4003)
            return
        self.user_id = user.pk
        await self.channel_layer.group_add(ORDER_FEED_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        if hasattr(self, 'user_id'):
            await self.channel_layer.group_discard(ORDER_FEED_GROUP, self.channel_name)

    async def order_update(self, event):
        """Handle broadcast from notify_order_update."""
        await self.send_json(event.get('payload', {}))
