"""
ASGI config for teabar project.

HTTP goes to Django; WebSocket connections go to the live order feed.
"""

import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'teabar.settings')

from django.core.asgi import get_asgi_application

django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter
from canteen.routing import websocket_urlpatterns

application = ProtocolTypeRouter({
    'http': django_asgi_app,
    'websocket': URLRouter(websocket_urlpatterns),
})
