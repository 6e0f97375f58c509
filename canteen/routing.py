from django.urls import path

from canteen.consumers import OrderFeedConsumer

websocket_urlpatterns = [
    path('ws/orders/', OrderFeedConsumer.as_asgi()),
]
