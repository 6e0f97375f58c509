"""Orders API URL configuration."""
from django.urls import path

from canteen.views.order_views import order_collection, order_detail

urlpatterns = [
    path('orders', order_collection),
    path('orders/<str:pk>', order_detail),
]
