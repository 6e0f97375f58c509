"""Menu API URL configuration."""
from django.urls import path

from canteen.views.menu_views import menu_collection, menu_detail, menu_item_qr

urlpatterns = [
    path('menu', menu_collection),
    path('menu/<str:pk>', menu_detail),
    path('menu/<str:pk>/qr', menu_item_qr),
]
