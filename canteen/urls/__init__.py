# URL packages - one module per API area
from django.urls import path, include

from canteen.views.department_views import department_list
from canteen.views.payment_views import payment_create
from canteen.views.user_views import user_update

urlpatterns = [
    path('auth/', include('canteen.urls.auth_urls')),
    path('', include('canteen.urls.menu_urls')),
    path('', include('canteen.urls.order_urls')),
    path('payments', payment_create),
    path('users/<str:pk>', user_update),
    path('departments', department_list),
]
