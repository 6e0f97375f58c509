"""Auth API URL configuration."""
from django.urls import path

from canteen.views.auth_views import login, logout, register

urlpatterns = [
    path('register', register),
    path('login', login),
    path('logout', logout),
]
