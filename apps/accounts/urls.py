from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),
    path('token/refresh/', views.token_refresh, name='token-refresh'),

    # Session
    path('session/status/', views.session_status, name='session-status'),

    # User profile
    path('me/', views.me, name='me'),
]
