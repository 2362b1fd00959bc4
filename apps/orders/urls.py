from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'orders', views.OrderViewSet, basename='order')

urlpatterns = [
    # POST   /api/orders/                - Create order (returns order + payment)
    # GET    /api/orders/{id}/           - Order details
    # POST   /api/orders/{id}/confirm/   - Customer confirms transfer
    # GET    /api/orders/{id}/status/    - Status poll
    # GET    /api/orders/{id}/payment/   - Payment instructions
    path('users/orders/', views.my_orders, name='my-orders'),

    path('', include(router.urls)),
]
