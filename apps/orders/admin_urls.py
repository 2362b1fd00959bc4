from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'admin-orders'

router = SimpleRouter()
router.register(r'orders', views.AdminOrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/admin/orders/               - Filtered order list
    # GET    /api/admin/orders/{id}/          - Order details
    # PUT    /api/admin/orders/{id}/approve/  - Approve and issue license
    # PUT    /api/admin/orders/{id}/reject/   - Reject with reason
    path('dashboard/', views.dashboard, name='dashboard'),

    path('', include(router.urls)),
]
