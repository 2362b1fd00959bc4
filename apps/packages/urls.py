from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PackageViewSet

app_name = 'packages'

router = DefaultRouter()
router.register(r'', PackageViewSet, basename='package')

urlpatterns = [
    path('', include(router.urls)),
]
