import pytest
from rest_framework.test import APIClient
from apps.packages.models import Package


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def package(db):
    """The featured 3-month package."""
    return Package.objects.create(
        name='3 Tháng',
        slug='3-thang',
        duration_months=3,
        original_price=1497000,
        sale_price=1199000,
        discount_percent=20,
        features=['Tạo 150 video/tháng', 'SEO nâng cao'],
        max_devices=2,
        is_popular=True,
        sort_order=2,
    )


@pytest.fixture
def cheap_package(db):
    return Package.objects.create(
        name='1 Tháng',
        slug='1-thang',
        duration_months=1,
        original_price=499000,
        sale_price=499000,
        sort_order=0,
    )


@pytest.fixture
def inactive_package(db):
    return Package.objects.create(
        name='Legacy',
        slug='legacy',
        duration_months=1,
        original_price=100000,
        sale_price=100000,
        is_active=False,
    )
