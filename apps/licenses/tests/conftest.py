import pytest
from apps.accounts.models import User
from apps.packages.models import Package


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='buyer@example.com',
        password='TestPass123!',
        name='Buyer',
    )


@pytest.fixture
def package(db):
    return Package.objects.create(
        name='3 Tháng',
        slug='3-thang',
        duration_months=3,
        original_price=1497000,
        sale_price=1199000,
        max_devices=2,
    )


@pytest.fixture
def year_package(db):
    return Package.objects.create(
        name='1 Năm',
        slug='1-nam',
        duration_months=12,
        original_price=5988000,
        sale_price=3599000,
    )
