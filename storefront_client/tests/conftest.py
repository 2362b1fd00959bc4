import pytest
from rest_framework.test import RequestsClient
from apps.accounts.models import User, UserRole
from apps.packages.models import Package
from storefront_client import Storefront

BASE_URL = 'http://testserver'
CUSTOMER_PASSWORD = 'TestPass123!'
ADMIN_PASSWORD = 'AdminPass123!'


def make_store(**kwargs):
    """Client talking to the in-process API; no background monitor by default."""
    kwargs.setdefault('monitor_interval', None)
    return Storefront(BASE_URL, session=RequestsClient(), **kwargs)


@pytest.fixture
def customer(db):
    """Create and return a test customer."""
    return User.objects.create_user(
        email='customer@example.com',
        password=CUSTOMER_PASSWORD,
        name='Nguyễn Văn A',
        phone='0901234567',
    )


@pytest.fixture
def admin(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password=ADMIN_PASSWORD,
        name='Quản Trị Viên',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def package(db):
    """The featured 3-month package priced 1,199,000 VND."""
    return Package.objects.create(
        name='3 Tháng',
        slug='3-thang',
        duration_months=3,
        original_price=1497000,
        sale_price=1199000,
        discount_percent=20,
        max_devices=2,
        is_popular=True,
    )


@pytest.fixture
def store(db):
    """Anonymous client."""
    return make_store()


@pytest.fixture
def customer_store(customer):
    """Client logged in as the customer."""
    store = make_store()
    store.auth.login(email=customer.email, password=CUSTOMER_PASSWORD, device_id='laptop')
    return store


@pytest.fixture
def admin_store(admin):
    """Client logged in as the admin."""
    store = make_store()
    store.auth.login(email=admin.email, password=ADMIN_PASSWORD, device_id='office')
    return store
