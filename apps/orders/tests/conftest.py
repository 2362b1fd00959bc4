from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from apps.accounts.models import User, UserRole
from apps.accounts.services import create_session, issue_session_tokens
from apps.orders.models import Order
from apps.orders.services import create_order, confirm_payment
from apps.packages.models import Package


def _client_for(user):
    session_id = create_session(user=user, device_id='pytest')
    tokens = issue_session_tokens(user=user, session_id=session_id)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test customer."""
    return User.objects.create_user(
        email='customer@example.com',
        password='TestPass123!',
        name='Nguyễn Văn A',
        phone='0901234567',
    )


@pytest.fixture
def other_user(db):
    """Create and return another customer."""
    return User.objects.create_user(
        email='other@example.com',
        password='OtherPass123!',
        name='Trần Thị B',
    )


@pytest.fixture
def admin_user(db):
    """Create and return an admin."""
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        name='Quản Trị Viên',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(user):
    """Customer client with a session-bound JWT."""
    return _client_for(user)


@pytest.fixture
def other_client(other_user):
    return _client_for(other_user)


@pytest.fixture
def admin_client(admin_user):
    """Admin client with a session-bound JWT."""
    return _client_for(admin_user)


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
def inactive_package(db):
    return Package.objects.create(
        name='Legacy',
        slug='legacy',
        duration_months=1,
        original_price=100000,
        sale_price=100000,
        is_active=False,
    )


@pytest.fixture
def pending_order(user, package):
    """A fresh PENDING order."""
    return create_order(user=user, package_id=package.id)


@pytest.fixture
def processing_order(user, pending_order):
    """An order the customer has confirmed as paid."""
    return confirm_payment(order_id=pending_order.id, user=user)


@pytest.fixture
def overdue_order(pending_order):
    """A PENDING order whose payment window has passed."""
    Order.objects.filter(pk=pending_order.pk).update(
        expires_at=timezone.now() - timedelta(minutes=1)
    )
    pending_order.refresh_from_db()
    return pending_order
