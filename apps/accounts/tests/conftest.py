import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User, UserRole
from apps.accounts.services import create_session, issue_session_tokens


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test customer."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        name='Test User',
        phone='0901234567',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def admin_user(db):
    """Create and return a user with the ADMIN role."""
    return User.objects.create_user(
        email='admin@example.com',
        password='AdminPass123!',
        name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def session_tokens(user):
    """Register a session for ``user`` and return its token pair."""
    session_id = create_session(user=user, device_id='pytest')
    return issue_session_tokens(user=user, session_id=session_id)


@pytest.fixture
def authenticated_client(api_client, session_tokens):
    """Return an API client authenticated with a session-bound JWT."""
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {session_tokens['access']}")
    return api_client
