import pytest
from unittest.mock import patch
from django.conf import settings
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from apps.accounts.models import User, UserSession
from apps.accounts.services import create_session, issue_session_tokens


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'name': 'New User',
            'phone': '0912345678',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['email'] == 'newuser@example.com'
        assert response.data['user']['role'] == 'USER'
        user = User.objects.get(email='newuser@example.com')
        assert user.name == 'New User'
        assert user.phone == '0912345678'

    def test_register_does_not_start_session(self, api_client):
        """Registration alone leaves the account signed out."""
        url = reverse('users:register')
        api_client.post(url, {
            'email': 'nosession@example.com',
            'password': 'SecurePass123!',
            'name': 'No Session',
        })

        assert not UserSession.objects.filter(user__email='nosession@example.com').exists()

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'name': 'Duplicate',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'
        assert 'email' in response.data['details']

    def test_register_weak_password(self, api_client):
        """Registration fails with weak password."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'name': 'Weak',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data['details']

    def test_register_requires_name(self, api_client):
        url = reverse('users:register')
        response = api_client.post(url, {
            'email': 'noname@example.com',
            'password': 'SecurePass123!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'name' in response.data['details']


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': user.email,
            'password': 'TestPass123!',
            'deviceId': 'laptop-1',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['access_token']
        assert response.data['refresh_token']
        assert response.data['user']['email'] == user.email
        assert response.data['user']['currentPlan'] is None

        session = UserSession.objects.get(user=user)
        assert session.device_id == 'laptop-1'

    def test_login_sets_refresh_cookie(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        cookie = response.cookies[settings.REFRESH_COOKIE_NAME]
        assert cookie.value == response.data['refresh_token']
        assert cookie['httponly']

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPass!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'INVALID_CREDENTIALS'
        assert not UserSession.objects.filter(user=user).exists()

    def test_login_unknown_email(self, api_client, db):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'ghost@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        """Deactivated accounts cannot sign in."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': user_inactive.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'ACCOUNT_INACTIVE'

    def test_login_missing_fields(self, api_client, db):
        url = reverse('users:login')
        response = api_client.post(url, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_login_ignores_superseded_bearer(self, api_client, user, session_tokens):
        """A token left over from a replaced session does not block signing in again."""
        create_session(user=user, device_id='other')
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {session_tokens['access']}")

        response = api_client.post(reverse('users:login'), {
            'email': user.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['access_token']

    def test_wrong_password_keeps_current_session(self, authenticated_client, user):
        before = UserSession.objects.get(user=user).session_id

        response = APIClient().post(reverse('users:login'), {'email': user.email, 'password': 'WrongPass!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert UserSession.objects.get(user=user).session_id == before
        assert authenticated_client.get(reverse('users:session-status')).status_code == status.HTTP_200_OK


# =============================================================================
# Single Session Tests
# =============================================================================

@pytest.mark.django_db
class TestSingleSession:
    """A second login invalidates tokens of the first one."""

    def _login(self, client, user, device):
        response = client.post(reverse('users:login'), {
            'email': user.email,
            'password': 'TestPass123!',
            'deviceId': device,
        })
        assert response.status_code == status.HTTP_200_OK
        return response.data

    def test_session_status_valid(self, authenticated_client):
        response = authenticated_client.get(reverse('users:session-status'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is True
        assert response.data['lastActive'] is not None

    def test_second_login_invalidates_first(self, user):
        first_client = APIClient()
        second_client = APIClient()
        first = self._login(first_client, user, 'phone')
        second = self._login(second_client, user, 'laptop')

        first_client.credentials(HTTP_AUTHORIZATION=f"Bearer {first['access_token']}")
        second_client.credentials(HTTP_AUTHORIZATION=f"Bearer {second['access_token']}")

        stale = first_client.get(reverse('users:session-status'))
        assert stale.status_code == status.HTTP_401_UNAUTHORIZED
        assert stale.data['code'] == 'SESSION_INVALID'

        fresh = second_client.get(reverse('users:session-status'))
        assert fresh.status_code == status.HTTP_200_OK

    def test_stale_token_rejected_on_every_endpoint(self, user):
        client = APIClient()
        first = self._login(client, user, 'phone')
        self._login(APIClient(), user, 'laptop')

        client.credentials(HTTP_AUTHORIZATION=f"Bearer {first['access_token']}")
        response = client.get(reverse('users:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'SESSION_INVALID'

    def test_session_status_requires_auth(self, api_client):
        response = api_client.get(reverse('users:session-status'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Token Refresh Tests
# =============================================================================

@pytest.mark.django_db
class TestTokenRefresh:
    """Tests for POST /api/auth/token/refresh/"""

    def test_refresh_from_body(self, api_client, session_tokens):
        response = api_client.post(reverse('users:token-refresh'), {
            'refresh': session_tokens['refresh'],
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['access_token']

    def test_refreshed_access_token_is_usable(self, api_client, session_tokens):
        response = api_client.post(reverse('users:token-refresh'), {
            'refresh': session_tokens['refresh'],
        })
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access_token']}")

        assert api_client.get(reverse('users:me')).status_code == status.HTTP_200_OK

    def test_refresh_from_cookie(self, api_client, user):
        api_client.post(reverse('users:login'), {'email': user.email, 'password': 'TestPass123!'})

        response = api_client.post(reverse('users:token-refresh'), {})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['access_token']

    def test_refresh_superseded_session(self, api_client, user, session_tokens):
        """A refresh token of a replaced session cannot mint access tokens."""
        create_session(user=user, device_id='other')

        response = api_client.post(reverse('users:token-refresh'), {
            'refresh': session_tokens['refresh'],
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'SESSION_INVALID'

    def test_refresh_garbage_token(self, api_client, db):
        response = api_client.post(reverse('users:token-refresh'), {'refresh': 'not-a-token'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_missing_token(self, api_client, db):
        response = api_client.post(reverse('users:token-refresh'), {})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_ignores_superseded_bearer(self, api_client, user):
        old = issue_session_tokens(user=user, session_id=create_session(user=user, device_id='phone'))
        current = issue_session_tokens(user=user, session_id=create_session(user=user, device_id='laptop'))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {old['access']}")

        response = api_client.post(reverse('users:token-refresh'), {'refresh': current['refresh']})

        assert response.status_code == status.HTTP_200_OK


# =============================================================================
# Session Registry Outage Tests
# =============================================================================

@pytest.mark.django_db
class TestSessionRegistryOutage:
    """A failed session lookup is a temporary error, not a signed-out session."""

    def test_session_status_is_unavailable(self, authenticated_client, user):
        with patch.object(UserSession.objects, 'filter', side_effect=DatabaseError('down')):
            response = authenticated_client.get(reverse('users:session-status'))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'SESSION_CHECK_UNAVAILABLE'
        assert UserSession.objects.filter(user=user).exists()

    def test_refresh_is_unavailable(self, api_client, session_tokens):
        with patch.object(UserSession.objects, 'filter', side_effect=DatabaseError('down')):
            response = api_client.post(reverse('users:token-refresh'), {
                'refresh': session_tokens['refresh'],
            })

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['code'] == 'SESSION_CHECK_UNAVAILABLE'


# =============================================================================
# Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_clears_session(self, authenticated_client, user):
        response = authenticated_client.post(reverse('users:logout'))

        assert response.status_code == status.HTTP_200_OK
        assert not UserSession.objects.filter(user=user).exists()

    def test_token_rejected_after_logout(self, authenticated_client):
        authenticated_client.post(reverse('users:logout'))

        response = authenticated_client.get(reverse('users:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'SESSION_INVALID'

    def test_logout_unauthenticated(self, api_client):
        response = api_client.post(reverse('users:logout'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET/PATCH /api/auth/me/"""

    def test_get_profile(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['name'] == 'Test User'
        assert response.data['currentPlan'] is None
        assert response.data['planExpiresAt'] is None

    def test_update_profile(self, authenticated_client, user):
        response = authenticated_client.patch(reverse('users:me'), {'name': 'Renamed', 'phone': '0999'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.name == 'Renamed'
        assert user.phone == '0999'

    def test_role_is_read_only(self, authenticated_client, user):
        authenticated_client.patch(reverse('users:me'), {'role': 'ADMIN'})

        user.refresh_from_db()
        assert user.role == 'USER'

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('users:me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'NOT_AUTHENTICATED'
