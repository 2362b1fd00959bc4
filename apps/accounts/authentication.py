"""
JWT authentication enforcing the single-session policy.

A token is accepted only while the session id in its ``sid`` claim is still
the one registered for the account. Logging in elsewhere replaces that id,
so the older token fails here with 401 ``SESSION_INVALID``. When the registry
cannot be read the request fails with 503 instead, and the client keeps its
session.
"""
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from .services.exceptions import SessionLookupError
from .services.session_registry import session_matches


class SessionInvalidError(AuthenticationFailed):
    """The token belongs to a session that is no longer the active one."""
    default_detail = 'Your session has ended because the account signed in elsewhere.'
    default_code = 'session_invalid'


class SessionCheckUnavailableError(APIException):
    """The session registry could not be read; the session may still be valid."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Session could not be verified right now. Please try again.'
    default_code = 'session_check_unavailable'


class SingleSessionJWTAuthentication(JWTAuthentication):

    def get_user(self, validated_token):
        user = super().get_user(validated_token)

        session_id = validated_token.get(getattr(settings, 'SESSION_ID_CLAIM', 'sid'))
        try:
            valid = session_matches(user_id=user.pk, session_id=session_id)
        except SessionLookupError:
            raise SessionCheckUnavailableError()

        if not valid:
            raise SessionInvalidError()

        return user


class CredentialsOnlyAuthentication(JWTAuthentication):
    """
    For endpoints that take credentials in the body (login, token refresh).

    A leftover bearer header from a superseded session is ignored, while
    failures are still answered with 401 and a ``Bearer`` challenge.
    """

    def authenticate(self, request):
        return None
