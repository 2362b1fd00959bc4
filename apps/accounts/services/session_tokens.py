"""JWT issuing bound to the single registered session."""

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidTokenError
from .session_registry import session_matches

User = get_user_model()


def _claim_name() -> str:
    return getattr(settings, 'SESSION_ID_CLAIM', 'sid')


def issue_session_tokens(*, user, session_id: str) -> dict:
    """
    Mint a refresh/access pair carrying ``session_id``.

    simplejwt copies custom refresh claims into the derived access token,
    so both tokens are bound to the same session.
    """
    refresh = RefreshToken.for_user(user)
    refresh[_claim_name()] = session_id

    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


def refresh_access_token(*, refresh_token: str) -> str:
    """
    Exchange a refresh token for a new access token.

    Raises:
        InvalidTokenError: If the token is malformed, expired, or was minted
            for a session that has since been superseded
        SessionLookupError: The session registry could not be read
    """
    try:
        refresh = RefreshToken(refresh_token)
    except TokenError as e:
        raise InvalidTokenError(str(e)) from e

    user_id = refresh.get(settings.SIMPLE_JWT.get('USER_ID_CLAIM', 'user_id'))
    session_id = refresh.get(_claim_name())

    if not session_matches(user_id=user_id, session_id=session_id):
        raise InvalidTokenError("Session is no longer valid")

    if not User.objects.filter(pk=user_id, is_active=True).exists():
        raise InvalidTokenError("Account is deactivated")

    return str(refresh.access_token)
