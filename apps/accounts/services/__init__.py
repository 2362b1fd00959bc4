"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    SessionLookupError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, sign_in, SignIn
from .session_registry import (
    create_session,
    session_matches,
    validate_session,
    touch_session,
    invalidate_session,
    get_session,
)
from .session_tokens import issue_session_tokens, refresh_access_token

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'SessionLookupError',
    # Services
    'register_user',
    'authenticate_user',
    'sign_in',
    'SignIn',
    'create_session',
    'session_matches',
    'validate_session',
    'touch_session',
    'invalidate_session',
    'get_session',
    'issue_session_tokens',
    'refresh_access_token',
]
