"""
Sign-in service.

Checking the password, stamping ``last_login``, replacing the account's
registered session and minting the session-bound tokens happen in one
transaction. A failed sign-in leaves the current session of the account
untouched, so a wrong password typed on a second device never logs the first
one out.
"""

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError
from .session_registry import create_session
from .session_tokens import issue_session_tokens

User = get_user_model()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignIn:
    user: User
    session_id: str
    access_token: str
    refresh_token: str


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Return the active account owning ``email`` when ``password`` matches.

    The account row is locked, so concurrent sign-ins of one account are
    serialized when this runs inside ``sign_in``.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password (same message for both)
        InactiveAccountError: Password matches but the account is deactivated
    """
    user = User.objects.select_for_update().filter(email__iexact=(email or '').strip()).first()
    if user is None or not user.check_password(password):
        logger.info("Rejected sign-in for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    return user


@transaction.atomic
def sign_in(
    *,
    email: str,
    password: str,
    device_id: str = '',
    user_agent: str = '',
    ip_address: str = None
) -> SignIn:
    """
    Sign in and make this device the account's only valid session.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account is deactivated
    """
    user = authenticate_user(email=email, password=password)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    session_id = create_session(
        user=user,
        device_id=device_id,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    tokens = issue_session_tokens(user=user, session_id=session_id)

    return SignIn(
        user=user,
        session_id=session_id,
        access_token=tokens['access'],
        refresh_token=tokens['refresh'],
    )
