"""
Single-session registry.

Each account owns at most one authoritative session id. Creating a session
replaces whatever was stored before, so every token minted for an older
session stops validating on its next check.
"""

import logging
import secrets

from django.db import DatabaseError, transaction
from django.utils import timezone

from ..models import UserSession
from .exceptions import SessionLookupError

logger = logging.getLogger(__name__)


def _new_session_id() -> str:
    return secrets.token_urlsafe(32)


@transaction.atomic
def create_session(
    *,
    user,
    device_id: str = '',
    user_agent: str = '',
    ip_address: str = None
) -> str:
    """
    Register a fresh session for ``user``, superseding any previous one.

    Returns:
        The new opaque session id
    """
    session_id = _new_session_id()
    now = timezone.now()

    UserSession.objects.update_or_create(
        user=user,
        defaults={
            'session_id': session_id,
            'device_id': (device_id or '')[:100],
            'user_agent': (user_agent or '')[:255],
            'ip_address': ip_address or None,
            'last_active': now,
            'created_at': now,
        }
    )

    logger.info("Created session for user %s (device=%s)", user.pk, device_id or '-')
    return session_id


def session_matches(*, user_id, session_id) -> bool:
    """
    Return True when ``session_id`` is the registered session of ``user_id``.

    Raises:
        SessionLookupError: The registry could not be read, so the answer is unknown
    """
    if not user_id or not session_id:
        return False

    try:
        return UserSession.objects.filter(
            user_id=user_id,
            session_id=session_id
        ).exists()
    except DatabaseError as e:
        logger.exception("Session lookup failed for user %s", user_id)
        raise SessionLookupError(str(e)) from e


def validate_session(*, user_id, session_id) -> bool:
    """Like ``session_matches`` but never raises; a failed lookup counts as invalid."""
    try:
        return session_matches(user_id=user_id, session_id=session_id)
    except SessionLookupError:
        return False


def touch_session(*, user_id, session_id) -> bool:
    """Refresh ``last_active`` of the session if it is still the current one."""
    updated = UserSession.objects.filter(
        user_id=user_id,
        session_id=session_id
    ).update(last_active=timezone.now())
    return bool(updated)


def invalidate_session(*, user_id) -> None:
    """Drop the registered session of ``user_id`` (logout)."""
    deleted, _ = UserSession.objects.filter(user_id=user_id).delete()
    if deleted:
        logger.info("Invalidated session for user %s", user_id)


def get_session(*, user_id):
    """Return the registered ``UserSession`` of ``user_id`` or None."""
    return UserSession.objects.filter(user_id=user_id).first()
