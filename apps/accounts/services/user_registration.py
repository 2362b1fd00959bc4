"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str = "",
    phone: str = ""
) -> User:
    """
    Register a new customer account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        name: Optional full name
        phone: Optional phone number

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("An account with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            phone=phone,
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {e}") from e

    logger.info("Registered user %s", user.id)
    return user
