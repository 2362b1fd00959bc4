"""Transfer memo and order number generation."""

import secrets
import string

from django.conf import settings
from django.utils import timezone

MEMO_ALPHABET = string.ascii_uppercase + string.digits
MEMO_SUFFIX_LENGTH = 6


def _random_code(length: int) -> str:
    return ''.join(secrets.choice(MEMO_ALPHABET) for _ in range(length))


def generate_transfer_content(*, now=None) -> str:
    """
    Build a transfer memo like ``VEO3 20260131 X7K2QP``.

    The memo only uses characters every Vietnamese banking app accepts in
    the transfer description (upper-case ASCII, digits, spaces).
    """
    day = timezone.localdate(now or timezone.now())
    prefix = settings.ORDER_TRANSFER_PREFIX
    return f"{prefix} {day:%Y%m%d} {_random_code(MEMO_SUFFIX_LENGTH)}"


def generate_order_number(*, now=None) -> str:
    """Build a display number like ``ORD-20260131-9F2C41AB``."""
    day = timezone.localdate(now or timezone.now())
    return f"ORD-{day:%Y%m%d}-{secrets.token_hex(4).upper()}"
