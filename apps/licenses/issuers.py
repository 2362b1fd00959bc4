"""
License issuers.

An issuer turns an approved purchase into a ``License`` row. The active
issuer class is named by the ``LICENSE_ISSUER_CLASS`` setting so a deployment
can plug in an external licensing backend.
"""

import calendar
import logging
import secrets
import string

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import LicenseIssuanceError
from .models import License, LicenseStatus

logger = logging.getLogger(__name__)

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_GROUPS = 4
KEY_GROUP_LENGTH = 4
MAX_KEY_ATTEMPTS = 5


def add_months(moment, months):
    """Shift ``moment`` by whole calendar months, clamping the day (Jan 31 + 1 = Feb 28/29)."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def generate_license_key(prefix=None):
    """Return a key like ``VEO3-AB12-CD34-EF56-GH78``."""
    prefix = prefix if prefix is not None else settings.LICENSE_KEY_PREFIX
    groups = [
        ''.join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_GROUP_LENGTH))
        for _ in range(KEY_GROUPS)
    ]
    return '-'.join([prefix, *groups]) if prefix else '-'.join(groups)


class BaseLicenseIssuer:
    """Interface for license issuers."""

    def issue(self, *, user, package, max_devices):
        raise NotImplementedError


class DatabaseLicenseIssuer(BaseLicenseIssuer):
    """Mint keys locally, valid for the package duration starting now."""

    def issue(self, *, user, package, max_devices):
        start = timezone.now()
        end = add_months(start, package.duration_months)

        for _ in range(MAX_KEY_ATTEMPTS):
            try:
                with transaction.atomic():
                    license = License.objects.create(
                        license_key=generate_license_key(),
                        user=user,
                        package=package,
                        max_devices=max_devices,
                        start_date=start,
                        end_date=end,
                        status=LicenseStatus.ACTIVE,
                    )
            except IntegrityError:
                logger.warning("License key collision for user %s, retrying", user.pk)
                continue

            logger.info(
                "Issued license %s to user %s (%s, %d device(s))",
                license.license_key, user.pk, package.name, max_devices
            )
            return license

        raise LicenseIssuanceError("Could not generate a unique license key")
