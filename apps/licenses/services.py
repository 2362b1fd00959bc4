"""License issuance service."""

import logging

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import LicenseIssuanceError

logger = logging.getLogger(__name__)


def get_license_issuer():
    """Instantiate the issuer configured in ``LICENSE_ISSUER_CLASS``."""
    return import_string(settings.LICENSE_ISSUER_CLASS)()


def issue_license(*, user, package, max_devices: int):
    """
    Issue a license for ``package`` to ``user``.

    Returns:
        The created License

    Raises:
        LicenseIssuanceError: On any issuer failure
    """
    try:
        issuer = get_license_issuer()
        return issuer.issue(user=user, package=package, max_devices=max_devices)
    except LicenseIssuanceError:
        logger.error("License issuance failed for user %s", user.pk)
        raise
    except Exception as e:
        logger.exception("License issuer raised for user %s", user.pk)
        raise LicenseIssuanceError(str(e) or e.__class__.__name__) from e
