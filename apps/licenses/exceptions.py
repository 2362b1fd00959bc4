"""Domain exceptions for license issuance."""


class LicenseServiceError(Exception):
    """Base exception for license services."""
    pass


class LicenseIssuanceError(LicenseServiceError):
    """Raised when a license could not be issued."""
    pass
