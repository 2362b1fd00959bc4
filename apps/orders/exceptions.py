"""
Domain exceptions for orders app.

Each error maps to one HTTP status and one machine-readable code; the API
exception handler upper-cases ``default_code`` into the envelope's
``error.code``.
"""
from rest_framework.exceptions import APIException

from apps.packages.exceptions import PackageNotFoundError


class OrderValidationError(APIException):
    """Request data for an order operation is invalid."""
    status_code = 400
    default_detail = 'Invalid order request.'
    default_code = 'validation_error'


class PaymentMethodUnavailableError(APIException):
    """Payment method is listed but not accepted yet."""
    status_code = 400
    default_detail = 'This payment method is not available yet.'
    default_code = 'payment_method_unavailable'


class OrderNotFoundError(APIException):
    """Order does not exist or belongs to another user."""
    status_code = 404
    default_detail = 'Order not found.'
    default_code = 'order_not_found'


class InvalidOrderStateError(APIException):
    """Order is not in the status the operation requires."""
    status_code = 409
    default_detail = 'Order is not in a valid state for this operation.'
    default_code = 'invalid_state'


class LicenseIssuanceFailedError(APIException):
    """License issuer failed; the order was left untouched."""
    status_code = 502
    default_detail = 'License could not be issued. Please retry.'
    default_code = 'license_issuance_failed'


__all__ = [
    'OrderValidationError',
    'PaymentMethodUnavailableError',
    'OrderNotFoundError',
    'PackageNotFoundError',
    'InvalidOrderStateError',
    'LicenseIssuanceFailedError',
]
