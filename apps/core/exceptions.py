"""
DRF exception handler producing ``{code, message, details?}`` error payloads.

Codes are the exception's DRF code upper-cased (``order_not_found`` becomes
``ORDER_NOT_FOUND``). Serializer validation errors are reported as
``VALIDATION_ERROR`` with the field errors under ``details``.
"""
import logging

from rest_framework import exceptions
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _code_and_message(exc):
    detail = getattr(exc, 'detail', None)

    # simplejwt reports token problems as {'detail': ..., 'code': ..., 'messages': [...]}
    if isinstance(detail, dict):
        message = str(detail.get('detail', exc.default_detail))
        code = str(detail.get('code', exc.default_code))
        return code, message

    if isinstance(detail, list):
        detail = detail[0] if detail else exc.default_detail

    code = getattr(detail, 'code', None) or exc.default_code
    return str(code), str(detail)


def api_exception_handler(exc, context):
    """Normalise every handled API error into the envelope's error body."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        payload = {
            'code': 'VALIDATION_ERROR',
            'message': 'Invalid input.',
            'details': response.data,
        }
    else:
        code, message = _code_and_message(exc)
        payload = {
            'code': code.upper(),
            'message': message,
        }

    if response.status_code >= 500:
        logger.error('API error %s on %s: %s', payload['code'], context.get('view'), payload['message'])

    response.data = payload
    return response
