"""
Response envelope for every API endpoint.

Successful responses are rendered as::

    {"success": true, "data": <payload>, "timestamp": "2026-01-31T10:00:00+07:00"}

Errors (status >= 400) are rendered as::

    {"success": false, "error": {"code": "...", "message": "..."}, "timestamp": "..."}

The error payload itself is shaped by ``apps.core.exceptions.api_exception_handler``.
"""
from django.utils import timezone
from rest_framework.renderers import JSONRenderer


class EnvelopeJSONRenderer(JSONRenderer):
    """JSON renderer that wraps view data in the success/error envelope."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        renderer_context = renderer_context or {}
        response = renderer_context.get('response')

        if response is not None and response.status_code == 204:
            return b''

        if response is not None and response.status_code >= 400:
            body = {
                'success': False,
                'error': data,
                'timestamp': timezone.now().isoformat(),
            }
        else:
            body = {
                'success': True,
                'data': data,
                'timestamp': timezone.now().isoformat(),
            }

        return super().render(body, accepted_media_type, renderer_context)
