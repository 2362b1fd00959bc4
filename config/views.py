from django.http import JsonResponse
from django.utils import timezone


def _error_body(code, message):
    return {
        'success': False,
        'error': {'code': code, 'message': message},
        'timestamp': timezone.now().isoformat(),
    }


def health_check(request):
    """Liveness probe used by the hosting platform."""
    return JsonResponse({
        'success': True,
        'data': {'status': 'ok'},
        'timestamp': timezone.now().isoformat(),
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse(_error_body('NOT_FOUND', 'Not found'), status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse(_error_body('INTERNAL_ERROR', 'Internal server error'), status=500)
