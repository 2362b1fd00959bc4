import json

import pytest
from django.urls import reverse
from rest_framework import exceptions, status
from rest_framework.response import Response

from apps.core.exceptions import api_exception_handler
from apps.core.pagination import build_pagination
from apps.core.renderers import EnvelopeJSONRenderer


def _render(data, status_code):
    response = Response(data, status=status_code)
    body = EnvelopeJSONRenderer().render(data, renderer_context={'response': response})
    return json.loads(body) if body else None


class TestEnvelopeRenderer:

    def test_success(self):
        body = _render({'id': 1}, 200)

        assert body['success'] is True
        assert body['data'] == {'id': 1}
        assert 'timestamp' in body

    def test_error(self):
        body = _render({'code': 'ORDER_NOT_FOUND', 'message': 'Order not found.'}, 404)

        assert body['success'] is False
        assert body['error']['code'] == 'ORDER_NOT_FOUND'
        assert 'data' not in body

    def test_no_content(self):
        assert _render(None, 204) is None


class TestExceptionHandler:

    def test_code_is_upper_cased(self):
        response = api_exception_handler(exceptions.NotFound(), {})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'code': 'NOT_FOUND', 'message': 'Not found.'}

    def test_explicit_code(self):
        exc = exceptions.AuthenticationFailed('Invalid email or password.', code='invalid_credentials')
        response = api_exception_handler(exc, {})

        assert response.data['code'] == 'INVALID_CREDENTIALS'
        assert response.data['message'] == 'Invalid email or password.'

    def test_validation_error_details(self):
        exc = exceptions.ValidationError({'email': ['This field is required.']})
        response = api_exception_handler(exc, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'
        assert response.data['details'] == {'email': ['This field is required.']}

    def test_dict_detail(self):
        exc = exceptions.AuthenticationFailed({'detail': 'Token is invalid', 'code': 'token_not_valid'})
        response = api_exception_handler(exc, {})

        assert response.data == {'code': 'TOKEN_NOT_VALID', 'message': 'Token is invalid'}

    def test_unhandled_exception_passes_through(self):
        assert api_exception_handler(RuntimeError('boom'), {}) is None


class TestPagination:

    @pytest.mark.parametrize('total,limit,pages', [
        (0, 20, 0),
        (1, 20, 1),
        (20, 20, 1),
        (21, 20, 2),
        (5, 2, 3),
    ])
    def test_total_pages(self, total, limit, pages):
        assert build_pagination(total=total, page=1, limit=limit)['totalPages'] == pages


@pytest.mark.django_db
class TestHealthCheck:

    def test_health(self, client):
        response = client.get(reverse('health-check'))

        assert response.status_code == 200
        assert response.json()['data'] == {'status': 'ok'}
