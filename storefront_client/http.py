"""
HTTP transport for the storefront API.

``ApiClient`` sends JSON requests with ``requests``, attaches the bearer token
held by an injected ``AuthState`` and unwraps the response envelope::

    {"success": true, "data": ..., "timestamp": ...}
    {"success": false, "error": {"code": ..., "message": ...}, "timestamp": ...}

A 401 on any authenticated call clears the auth state (which fires its
session callbacks) and raises ``SessionInvalid``, whether the token was
superseded or already gone. A 401 on a ``skip_auth`` call, such as a failed
login, is a plain ``ApiError``. Transport failures and unreadable bodies raise
``NetworkError`` and never touch the auth state.
"""

import logging

import requests

from .errors import ApiError, NetworkError, SessionInvalid, Forbidden, error_for

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiClient:
    """
    Thin JSON client bound to one server.

    Args:
        base_url: Server root, e.g. ``https://api.veo3.ai`` (``/api`` is appended)
        auth_state: ``AuthState`` supplying and receiving the access token
        session: ``requests.Session`` to send through (tests pass DRF's
            ``RequestsClient``)
        timeout: Seconds before a call fails with ``NetworkError``
    """

    def __init__(self, base_url, auth_state=None, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/') + '/api'
        self.auth_state = auth_state
        self.session = session or requests.Session()
        self.timeout = timeout

    def url(self, path):
        return f"{self.base_url}/{path.strip('/')}/"

    def request(self, method, path, json=None, params=None, skip_auth=False):
        """
        Send a request and return the envelope's ``data``.

        Raises:
            SessionInvalid: 401 on a call made without ``skip_auth``
            Forbidden: 403
            NetworkError: Timeout, connection error or non-JSON body
            ApiError: Any other error envelope (mapped by code/status)
        """
        headers = {'Accept': 'application/json'}
        token = None if skip_auth or self.auth_state is None else self.auth_state.access_token
        if token:
            headers['Authorization'] = f"Bearer {token}"

        try:
            response = self.session.request(
                method,
                self.url(path),
                json=json if method != 'GET' else None,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(status=0) from e

        if response.status_code == 401 and not skip_auth:
            error = self._error_body(response)
            if self.auth_state is not None:
                self.auth_state.invalidate()
            raise SessionInvalid(
                error.get('message'),
                code=error.get('code') or SessionInvalid.default_code,
                status=401,
            )

        if response.status_code == 403:
            error = self._error_body(response)
            raise Forbidden(error.get('message'), code=error.get('code'), status=403)

        try:
            body = response.json()
        except ValueError as e:
            raise NetworkError(status=response.status_code) from e

        if not response.ok or not body.get('success'):
            error = body.get('error') or {}
            raise error_for(
                response.status_code,
                code=error.get('code'),
                message=error.get('message'),
                details=error.get('details'),
            )

        return body.get('data')

    @staticmethod
    def _error_body(response):
        try:
            return response.json().get('error') or {}
        except ValueError:
            return {}

    def get(self, path, params=None, skip_auth=False):
        return self.request('GET', path, params=params, skip_auth=skip_auth)

    def post(self, path, json=None, skip_auth=False):
        return self.request('POST', path, json=json if json is not None else {}, skip_auth=skip_auth)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json if json is not None else {})

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json if json is not None else {})


__all__ = ['ApiClient', 'ApiError', 'DEFAULT_TIMEOUT']
