"""
Client authentication state.

``AuthState`` is the single owner of the in-memory access token and of the
persistent "had a session" marker used to decide whether a silent re-login
is worth attempting on start-up. It is injected into ``ApiClient`` and
cleared at logout or on a 401.

``AuthApi`` wraps the ``/api/auth/`` endpoints and ties a ``SessionMonitor``
to the lifetime of the logged-in session.
"""

import logging
import os
import threading
from pathlib import Path

from .errors import ApiError, NetworkError, SessionInvalid
from .session_monitor import SessionMonitor, DEFAULT_INTERVAL

logger = logging.getLogger(__name__)


class MemoryMarkerStore:
    """Marker kept for the lifetime of the process."""

    def __init__(self):
        self._value = False

    def get(self):
        return self._value

    def set(self, value):
        self._value = bool(value)


class FileMarkerStore:
    """Marker persisted as the existence of a file."""

    def __init__(self, path):
        self.path = Path(path)

    def get(self):
        return self.path.exists()

    def set(self, value):
        if value:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
        elif self.path.exists():
            os.remove(self.path)


class AuthState:
    """
    Access token, refresh token and current user of one client.

    Tokens live only in memory. ``marker_store`` remembers across restarts
    that a session existed, never the token itself.
    """

    def __init__(self, marker_store=None):
        self.marker_store = marker_store or MemoryMarkerStore()
        self._lock = threading.RLock()
        self._access_token = None
        self._refresh_token = None
        self._user = None
        self._callbacks = []
        self._end_callbacks = []

    @property
    def access_token(self):
        with self._lock:
            return self._access_token

    @property
    def refresh_token(self):
        with self._lock:
            return self._refresh_token

    @property
    def user(self):
        with self._lock:
            return self._user

    @property
    def is_authenticated(self):
        return self.access_token is not None

    @property
    def had_session(self):
        return self.marker_store.get()

    def on_session_invalid(self, callback):
        """Register ``callback()`` to run when a 401 ends the session."""
        self._callbacks.append(callback)
        return callback

    def on_session_end(self, callback):
        """Register ``callback()`` to run when the session ends by logout or by a 401."""
        self._end_callbacks.append(callback)
        return callback

    def set_session(self, *, access_token, refresh_token=None, user=None):
        with self._lock:
            self._access_token = access_token
            if refresh_token is not None:
                self._refresh_token = refresh_token
            if user is not None:
                self._user = user
        self.marker_store.set(True)

    def clear(self):
        with self._lock:
            self._access_token = None
            self._refresh_token = None
            self._user = None
        self.marker_store.set(False)

    def end(self):
        """Logout: clear everything and notify session-end listeners."""
        if self._take():
            self._notify(self._end_callbacks)

    def invalidate(self):
        """Clear everything and notify listeners. Only the first call notifies."""
        if not self._take():
            return

        logger.info("Session invalidated")
        self._notify(self._callbacks)
        self._notify(self._end_callbacks)

    def _take(self):
        with self._lock:
            was_authenticated = self._access_token is not None
            self.clear()
        return was_authenticated

    @staticmethod
    def _notify(callbacks):
        for callback in list(callbacks):
            try:
                callback()
            except Exception:
                logger.exception("Session callback failed")


class AuthApi:
    """
    Endpoints under ``/api/auth/``.

    Args:
        client: ``ApiClient`` whose ``auth_state`` this API manages
        monitor_interval: Seconds between session checks once logged in;
            ``None`` disables the background monitor
    """

    def __init__(self, client, monitor_interval=DEFAULT_INTERVAL):
        self.client = client
        self.state = client.auth_state
        self.monitor_interval = monitor_interval
        self.monitor = None
        self.state.on_session_invalid(self._stop_monitor)

    def register(self, *, email, password, name, phone=''):
        return self.client.post('auth/register', {
            'email': email,
            'password': password,
            'name': name,
            'phone': phone,
        }, skip_auth=True)

    def login(self, *, email, password, device_id=''):
        """Log in, keep the tokens in memory and start the session monitor."""
        data = self.client.post('auth/login', {
            'email': email,
            'password': password,
            'deviceId': device_id,
        }, skip_auth=True)

        self.state.set_session(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token'),
            user=data['user'],
        )
        self._start_monitor()
        return data['user']

    def logout(self):
        """Best-effort server logout; local state is always cleared."""
        self._stop_monitor()
        try:
            if self.state.is_authenticated:
                self.client.post('auth/logout')
        except ApiError as e:
            logger.info("Ignoring logout failure: %s", e.code)
        finally:
            self.state.end()

    def me(self):
        return self.client.get('auth/me')

    def check_session(self):
        """
        Return False only when the server explicitly rejects the session.

        Network errors and unexpected failures count as still valid.
        """
        if not self.state.is_authenticated:
            return False

        try:
            self.client.get('auth/session/status')
        except SessionInvalid:
            return False
        except NetworkError:
            logger.info("Session check could not reach the server, assuming valid")
            return True
        except ApiError as e:
            logger.warning("Session check failed with %s, assuming valid", e.code)
            return True
        return True

    def refresh(self):
        """Exchange the refresh token (body or cookie) for a new access token."""
        payload = {}
        if self.state.refresh_token:
            payload['refresh'] = self.state.refresh_token
        data = self.client.post('auth/token/refresh', payload, skip_auth=True)
        self.state.set_session(access_token=data['access_token'])
        return data['access_token']

    def restore(self):
        """
        Silent re-login on start-up.

        Only attempted when the marker says a session existed. Returns the
        current user, or None when there was nothing to restore or the server
        refused (the marker is then cleared).
        """
        if not self.state.had_session:
            return None

        try:
            self.refresh()
            user = self.me()
        except NetworkError:
            raise
        except ApiError as e:
            logger.info("Could not restore session: %s", e.code)
            self.state.clear()
            return None

        self.state.set_session(access_token=self.state.access_token, user=user)
        self._start_monitor()
        return user

    def _start_monitor(self):
        if self.monitor_interval is None:
            return
        self._stop_monitor()
        self.monitor = SessionMonitor(
            check=self.check_session,
            on_invalid=self.state.invalidate,
            interval=self.monitor_interval,
        )
        self.monitor.start()

    def _stop_monitor(self):
        monitor, self.monitor = self.monitor, None
        if monitor is not None:
            monitor.stop()
