"""
Periodic single-session check.

A superseded session only learns about it on its next check, so the check
interval bounds how long a second device can keep using an old login.
"""

import logging
import threading

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


class SessionMonitor:
    """
    Background thread calling ``check()`` every ``interval`` seconds.

    When ``check()`` returns False, ``on_invalid()`` is called once and the
    thread exits. ``stop()`` cancels the wait immediately.
    """

    def __init__(self, check, on_invalid, interval=DEFAULT_INTERVAL):
        self.check = check
        self.on_invalid = on_invalid
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name='SessionMonitor', daemon=True)

    def start(self):
        self._thread.start()

    def stop(self, join=True):
        self._stop_event.set()
        if join and self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join()

    def is_alive(self):
        return self._thread.is_alive()

    def _run(self):
        while not self._stop_event.wait(self.interval):
            try:
                valid = self.check()
            except Exception:
                logger.exception("Session check raised, treating session as valid")
                continue

            if not valid and not self._stop_event.is_set():
                logger.info("Session no longer valid, stopping monitor")
                self.on_invalid()
                break
