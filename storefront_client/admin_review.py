"""
Admin review flow.

Keeps a filtered order list fresh by polling, and submits approve/reject
decisions for orders awaiting review. Every refresh takes a sequence number
and its result is applied only if no later refresh has been applied already,
so a slow response can never roll the list back.
"""

import itertools
import logging
import threading

from .errors import ValidationError, InvalidState, SessionInvalid
from .models import OrderStatus, DeliveryMethod

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


class AdminReviewFlow:
    """
    Args:
        admin_api: ``AdminApi`` of a logged-in admin
        poll_interval: Seconds between background refreshes
    """

    def __init__(self, admin_api, poll_interval=DEFAULT_POLL_INTERVAL):
        self.admin = admin_api
        self.poll_interval = poll_interval
        self.status = None
        self.search = ''
        self.page = 1
        self.limit = 20
        self.orders = []
        self.pagination = None
        self.selected = None

        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._applied = 0
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def needs_action(self):
        return [order for order in self.orders if order.needs_admin_action]

    def set_filter(self, *, status=None, search=''):
        self.status = OrderStatus(status) if status else None
        self.search = search.strip()
        self.page = 1
        return self.refresh()

    def go_to_page(self, page):
        self.page = page
        return self.refresh()

    def refresh(self):
        """
        Fetch the current page.

        Returns:
            True if the result was applied, False if a newer one already was
        """
        with self._lock:
            sequence = next(self._sequence)
            params = dict(status=self.status, search=self.search, page=self.page, limit=self.limit)

        result = self.admin.list_orders(**params)
        return self._apply(sequence, result)

    def _apply(self, sequence, result):
        with self._lock:
            if sequence <= self._applied:
                logger.debug("Dropping stale order list #%d (have #%d)", sequence, self._applied)
                return False
            self._applied = sequence
            self.orders = result.orders
            self.pagination = result.pagination
            return True

    def select(self, order_id):
        self.selected = self.admin.get_order(order_id)
        return self.selected

    def approve(self, order_id, *, max_devices=None, delivery_method=DeliveryMethod.EMAIL,
                delivery_contact='', admin_notes=''):
        """Approve and refresh. On ``InvalidState`` the list is refreshed before re-raising."""
        try:
            order = self.admin.approve(
                order_id,
                max_devices=max_devices,
                delivery_method=delivery_method,
                delivery_contact=delivery_contact,
                admin_notes=admin_notes,
            )
        except InvalidState:
            self.refresh()
            raise

        self._settled(order)
        return order

    def reject(self, order_id, reason):
        """Reject with a non-empty reason; checked before any request is sent."""
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError('Vui lòng nhập lý do từ chối')

        try:
            order = self.admin.reject(order_id, reason)
        except InvalidState:
            self.refresh()
            raise

        self._settled(order)
        return order

    def _settled(self, order):
        if self.selected is not None and self.selected.id == order.id:
            self.selected = None
        self.refresh()

    @property
    def is_polling(self):
        return self._thread is not None and self._thread.is_alive()

    def start_polling(self):
        if self.is_polling:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll, name='AdminOrderPoll', daemon=True)
        self._thread.start()

    def stop_polling(self, join=True):
        self._stop_event.set()
        thread = self._thread
        if join and thread is not None and thread is not threading.current_thread():
            thread.join()

    def _poll(self):
        while not self._stop_event.wait(self.poll_interval):
            try:
                self.refresh()
            except SessionInvalid:
                logger.info("Session ended, stopping order polling")
                break
            except Exception:
                logger.exception("Order list refresh failed")
