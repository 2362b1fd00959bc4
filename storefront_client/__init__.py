"""
Python client for the License Storefront API.

Usage::

    from storefront_client import Storefront

    store = Storefront('https://api.veo3.ai')
    store.auth.login(email='a@example.com', password='...')
    package = store.packages.list()[0]
    checkout = store.checkout(package)
    checkout.select_method('VND_BANK_TRANSFER')
    print(checkout.payment.transfer_content)
"""

from .admin_review import AdminReviewFlow
from .auth import AuthApi, AuthState, MemoryMarkerStore, FileMarkerStore
from .checkout import CheckoutFlow, CheckoutStep
from .errors import (
    ApiError,
    ValidationError,
    NotFound,
    InvalidState,
    SessionInvalid,
    Forbidden,
    LicenseIssuanceFailed,
    ServerError,
    NetworkError,
)
from .http import ApiClient
from .models import OrderStatus, STATUS_DISPLAY
from .resources import PackagesApi, OrdersApi, AdminApi
from .session_monitor import SessionMonitor


class Storefront:
    """
    All APIs of one logged-in (or anonymous) client, sharing one ``AuthState``.

    Args:
        base_url: Server root
        marker_store: Where the "had a session" marker is kept
        session: ``requests.Session`` to send through
        monitor_interval: Session check period in seconds (None disables it)
    """

    def __init__(self, base_url, *, marker_store=None, session=None, timeout=10,
                 monitor_interval=30.0):
        self.state = AuthState(marker_store=marker_store)
        self.client = ApiClient(base_url, auth_state=self.state, session=session, timeout=timeout)
        self.auth = AuthApi(self.client, monitor_interval=monitor_interval)
        self.packages = PackagesApi(self.client)
        self.orders = OrdersApi(self.client)
        self.admin = AdminApi(self.client)

    def checkout(self, package):
        return CheckoutFlow(self.orders, package)

    def admin_review(self, poll_interval=10.0):
        """Review flow whose polling stops when this client's session ends."""
        review = AdminReviewFlow(self.admin, poll_interval=poll_interval)
        self.state.on_session_end(lambda: review.stop_polling(join=False))
        return review


__all__ = [
    'Storefront',
    'ApiClient',
    'AuthApi',
    'AuthState',
    'MemoryMarkerStore',
    'FileMarkerStore',
    'SessionMonitor',
    'PackagesApi',
    'OrdersApi',
    'AdminApi',
    'CheckoutFlow',
    'CheckoutStep',
    'AdminReviewFlow',
    'OrderStatus',
    'STATUS_DISPLAY',
    'ApiError',
    'ValidationError',
    'NotFound',
    'InvalidState',
    'SessionInvalid',
    'Forbidden',
    'LicenseIssuanceFailed',
    'ServerError',
    'NetworkError',
]
