"""
Customer checkout flow.

    SELECT_METHOD --select_method(VND)--> PAYMENT --confirm_payment()--> SUBMITTED

Choosing USDT keeps the flow on SELECT_METHOD with a "coming soon" notice.
"""

import logging
from enum import Enum

from .errors import ApiError
from .models import OrderStatus, PaymentMethod, PAYMENT_METHOD_AVAILABLE, format_vnd

logger = logging.getLogger(__name__)

USDT_NOTICE = 'Thanh toán USDT sắp ra mắt. Vui lòng chọn chuyển khoản ngân hàng.'
SUBMITTED_NOTICE = (
    'Đơn hàng của bạn đang được xử lý. Admin sẽ kiểm tra và gửi License Key '
    'cho bạn trong vòng 15 phút - 2 giờ.'
)


class CheckoutStep(Enum):
    SELECT_METHOD = 1
    PAYMENT = 2
    SUBMITTED = 3


class CheckoutError(ApiError):
    """A checkout action was used out of order."""
    default_code = 'CHECKOUT_STEP'
    default_message = 'Thao tác không hợp lệ ở bước hiện tại'


class CheckoutFlow:
    """
    Drives one purchase of ``package`` through the orders API.

    Attributes:
        step: Current ``CheckoutStep``
        order: The created order once past SELECT_METHOD
        payment: ``PaymentInfo`` for the transfer
        notice: Message to show the customer, if any
    """

    def __init__(self, orders_api, package):
        self.orders = orders_api
        self.package = package
        self.step = CheckoutStep.SELECT_METHOD
        self.order = None
        self.payment = None
        self.notice = None

    @classmethod
    def resume(cls, orders_api, package, order_id):
        """Reopen an order created earlier, e.g. after the app restarted."""
        flow = cls(orders_api, package)
        flow.order = orders_api.get(order_id)
        if flow.order.status == OrderStatus.PENDING:
            flow.payment = orders_api.payment(order_id)
            flow.step = CheckoutStep.PAYMENT
        elif flow.order.status == OrderStatus.PROCESSING:
            flow.step = CheckoutStep.SUBMITTED
            flow.notice = SUBMITTED_NOTICE
        return flow

    @property
    def summary(self):
        return {
            'package': self.package.name,
            'originalPrice': format_vnd(self.package.original_price),
            'price': format_vnd(self.package.sale_price),
            'discountPercent': self.package.discount_percent,
        }

    def select_method(self, method):
        """
        Pick a payment method. Bank transfer creates the order.

        Returns:
            True when the flow moved on to PAYMENT
        """
        self._require(CheckoutStep.SELECT_METHOD)
        method = PaymentMethod(method)
        if not PAYMENT_METHOD_AVAILABLE[method]:
            self.notice = USDT_NOTICE
            return False

        self.notice = None
        self.order, self.payment = self.orders.create(self.package.id, method)
        self.step = CheckoutStep.PAYMENT
        logger.info("Checkout created order %s", self.order.order_number)
        return True

    def confirm_payment(self):
        """Tell the server the transfer was sent."""
        self._require(CheckoutStep.PAYMENT)
        self.order = self.orders.confirm(self.order.id)
        self.step = CheckoutStep.SUBMITTED
        self.notice = SUBMITTED_NOTICE
        return self.order

    def refresh_status(self):
        """Poll the order status; returns the ``OrderStatus``."""
        if self.order is None:
            raise CheckoutError()
        status = OrderStatus(self.orders.status(self.order.id))
        if status != self.order.status:
            self.order = self.orders.get(self.order.id)
        return status

    def _require(self, step):
        if self.step is not step:
            raise CheckoutError(f"Expected step {step.name}, flow is at {self.step.name}")
