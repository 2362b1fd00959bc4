from django.conf import settings
from django.db import models
import uuid


class OrderStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending payment'
    PROCESSING = 'PROCESSING', 'Awaiting review'
    COMPLETED = 'COMPLETED', 'Completed'
    REJECTED = 'REJECTED', 'Rejected'
    EXPIRED = 'EXPIRED', 'Expired'


# Legal lifecycle edges. Terminal statuses map to an empty set.
TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.EXPIRED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.REJECTED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.EXPIRED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def can_transition(current, target):
    """Return True if ``current -> target`` is a legal lifecycle edge."""
    return OrderStatus(target) in TRANSITIONS[OrderStatus(current)]


# Presentation of every status: (customer label, badge colour, needs admin action)
STATUS_DISPLAY = {
    OrderStatus.PENDING: ('Chờ thanh toán', 'yellow', False),
    OrderStatus.PROCESSING: ('Chờ xác nhận', 'blue', True),
    OrderStatus.COMPLETED: ('Hoàn thành', 'green', False),
    OrderStatus.REJECTED: ('Đã hủy', 'red', False),
    OrderStatus.EXPIRED: ('Hết hạn', 'gray', False),
}


class PaymentMethod(models.TextChoices):
    VND_BANK_TRANSFER = 'VND_BANK_TRANSFER', 'Bank transfer (VND)'
    USDT = 'USDT', 'USDT (coming soon)'


# Methods accepted at checkout. USDT is listed but not yet offered.
AVAILABLE_PAYMENT_METHODS = frozenset({PaymentMethod.VND_BANK_TRANSFER})


class DeliveryMethod(models.TextChoices):
    EMAIL = 'EMAIL', 'Email'
    TELEGRAM = 'TELEGRAM', 'Telegram'
    ZALO = 'ZALO', 'Zalo'


class Order(models.Model):
    """
    A customer's purchase of one package, paid by bank transfer.

    ``transfer_content`` is the memo the customer writes on the transfer so an
    admin can match the incoming payment. It is unique and never changes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=32, unique=True, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    package = models.ForeignKey(
        'packages.Package',
        on_delete=models.PROTECT,
        related_name='orders'
    )
    package_name = models.CharField(max_length=100)

    # Whole VND
    amount = models.PositiveIntegerField()
    currency = models.CharField(max_length=3, default='VND')
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.VND_BANK_TRANSFER
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True
    )
    transfer_content = models.CharField(max_length=64, unique=True, editable=False)

    user_confirmed_at = models.DateTimeField(null=True, blank=True)

    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_orders'
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_orders'
    )
    rejection_reason = models.TextField(blank=True)

    license = models.OneToOneField(
        'licenses.License',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order'
    )
    delivery_method = models.CharField(
        max_length=10,
        choices=DeliveryMethod.choices,
        blank=True
    )
    delivery_contact = models.CharField(max_length=255, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(blank=True)

    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at']),
            models.Index(fields=['status', 'expires_at']),
        ]

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATUSES

    @property
    def status_label(self):
        return STATUS_DISPLAY[OrderStatus(self.status)][0]

    @property
    def needs_admin_action(self):
        return STATUS_DISPLAY[OrderStatus(self.status)][2]
