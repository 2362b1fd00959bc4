"""
Order lifecycle engine.

Legal transitions::

    PENDING -> PROCESSING -> COMPLETED
                          -> REJECTED
    PENDING -> EXPIRED

Every transition re-reads the order with ``select_for_update()`` inside
``transaction.atomic()`` and writes with a conditional
``UPDATE ... WHERE id = ? AND status = <expected>``. If no row matches, some
other writer moved the order first and the operation fails with
``InvalidOrderStateError`` instead of overwriting it. Signals are sent only
after the transaction commits.
"""

import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.licenses.exceptions import LicenseIssuanceError
from apps.licenses.services import issue_license
from apps.packages.models import Package
from apps.orders import signals
from apps.orders.exceptions import (
    OrderValidationError,
    PaymentMethodUnavailableError,
    OrderNotFoundError,
    PackageNotFoundError,
    InvalidOrderStateError,
    LicenseIssuanceFailedError,
)
from apps.orders.models import (
    Order,
    OrderStatus,
    PaymentMethod,
    DeliveryMethod,
    AVAILABLE_PAYMENT_METHODS,
    can_transition,
)
from .transfer_memo import generate_transfer_content, generate_order_number

logger = logging.getLogger(__name__)

MAX_MEMO_ATTEMPTS = 10


class TransferMemoExhaustedError(Exception):
    """Raised when no unique transfer memo could be generated."""
    pass


def _send_after_commit(signal, order, **kwargs):
    transaction.on_commit(
        lambda: signal.send(sender=Order, order=order, **kwargs)
    )


def _lock_order(order_id, user=None) -> Order:
    try:
        order = Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()

    if user is not None and order.user_id != user.pk:
        raise OrderNotFoundError()

    return order


def _require_status(order: Order, expected: str, action: str):
    if order.status != expected:
        raise InvalidOrderStateError(
            f"Cannot {action} order {order.order_number} in status {order.status}."
        )


def _compare_and_swap(order: Order, *, expected: str, target: str, now, **fields):
    """
    Move ``order`` from ``expected`` to ``target`` in one conditional UPDATE.

    Raises:
        InvalidOrderStateError: If the order is no longer in ``expected``
    """
    if not can_transition(expected, target):
        raise InvalidOrderStateError(f"Transition {expected} -> {target} is not allowed.")

    updated = Order.objects.filter(pk=order.pk, status=expected).update(
        status=target,
        updated_at=now,
        **fields
    )
    if updated != 1:
        raise InvalidOrderStateError(
            f"Order {order.order_number} was modified concurrently."
        )

    order.status = target
    order.updated_at = now
    for name, value in fields.items():
        setattr(order, name, value)

    logger.info("Order %s: %s -> %s", order.order_number, expected, target)
    return order


def create_order(*, user, package_id, payment_method: str = PaymentMethod.VND_BANK_TRANSFER) -> Order:
    """
    Create a PENDING order for ``package_id``.

    The amount is the package's current sale price and the order expires
    ``ORDER_EXPIRY_HOURS`` after creation.

    Raises:
        OrderValidationError: Unknown payment method
        PaymentMethodUnavailableError: Listed but not yet accepted method (USDT)
        PackageNotFoundError: Package missing or inactive
    """
    if payment_method not in PaymentMethod.values:
        raise OrderValidationError(f"Unknown payment method: {payment_method}")
    if payment_method not in AVAILABLE_PAYMENT_METHODS:
        raise PaymentMethodUnavailableError()

    try:
        package = Package.objects.get(pk=package_id, is_active=True)
    except (Package.DoesNotExist, DjangoValidationError, ValueError):
        raise PackageNotFoundError()

    now = timezone.now()
    expires_at = now + timedelta(hours=settings.ORDER_EXPIRY_HOURS)

    with transaction.atomic():
        for _ in range(MAX_MEMO_ATTEMPTS):
            transfer_content = generate_transfer_content(now=now)
            if Order.objects.filter(transfer_content=transfer_content).exists():
                continue

            try:
                with transaction.atomic():
                    order = Order.objects.create(
                        order_number=generate_order_number(now=now),
                        user=user,
                        package=package,
                        package_name=package.name,
                        amount=package.sale_price,
                        currency='VND',
                        payment_method=payment_method,
                        status=OrderStatus.PENDING,
                        transfer_content=transfer_content,
                        expires_at=expires_at,
                    )
            except IntegrityError:
                logger.warning("Transfer memo or order number collision, retrying")
                continue

            break
        else:
            raise TransferMemoExhaustedError("Could not generate a unique transfer memo")

        logger.info(
            "Order %s created for user %s (%s, %d VND)",
            order.order_number, user.pk, package.name, order.amount
        )
        _send_after_commit(signals.order_created, order)

    return order


def confirm_payment(*, order_id, user) -> Order:
    """
    Customer reports the transfer as sent: PENDING -> PROCESSING.

    Raises:
        OrderNotFoundError: Missing order or owned by another user
        InvalidOrderStateError: Order is not PENDING, or is past its expiry
    """
    with transaction.atomic():
        order = _lock_order(order_id, user=user)
        _require_status(order, OrderStatus.PENDING, 'confirm payment for')

        now = timezone.now()
        if order.expires_at <= now:
            raise InvalidOrderStateError(f"Order {order.order_number} has expired.")

        _compare_and_swap(
            order,
            expected=OrderStatus.PENDING,
            target=OrderStatus.PROCESSING,
            now=now,
            user_confirmed_at=now,
        )
        _send_after_commit(signals.order_payment_confirmed, order)

    return order


def approve_order(
    *,
    order_id,
    admin,
    max_devices: Optional[int] = None,
    delivery_method: str = DeliveryMethod.EMAIL,
    delivery_contact: str = '',
    admin_notes: str = ''
) -> Order:
    """
    Issue a license and complete the order: PROCESSING -> COMPLETED.

    ``max_devices`` defaults to the package's value. ``delivery_contact``
    defaults to the customer's email for EMAIL delivery and to their phone
    number otherwise.

    Raises:
        OrderValidationError: Bad device count, delivery method or missing contact
        OrderNotFoundError: Missing order
        InvalidOrderStateError: Order is not PROCESSING (also when another
            admin completed or rejected it first)
        LicenseIssuanceFailedError: Issuer failed; nothing was committed
    """
    if max_devices is not None and max_devices < 1:
        raise OrderValidationError("maxDevices must be at least 1.")
    delivery_method = delivery_method or DeliveryMethod.EMAIL
    if delivery_method not in DeliveryMethod.values:
        raise OrderValidationError(f"Unknown delivery method: {delivery_method}")

    with transaction.atomic():
        order = _lock_order(order_id)
        _require_status(order, OrderStatus.PROCESSING, 'approve')

        customer = order.user
        devices = max_devices if max_devices is not None else order.package.max_devices
        contact = (delivery_contact or '').strip()
        if not contact:
            contact = customer.email if delivery_method == DeliveryMethod.EMAIL else customer.phone
        if not contact:
            raise OrderValidationError("deliveryContact is required for this delivery method.")

        try:
            license = issue_license(user=customer, package=order.package, max_devices=devices)
        except LicenseIssuanceError as e:
            logger.error("Approval of order %s failed: %s", order.order_number, e)
            raise LicenseIssuanceFailedError() from e

        now = timezone.now()
        _compare_and_swap(
            order,
            expected=OrderStatus.PROCESSING,
            target=OrderStatus.COMPLETED,
            now=now,
            license=license,
            approved_at=now,
            approved_by=admin,
            delivery_method=delivery_method,
            delivery_contact=contact,
            delivered_at=now,
            admin_notes=admin_notes or '',
        )
        _send_after_commit(signals.order_approved, order, license=license, admin=admin)

    return order


def reject_order(*, order_id, admin, reason: str) -> Order:
    """
    Reject a payment claim: PROCESSING -> REJECTED.

    Raises:
        OrderValidationError: Empty reason (checked before touching the order)
        OrderNotFoundError: Missing order
        InvalidOrderStateError: Order is not PROCESSING
    """
    reason = (reason or '').strip()
    if not reason:
        raise OrderValidationError("A rejection reason is required.")

    with transaction.atomic():
        order = _lock_order(order_id)
        _require_status(order, OrderStatus.PROCESSING, 'reject')

        now = timezone.now()
        _compare_and_swap(
            order,
            expected=OrderStatus.PROCESSING,
            target=OrderStatus.REJECTED,
            now=now,
            rejection_reason=reason,
            rejected_at=now,
            rejected_by=admin,
        )
        _send_after_commit(signals.order_rejected, order, admin=admin, reason=reason)

    return order


def _expire(order_id, now):
    with transaction.atomic():
        order = _lock_order(order_id)
        if order.status != OrderStatus.PENDING or order.expires_at > now:
            return order, False

        try:
            _compare_and_swap(
                order,
                expected=OrderStatus.PENDING,
                target=OrderStatus.EXPIRED,
                now=now,
            )
        except InvalidOrderStateError:
            # Confirmed or expired by someone else in the meantime
            order.refresh_from_db()
            return order, False

        _send_after_commit(signals.order_expired, order)
        return order, True


def expire_order(*, order_id, now=None) -> Order:
    """
    Expire a PENDING order past its deadline. Any other order is returned unchanged.

    Raises:
        OrderNotFoundError: Missing order
    """
    order, _ = _expire(order_id, now or timezone.now())
    return order


def expire_overdue_orders(*, now=None) -> int:
    """Expire every overdue PENDING order. Returns how many were expired."""
    now = now or timezone.now()
    overdue_ids = list(
        Order.objects
        .filter(status=OrderStatus.PENDING, expires_at__lte=now)
        .values_list('id', flat=True)
    )

    expired = 0
    for order_id in overdue_ids:
        _, changed = _expire(order_id, now)
        expired += int(changed)

    if expired:
        logger.info("Expired %d overdue order(s)", expired)
    return expired
