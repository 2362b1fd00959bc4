"""Order persistence and lookup."""

from typing import Optional, Tuple, List
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q

from apps.orders.exceptions import OrderNotFoundError, OrderValidationError
from apps.orders.models import Order, OrderStatus


def _base_queryset():
    return Order.objects.select_related('user', 'package', 'license')


def get_order(*, order_id, user=None) -> Order:
    """
    Fetch a single order.

    Args:
        order_id: Order UUID (string or UUID)
        user: When given, the order must belong to this user

    Raises:
        OrderNotFoundError: If the order does not exist or is not owned by ``user``
    """
    try:
        order = _base_queryset().get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()

    if user is not None and order.user_id != user.pk:
        raise OrderNotFoundError()

    return order


def list_orders(
    *,
    status: Optional[str] = None,
    owner_id: Optional[UUID] = None,
    search_text: Optional[str] = None,
    page: int = 1,
    limit: int = 20
) -> Tuple[List[Order], int]:
    """
    Return one page of orders, newest first, and the total match count.

    ``search_text`` matches the transfer memo, the order number and the
    customer's email or name, case-insensitively.
    """
    queryset = _base_queryset()

    if status:
        if status not in OrderStatus.values:
            raise OrderValidationError(f"Unknown order status: {status}")
        queryset = queryset.filter(status=status)

    if owner_id:
        queryset = queryset.filter(user_id=owner_id)

    search_text = (search_text or '').strip()
    if search_text:
        queryset = queryset.filter(
            Q(transfer_content__icontains=search_text) |
            Q(order_number__icontains=search_text) |
            Q(user__email__icontains=search_text) |
            Q(user__name__icontains=search_text)
        )

    queryset = queryset.order_by('-created_at', '-id')

    total = queryset.count()
    offset = (page - 1) * limit
    return list(queryset[offset:offset + limit]), total


def save_order(order: Order) -> Order:
    """Persist a single order."""
    order.save()
    return order
