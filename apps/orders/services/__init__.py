"""Services for orders business logic."""

from .order_lifecycle import (
    create_order,
    confirm_payment,
    approve_order,
    reject_order,
    expire_order,
    expire_overdue_orders,
    TransferMemoExhaustedError,
)
from .order_store import get_order, list_orders, save_order
from .statistics import get_dashboard_stats
from .transfer_memo import generate_transfer_content, generate_order_number

__all__ = [
    # Lifecycle
    'create_order',
    'confirm_payment',
    'approve_order',
    'reject_order',
    'expire_order',
    'expire_overdue_orders',
    'TransferMemoExhaustedError',
    # Store
    'get_order',
    'list_orders',
    'save_order',
    # Statistics
    'get_dashboard_stats',
    # Memo
    'generate_transfer_content',
    'generate_order_number',
]
