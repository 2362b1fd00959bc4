"""Statistics service - admin dashboard counters."""

from django.contrib.auth import get_user_model
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.licenses.models import License, LicenseStatus
from apps.orders.models import Order, OrderStatus

User = get_user_model()


def _month_start(now):
    local = timezone.localtime(now)
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def get_dashboard_stats(*, now=None) -> dict:
    """
    Counters shown on the admin dashboard.

    ``monthlyRevenue`` is the sum of amounts of orders completed since the
    start of the current month (local time).

    Returns:
        Dictionary with camelCase keys:
        - totalUsers, totalOrders
        - pendingOrders, processingOrders, completedOrders, rejectedOrders, expiredOrders
        - totalLicenses, activeLicenses
        - monthlyRevenue
    """
    now = now or timezone.now()

    order_counts = Order.objects.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status=OrderStatus.PENDING)),
        processing=Count('id', filter=Q(status=OrderStatus.PROCESSING)),
        completed=Count('id', filter=Q(status=OrderStatus.COMPLETED)),
        rejected=Count('id', filter=Q(status=OrderStatus.REJECTED)),
        expired=Count('id', filter=Q(status=OrderStatus.EXPIRED)),
    )

    license_counts = License.objects.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status=LicenseStatus.ACTIVE, end_date__gt=now)),
    )

    monthly_revenue = Order.objects.filter(
        status=OrderStatus.COMPLETED,
        approved_at__gte=_month_start(now),
        approved_at__lte=now,
    ).aggregate(total=Sum('amount'))['total'] or 0

    return {
        'totalUsers': User.objects.count(),
        'totalOrders': order_counts['total'],
        'pendingOrders': order_counts['pending'],
        'processingOrders': order_counts['processing'],
        'completedOrders': order_counts['completed'],
        'rejectedOrders': order_counts['rejected'],
        'expiredOrders': order_counts['expired'],
        'totalLicenses': license_counts['total'],
        'activeLicenses': license_counts['active'],
        'monthlyRevenue': monthly_revenue,
    }
