"""
Management command to expire overdue orders.

PENDING orders whose payment window has passed are moved to EXPIRED.
Meant to run periodically (cron, scheduler job).

Usage:
    python manage.py expire_orders
    python manage.py expire_orders --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone
from apps.orders.models import Order, OrderStatus
from apps.orders.services import expire_overdue_orders


class Command(BaseCommand):
    help = 'Expire PENDING orders past their payment deadline'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be expired without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        now = timezone.now()

        overdue = Order.objects.filter(
            status=OrderStatus.PENDING,
            expires_at__lte=now
        ).select_related('user')

        count = overdue.count()

        if count == 0:
            self.stdout.write(
                self.style.SUCCESS('No overdue orders.')
            )
            return

        self.stdout.write(f'\nFound {count} overdue order(s):\n')

        for order in overdue:
            self.stdout.write(
                f'  - {order.order_number} | {order.amount} VND | {order.user.email} | Expired at: {order.expires_at:%Y-%m-%d %H:%M}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        expired = expire_overdue_orders(now=now)

        self.stdout.write(
            self.style.SUCCESS(f'\n✓ Expired {expired} order(s).')
        )
