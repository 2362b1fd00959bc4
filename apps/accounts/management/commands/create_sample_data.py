"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 1 admin and 3 customers
- The package catalog (via seed_packages)
- One order in every status (pending, processing, completed, rejected, expired)
"""

from datetime import timedelta

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole, UserSession
from apps.licenses.models import License
from apps.orders.models import Order, DeliveryMethod
from apps.orders.services import (
    create_order,
    confirm_payment,
    approve_order,
    reject_order,
    expire_order,
)
from apps.packages.models import Package

ADMIN_PASSWORD = 'admin123'
CUSTOMER_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Create sample accounts, packages and orders for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing orders, licenses and sample accounts first',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()

        self.stdout.write('  Seeding packages...')
        call_command('seed_packages', stdout=self.stdout)

        self.create_orders(users)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write(f'  admin@veo3.ai / {ADMIN_PASSWORD} (admin)')
        for key in ('an', 'binh', 'chi'):
            self.stdout.write(f'  {users[key].email} / {CUSTOMER_PASSWORD}')

    def clear_data(self):
        """Remove orders, licenses, sessions and the sample accounts."""
        Order.objects.all().delete()
        License.objects.all().delete()
        UserSession.objects.all().delete()
        User.objects.filter(email__in=[
            'admin@veo3.ai',
            'an.nguyen@example.com',
            'binh.tran@example.com',
            'chi.le@example.com',
        ]).delete()

    def create_users(self):
        """Create the admin and three customers."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@veo3.ai',
            defaults={
                'name': 'Admin VEO3',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password(ADMIN_PASSWORD)
        admin.save()

        customers = {}
        for key, email, name, phone in [
            ('an', 'an.nguyen@example.com', 'Nguyễn Văn An', '0901234567'),
            ('binh', 'binh.tran@example.com', 'Trần Thị Bình', '0912345678'),
            ('chi', 'chi.le@example.com', 'Lê Minh Chí', ''),
        ]:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={'name': name, 'phone': phone}
            )
            user.set_password(CUSTOMER_PASSWORD)
            user.save()
            customers[key] = user

        return {'admin': admin, **customers}

    def create_orders(self, users):
        """Walk one order into each status through the lifecycle services."""
        self.stdout.write('  Creating orders...')

        admin = users['admin']
        packages = {p.slug: p for p in Package.objects.filter(is_active=True)}
        if not packages:
            self.stdout.write(self.style.WARNING('  No active packages, skipping orders'))
            return

        def package(slug):
            return packages.get(slug) or next(iter(packages.values()))

        # PENDING: waiting for the transfer
        create_order(user=users['an'], package_id=package('1-thang').id)

        # PROCESSING: customer says they paid
        order = create_order(user=users['binh'], package_id=package('3-thang').id)
        confirm_payment(order_id=order.id, user=users['binh'])

        # COMPLETED: license issued and delivered by email
        order = create_order(user=users['an'], package_id=package('6-thang').id)
        confirm_payment(order_id=order.id, user=users['an'])
        approve_order(
            order_id=order.id,
            admin=admin,
            max_devices=3,
            delivery_method=DeliveryMethod.EMAIL,
            admin_notes='Sample approval',
        )

        # REJECTED: no matching transfer
        order = create_order(user=users['chi'], package_id=package('1-nam').id)
        confirm_payment(order_id=order.id, user=users['chi'])
        reject_order(order_id=order.id, admin=admin, reason='Không nhận được chuyển khoản')

        # EXPIRED: never paid
        order = create_order(user=users['chi'], package_id=package('2-thang').id)
        expire_order(order_id=order.id, now=order.expires_at + timedelta(seconds=1))

        self.stdout.write(f'  {Order.objects.count()} orders in total ({timezone.now():%Y-%m-%d %H:%M})')
