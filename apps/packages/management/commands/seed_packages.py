"""
Management command to seed the package catalog.

Creates or updates the five standard subscription packages, matched by slug.
Running it again only refreshes their fields.

Usage:
    python manage.py seed_packages
    python manage.py seed_packages --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from apps.packages.models import Package


CATALOG = [
    {
        'slug': '1-thang',
        'name': '1 Tháng',
        'duration_months': 1,
        'original_price': 499000,
        'sale_price': 499000,
        'discount_percent': 0,
        'videos_per_month': 30,
        'features': ['Tạo 30 video/tháng', 'SEO cơ bản'],
        'max_devices': 1,
    },
    {
        'slug': '2-thang',
        'name': '2 Tháng',
        'duration_months': 2,
        'original_price': 998000,
        'sale_price': 899000,
        'discount_percent': 10,
        'videos_per_month': 60,
        'features': ['Tạo 60 video/tháng', 'SEO cơ bản'],
        'max_devices': 1,
    },
    {
        'slug': '3-thang',
        'name': '3 Tháng',
        'duration_months': 3,
        'original_price': 1497000,
        'sale_price': 1199000,
        'discount_percent': 20,
        'videos_per_month': 150,
        'features': ['Tạo 150 video/tháng', 'SEO nâng cao', 'Hỗ trợ 24/7'],
        'max_devices': 2,
        'is_popular': True,
    },
    {
        'slug': '6-thang',
        'name': '6 Tháng',
        'duration_months': 6,
        'original_price': 2994000,
        'sale_price': 2099000,
        'discount_percent': 30,
        'videos_per_month': 300,
        'features': ['Tạo 300 video/tháng', 'SEO nâng cao', 'Hỗ trợ 24/7'],
        'max_devices': 2,
    },
    {
        'slug': '1-nam',
        'name': '1 Năm',
        'duration_months': 12,
        'original_price': 5988000,
        'sale_price': 3599000,
        'discount_percent': 40,
        'videos_per_month': 0,
        'features': ['Không giới hạn video', 'Full tính năng AI', 'Ưu tiên hỗ trợ'],
        'max_devices': 3,
    },
]


class Command(BaseCommand):
    help = 'Create or update the standard subscription packages'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be written without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        self.stdout.write(f'\nSeeding {len(CATALOG)} package(s):\n')
        for entry in CATALOG:
            self.stdout.write(
                f"  - {entry['name']} | {entry['sale_price']} VND | {entry['duration_months']} month(s)"
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        created = 0
        with transaction.atomic():
            for position, entry in enumerate(CATALOG):
                defaults = {key: value for key, value in entry.items() if key != 'slug'}
                defaults.setdefault('is_popular', False)
                defaults['sort_order'] = position
                defaults['is_active'] = True
                _, was_created = Package.objects.update_or_create(
                    slug=entry['slug'],
                    defaults=defaults
                )
                created += int(was_created)

        self.stdout.write(
            self.style.SUCCESS(
                f'\n✓ Seeded packages: {created} created, {len(CATALOG) - created} updated.'
            )
        )
