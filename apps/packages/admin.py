from django.contrib import admin
from django.utils.html import format_html
from .models import Package


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    """Catalog management. Prices are whole VND."""

    list_display = [
        'name',
        'duration_months',
        'original_price',
        'sale_price',
        'discount_percent',
        'max_devices',
        'popular_badge',
        'is_active',
        'sort_order',
    ]
    list_editable = ['is_active', 'sort_order']
    list_filter = ['is_active', 'is_popular']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['sort_order', 'duration_months']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'description', 'duration_months', 'features')
        }),
        ('Pricing', {
            'fields': ('original_price', 'sale_price', 'discount_percent'),
        }),
        ('Quotas', {
            'fields': ('videos_per_month', 'keywords_tracking', 'api_calls_per_month', 'max_devices'),
        }),
        ('Display', {
            'fields': ('is_popular', 'is_active', 'sort_order'),
        }),
    )

    def popular_badge(self, obj):
        """Highlight the featured package."""
        if obj.is_popular:
            return format_html(
                '<span style="background: #A47449; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Popular</span>'
            )
        return '-'
    popular_badge.short_description = 'Popular'
    popular_badge.admin_order_field = 'is_popular'
