from django.contrib import admin
from django.utils.html import format_html
from .models import License, LicenseStatus


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Issued licenses. Keys are created by order approval only."""

    list_display = [
        'license_key',
        'user',
        'package',
        'max_devices',
        'start_date',
        'end_date',
        'status_badge',
    ]
    list_filter = ['status', 'package']
    search_fields = ['license_key', 'user__email', 'user__name']
    readonly_fields = ['license_key', 'user', 'package', 'start_date', 'created_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    actions = ['revoke_licenses']

    def status_badge(self, obj):
        """Display license status as colored badge."""
        colors = {
            LicenseStatus.ACTIVE: ('#6B8E5E', 'white'),
            LicenseStatus.REVOKED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Revoke selected licenses')
    def revoke_licenses(self, request, queryset):
        count = queryset.update(status=LicenseStatus.REVOKED)
        self.message_user(request, f'Revoked {count} license(s).')

    def has_add_permission(self, request):
        return False
