from django.contrib import admin
from django.utils.html import format_html
from .models import Order, OrderStatus, STATUS_DISPLAY

BADGE_COLORS = {
    'yellow': ('#E5C49A', '#2C1810'),
    'blue': ('#5C7FB8', 'white'),
    'green': ('#6B8E5E', 'white'),
    'red': ('#B85C5C', 'white'),
    'gray': ('#ccc', '#666'),
}


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly view of orders.

    Status changes go through the REST admin console so that every
    transition is checked and licenses get issued; this page is for lookup.
    """

    list_display = [
        'order_number',
        'user',
        'package_name',
        'amount',
        'transfer_content',
        'status_badge',
        'created_at',
        'expires_at',
    ]
    list_filter = ['status', 'payment_method', 'delivery_method', 'created_at']
    search_fields = ['order_number', 'transfer_content', 'user__email', 'user__name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_select_related = ['user']

    readonly_fields = [
        'id',
        'order_number',
        'user',
        'package',
        'package_name',
        'amount',
        'currency',
        'payment_method',
        'status',
        'transfer_content',
        'user_confirmed_at',
        'approved_at',
        'approved_by',
        'rejected_at',
        'rejected_by',
        'rejection_reason',
        'license',
        'delivery_method',
        'delivery_contact',
        'delivered_at',
        'expires_at',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Order', {
            'fields': ('id', 'order_number', 'user', 'package', 'package_name', 'status')
        }),
        ('Payment', {
            'fields': ('amount', 'currency', 'payment_method', 'transfer_content', 'user_confirmed_at', 'expires_at'),
        }),
        ('Review', {
            'fields': (
                'approved_at', 'approved_by', 'rejected_at', 'rejected_by',
                'rejection_reason', 'admin_notes',
            ),
        }),
        ('Delivery', {
            'fields': ('license', 'delivery_method', 'delivery_contact', 'delivered_at'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def status_badge(self, obj):
        """Display order status as colored badge."""
        label, color, _ = STATUS_DISPLAY[OrderStatus(obj.status)]
        bg, fg = BADGE_COLORS[color]
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, label
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def has_add_permission(self, request):
        return False
