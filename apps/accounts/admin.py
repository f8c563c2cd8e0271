from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, Customer, Shop, Rider, Referral


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for platform users.

    Users are listed with their role; the role profile (customer, shop or
    rider) is managed from its own admin page.
    """

    list_display = [
        'email',
        'display_name',
        'role',
        'is_active_badge',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_staff',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
        'phone',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'phone', 'role', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Active</span>'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Inactive</span>'
        )
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (superusers are skipped)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """
    Customer profiles.

    The points balance is read-only here; corrections go through the points
    adjustment endpoint so that every change lands in the ledger.
    """

    list_display = ['full_name', 'user', 'area', 'total_points', 'completed_orders_count', 'created_at']
    search_fields = ['full_name', 'user__email', 'referral_code']
    list_filter = ['area']
    readonly_fields = ['total_points', 'referral_code', 'completed_orders_count', 'created_at', 'updated_at']
    raw_id_fields = ['user']


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'commission_rate', 'min_order_amount', 'is_active', 'is_open']
    list_filter = ['is_active', 'is_open']
    search_fields = ['name', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
    raw_id_fields = ['user']


@admin.register(Rider)
class RiderAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'user', 'is_available']
    list_filter = ['is_available']
    search_fields = ['full_name', 'user__email']
    raw_id_fields = ['user']


@admin.register(Referral)
class ReferralAdmin(admin.ModelAdmin):
    list_display = ['referrer', 'referred', 'status', 'points_awarded', 'created_at', 'completed_at']
    list_filter = ['status', 'points_awarded']
    search_fields = ['referrer__full_name', 'referred__full_name']
    readonly_fields = ['status', 'first_order', 'points_awarded', 'created_at', 'completed_at']
    raw_id_fields = ['referrer', 'referred']
