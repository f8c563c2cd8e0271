from django.contrib import admin
from .models import PointsTransaction, PointsUsageRecord


@admin.register(PointsTransaction)
class PointsTransactionAdmin(admin.ModelAdmin):
    list_display = ['customer', 'transaction_type', 'points', 'balance_after', 'order', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['customer__full_name', 'order__order_number', 'description']
    date_hierarchy = 'created_at'

    # Ledger rows are append-only; adjustments go through the API
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PointsUsageRecord)
class PointsUsageRecordAdmin(admin.ModelAdmin):
    list_display = ['order', 'shop', 'points_used', 'monetary_value', 'used_at']
    list_filter = ['shop']
    readonly_fields = ['order', 'shop', 'points_used', 'monetary_value', 'used_at']
