from django.contrib import admin
from .models import Product, Order, OrderItem, OrderStatusHistory, PersonalCommission


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'shop', 'price', 'is_available']
    list_filter = ['is_available', 'shop']
    search_fields = ['name', 'shop__name']


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['product', 'product_name', 'unit_price', 'quantity', 'line_total']
    can_delete = False


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'actor_role', 'changed_by', 'notes', 'created_at']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_number', 'shop', 'customer', 'status',
        'subtotal', 'points_used', 'admin_commission', 'total_amount', 'created_at',
    ]
    list_filter = ['status', 'is_free_delivery', 'period']
    search_fields = ['order_number', 'customer__full_name', 'shop__name']
    inlines = [OrderItemInline, OrderStatusHistoryInline]
    date_hierarchy = 'created_at'

    # The financial snapshot is frozen at placement
    readonly_fields = [
        'order_number', 'customer', 'shop', 'rider', 'period', 'status',
        'subtotal', 'delivery_fee', 'is_free_delivery', 'points_used', 'points_discount',
        'shop_commission', 'admin_commission', 'total_amount', 'points_earned',
        'created_at', 'updated_at', 'completed_at', 'cancelled_at',
    ]


@admin.register(PersonalCommission)
class PersonalCommissionAdmin(admin.ModelAdmin):
    list_display = ['order', 'from_store', 'from_delivery', 'total', 'created_at']
    readonly_fields = ['order', 'from_store', 'from_delivery', 'total', 'created_at']
