from rest_framework import serializers

from apps.accounts.serializers import ShopMinimalSerializer, RiderMinimalSerializer
from .models import Order, OrderItem, OrderStatus, OrderStatusHistory, Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'shop', 'name', 'description', 'price', 'is_available']
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'product_name', 'unit_price', 'quantity', 'line_total']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Order with its full financial snapshot."""

    shop = ShopMinimalSerializer(read_only=True)
    rider = RiderMinimalSerializer(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    shop_earnings = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    rider_earnings = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'customer',
            'customer_name',
            'shop',
            'rider',
            'period',
            'status',
            'items',
            'subtotal',
            'delivery_fee',
            'is_free_delivery',
            'points_used',
            'points_discount',
            'shop_commission',
            'admin_commission',
            'total_amount',
            'points_earned',
            'shop_earnings',
            'rider_earnings',
            'delivery_address',
            'notes',
            'created_at',
            'completed_at',
            'cancelled_at',
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order listings."""

    shop_name = serializers.CharField(source='shop.name', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'shop_name',
            'status',
            'subtotal',
            'total_amount',
            'points_used',
            'created_at',
        ]
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    """Validate order creation payload."""

    shop_id = serializers.UUIDField()
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    delivery_address = serializers.CharField()
    points_to_use = serializers.IntegerField(min_value=0, required=False, default=0)
    is_free_delivery = serializers.BooleanField(required=False, default=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderTransitionSerializer(serializers.Serializer):
    target_status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_email = serializers.EmailField(source='changed_by.email', read_only=True, default=None)

    class Meta:
        model = OrderStatusHistory
        fields = ['id', 'from_status', 'to_status', 'actor_role', 'changed_by_email', 'notes', 'created_at']
        read_only_fields = fields
