from rest_framework import serializers
from .models import PointsTransaction, PointsUsageRecord


class PointsTransactionSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)

    class Meta:
        model = PointsTransaction
        fields = [
            'id',
            'transaction_type',
            'points',
            'balance_after',
            'description',
            'order',
            'order_number',
            'created_at',
        ]
        read_only_fields = fields


class PointsUsageRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = PointsUsageRecord
        fields = ['id', 'order', 'shop', 'points_used', 'monetary_value', 'used_at']
        read_only_fields = fields


class PointsBalanceSerializer(serializers.Serializer):
    total_points = serializers.IntegerField()
    point_value = serializers.DecimalField(max_digits=6, decimal_places=2)
    monetary_value = serializers.DecimalField(max_digits=10, decimal_places=2)


class PointsAdjustmentSerializer(serializers.Serializer):
    """Validate a manual admin adjustment."""

    customer_id = serializers.UUIDField()
    points = serializers.IntegerField()
    reason = serializers.CharField(max_length=255)

    def validate_points(self, value):
        if value == 0:
            raise serializers.ValidationError("Points must not be zero.")
        return value
