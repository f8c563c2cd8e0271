from rest_framework import serializers
from .models import WeeklyPeriod, ShopSettlement, RiderSettlement


class WeeklyPeriodSerializer(serializers.ModelSerializer):
    closed_by_email = serializers.EmailField(source='closed_by.email', read_only=True, default=None)

    class Meta:
        model = WeeklyPeriod
        fields = [
            'id',
            'year',
            'week_number',
            'start_date',
            'end_date',
            'status',
            'closed_at',
            'closed_by_email',
            'settled_at',
            'admin_summary',
        ]
        read_only_fields = fields


class ShopSettlementSerializer(serializers.ModelSerializer):
    shop_name = serializers.CharField(source='shop.name', read_only=True)

    class Meta:
        model = ShopSettlement
        fields = [
            'id',
            'shop',
            'shop_name',
            'period',
            'total_orders',
            'completed_orders',
            'cancelled_orders',
            'gross_sales',
            'total_commission',
            'points_discounts_credited',
            'free_delivery_cost',
            'ads_cost',
            'net_amount',
            'status',
            'settled_at',
            'notes',
        ]
        read_only_fields = fields


class RiderSettlementSerializer(serializers.ModelSerializer):
    rider_name = serializers.CharField(source='rider.full_name', read_only=True)

    class Meta:
        model = RiderSettlement
        fields = [
            'id',
            'rider',
            'rider_name',
            'period',
            'total_deliveries',
            'total_earnings',
            'total_cash_handled',
            'status',
            'settled_at',
            'notes',
        ]
        read_only_fields = fields


class PeriodDetailSerializer(WeeklyPeriodSerializer):
    shop_settlements = ShopSettlementSerializer(many=True, read_only=True)
    rider_settlements = RiderSettlementSerializer(many=True, read_only=True)

    class Meta(WeeklyPeriodSerializer.Meta):
        fields = WeeklyPeriodSerializer.Meta.fields + ['shop_settlements', 'rider_settlements']
        read_only_fields = fields


class OpenOrderWarningSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    order_number = serializers.CharField()
    status = serializers.CharField()


class PeriodCloseResponseSerializer(serializers.Serializer):
    """Shape of the period close response."""

    period = WeeklyPeriodSerializer()
    next_period = WeeklyPeriodSerializer(allow_null=True)
    admin_summary = serializers.DictField()
    shop_settlements = ShopSettlementSerializer(many=True)
    rider_settlements = RiderSettlementSerializer(many=True)
    warnings = OpenOrderWarningSerializer(many=True)
    failures = serializers.ListField(child=serializers.DictField())


class MarkSettledSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')
