from rest_framework import serializers
from .models import User, Customer, Shop, Rider, Referral


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'phone',
            'role',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class CustomerSerializer(serializers.ModelSerializer):
    """Customer profile including points balance and referral code."""

    referred_by = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id',
            'full_name',
            'address_text',
            'landmark',
            'area',
            'total_points',
            'referral_code',
            'referred_by',
            'completed_orders_count',
            'created_at',
        ]
        read_only_fields = [
            'id',
            'total_points',
            'referral_code',
            'referred_by',
            'completed_orders_count',
            'created_at',
        ]

    def get_referred_by(self, obj):
        referrer = obj.referred_by
        return str(referrer.id) if referrer else None


class ShopMinimalSerializer(serializers.ModelSerializer):
    """Minimal shop info for nested serialization."""

    class Meta:
        model = Shop
        fields = ['id', 'name', 'commission_rate', 'min_order_amount', 'is_open']


class RiderMinimalSerializer(serializers.ModelSerializer):
    """Minimal rider info for nested serialization."""

    class Meta:
        model = Rider
        fields = ['id', 'full_name', 'is_available']


class ApplyReferralSerializer(serializers.Serializer):
    """Validate referral code input."""

    referral_code = serializers.CharField(max_length=16)


class ReferralSerializer(serializers.ModelSerializer):
    class Meta:
        model = Referral
        fields = ['id', 'referrer', 'referred', 'status', 'points_awarded', 'created_at', 'completed_at']
        read_only_fields = fields
