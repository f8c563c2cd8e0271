from decimal import Decimal

import pytest

from apps.orders.services.commission import (
    calculate_shop_commission,
    calculate_free_delivery_cost,
    calculate_platform_commission,
    calculate_customer_total,
    calculate_shop_earnings,
    calculate_rider_earnings,
    build_order_financials,
)
from apps.points.services.points_engine import calculate_earned_points

RATE = Decimal('0.10')
FEE = Decimal('10.00')


class TestCommissionRules:

    def test_shop_commission(self):
        assert calculate_shop_commission(Decimal('300'), RATE) == Decimal('30.000')

    def test_free_delivery_cost(self):
        assert calculate_free_delivery_cost(True, FEE) == FEE
        assert calculate_free_delivery_cost(False, FEE) == 0

    def test_platform_commission_floored_at_zero(self):
        assert calculate_platform_commission(Decimal('8'), Decimal('8'), FEE) == 0

    def test_customer_total_floored_at_zero(self):
        assert calculate_customer_total(Decimal('5'), FEE, True, Decimal('20')) == 0

    def test_shop_and_rider_earnings(self):
        assert calculate_shop_earnings(Decimal('300'), Decimal('30')) == Decimal('270')
        assert calculate_rider_earnings(FEE) == FEE


class TestWorkedScenarios:

    def test_points_on_paid_delivery(self):
        f = build_order_financials(
            subtotal=Decimal('300'), delivery_fee=FEE, commission_rate=RATE,
            points_to_use=10, available_points=50,
        )

        assert f.points_used == 10
        assert f.shop_commission == Decimal('30.00')
        assert f.admin_commission == Decimal('20.00')
        assert f.total_amount == Decimal('300.00')
        assert f.shop_earnings == Decimal('270.00')
        assert f.rider_earnings == Decimal('10.00')
        assert calculate_earned_points(f.subtotal) == 3

    def test_points_on_free_delivery(self):
        f = build_order_financials(
            subtotal=Decimal('500'), delivery_fee=FEE, commission_rate=RATE,
            is_free_delivery=True, points_to_use=20, available_points=20,
        )

        assert f.shop_commission == Decimal('50.00')
        assert f.free_delivery_cost == Decimal('10.00')
        assert f.admin_commission == Decimal('20.00')
        assert f.total_amount == Decimal('480.00')
        assert f.rider_earnings == Decimal('10.00')
        assert calculate_earned_points(f.subtotal) == 5

    def test_below_points_threshold(self):
        f = build_order_financials(
            subtotal=Decimal('80'), delivery_fee=FEE, commission_rate=RATE,
        )

        assert f.shop_commission == Decimal('8.00')
        assert f.admin_commission == Decimal('8.00')
        assert f.total_amount == Decimal('90.00')
        assert calculate_earned_points(f.subtotal) == 0


class TestBuildOrderFinancials:

    def test_points_capped_by_commission_after_free_delivery(self):
        f = build_order_financials(
            subtotal=Decimal('300'), delivery_fee=FEE, commission_rate=RATE,
            is_free_delivery=True, points_to_use=100, available_points=100,
        )

        assert f.max_redeemable_points == 20
        assert f.points_used == 20
        assert f.admin_commission == Decimal('0.00')

    def test_free_delivery_larger_than_commission(self):
        f = build_order_financials(
            subtotal=Decimal('60'), delivery_fee=FEE, commission_rate=RATE,
            is_free_delivery=True, points_to_use=5, available_points=5,
        )

        assert f.points_used == 0
        assert f.admin_commission == Decimal('0.00')
        assert f.total_amount == Decimal('60.00')

    def test_money_rounded_half_up_at_storage(self):
        f = build_order_financials(
            subtotal=Decimal('123.45'), delivery_fee=FEE, commission_rate=Decimal('0.10'),
        )

        assert f.shop_commission == Decimal('12.35')
        assert f.admin_commission == Decimal('12.35')

    def test_discount_never_exceeds_shop_commission(self):
        for points in (0, 5, 17, 1000):
            f = build_order_financials(
                subtotal=Decimal('175.50'), delivery_fee=FEE, commission_rate=Decimal('0.10'),
                points_to_use=points, available_points=1000,
            )
            assert f.points_discount <= f.shop_commission
            assert f.admin_commission >= 0
            assert f.total_amount >= 0

    @pytest.mark.parametrize('points', [0, 1, 10, 30])
    def test_shop_and_rider_earnings_independent_of_points(self, points):
        f = build_order_financials(
            subtotal=Decimal('300'), delivery_fee=FEE, commission_rate=RATE,
            points_to_use=points, available_points=100,
        )

        assert f.shop_earnings == Decimal('270.00')
        assert f.rider_earnings == Decimal('10.00')

    def test_snapshot_field_mapping(self):
        f = build_order_financials(subtotal=Decimal('100'), delivery_fee=FEE, commission_rate=RATE)

        fields = f.as_order_fields()

        assert set(fields) == {
            'subtotal', 'delivery_fee', 'is_free_delivery', 'points_used',
            'points_discount', 'shop_commission', 'admin_commission', 'total_amount',
        }
