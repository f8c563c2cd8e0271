from decimal import Decimal

from apps.common.money import round_money, non_negative, floor_to_int, clamp_points, to_decimal


class TestRoundMoney:

    def test_half_rounds_away_from_zero(self):
        assert round_money(Decimal('2.345')) == Decimal('2.35')
        assert round_money(Decimal('-2.345')) == Decimal('-2.35')

    def test_below_half_rounds_down(self):
        assert round_money(Decimal('2.344')) == Decimal('2.34')

    def test_float_input_has_no_binary_artefacts(self):
        assert round_money(0.1 + 0.2) == Decimal('0.30')


class TestNonNegative:

    def test_negative_floors_to_zero(self):
        assert non_negative(Decimal('-5.00')) == 0

    def test_positive_unchanged(self):
        assert non_negative(Decimal('5.50')) == Decimal('5.50')


class TestFloorToInt:

    def test_floors_fraction(self):
        assert floor_to_int(Decimal('19.99')) == 19

    def test_negative_is_zero(self):
        assert floor_to_int(Decimal('-3.5')) == 0


class TestClampPoints:

    def test_clamps_to_upper(self):
        assert clamp_points(50, 30) == 30

    def test_negative_request_is_zero(self):
        assert clamp_points(-5, 30) == 0

    def test_none_request_is_zero(self):
        assert clamp_points(None, 30) == 0

    def test_negative_upper_is_zero(self):
        assert clamp_points(10, -1) == 0


def test_to_decimal_accepts_strings_and_ints():
    assert to_decimal('10.50') == Decimal('10.50')
    assert to_decimal(3) == Decimal('3')
