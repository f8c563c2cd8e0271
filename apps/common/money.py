"""
Money and points primitives.

All monetary values are ``Decimal`` EGP amounts. Intermediate results are
kept at full precision; :func:`round_money` is applied only when a value is
stored or returned as a final figure, so rounding never compounds.

Points are plain ``int`` values. Converting a currency cap to points always
floors (a 19.99 EGP cap allows 19 points).
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP


ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def to_decimal(value) -> Decimal:
    """Coerce ints, strings and Decimals to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def non_negative(value) -> Decimal:
    """Floor a monetary value at zero."""
    value = to_decimal(value)
    return value if value > 0 else Decimal('0')


def floor_to_int(value) -> int:
    """Floor a Decimal amount to a whole number, never below zero."""
    value = to_decimal(value)
    if value <= 0:
        return 0
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def clamp_points(points, upper: int) -> int:
    """Clamp a requested points amount into ``[0, upper]``."""
    points = int(points or 0)
    upper = max(0, int(upper))
    return max(0, min(points, upper))
