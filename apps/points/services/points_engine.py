"""
Loyalty points rules.

Pure functions over ``Decimal`` amounts and ``int`` points. Nothing here
touches the database; balance changes go through
:mod:`apps.points.services.points_ledger`.

Rules:
    * 1 point per full ``POINTS_CURRENCY_PER_POINT`` EGP of the original
      subtotal, and nothing below ``POINTS_EARNING_THRESHOLD``.
    * A redeemed point is worth ``POINT_VALUE`` EGP.
    * Redemption is capped by the platform's commission on the order, so the
      platform, never the shop or the rider, pays for the discount.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from django.conf import settings
from django.utils import timezone

from apps.common.money import ZERO, to_decimal, non_negative, floor_to_int, clamp_points


@dataclass(frozen=True)
class PointsApplication:
    """Outcome of applying points to an order total."""

    points_used: int
    discount_amount: Decimal
    original_total: Decimal
    new_total: Decimal
    store_weekly_commission_credit: Decimal
    has_discount: bool


@dataclass(frozen=True)
class PointsValidationResult:
    is_valid: bool
    error_message: Optional[str] = None
    discount_value: Optional[Decimal] = None


def points_to_money(points: int) -> Decimal:
    """Monetary value of ``points`` in EGP."""
    return Decimal(int(points)) * settings.POINT_VALUE


def money_to_points(amount) -> int:
    """Whole points covered by ``amount`` EGP (floored, never negative)."""
    return floor_to_int(to_decimal(amount) / settings.POINT_VALUE)


def calculate_earned_points(subtotal) -> int:
    """
    Points earned for a completed order.

    Args:
        subtotal: Original order subtotal, before any discount

    Returns:
        ``floor(subtotal / 100)`` when subtotal >= 100, otherwise 0
    """
    subtotal = to_decimal(subtotal)
    if subtotal < settings.POINTS_EARNING_THRESHOLD:
        return 0
    return floor_to_int(subtotal / settings.POINTS_CURRENCY_PER_POINT)


def get_max_redeemable_points(platform_commission_before_discount, available_points: int) -> int:
    """
    Largest redemption the platform commission can absorb.

    Args:
        platform_commission_before_discount: Platform share of the order
            before points are applied
        available_points: Customer's current balance

    Returns:
        ``min(available_points, floor(commission))``, never below 0
    """
    cap = money_to_points(platform_commission_before_discount)
    return max(0, min(int(available_points or 0), cap))


def apply_points(
    order_total,
    points_to_use: int,
    available_points: int,
    max_redeemable_points: Optional[int] = None,
) -> PointsApplication:
    """
    Clamp a requested redemption and compute the discounted total.

    The requested amount is clamped into
    ``[0, min(available, max_redeemable, floor(order_total))]``. The discount
    is owed to the store at settlement (``store_weekly_commission_credit``),
    it is not paid out immediately.

    Args:
        order_total: Total before the discount
        points_to_use: Points requested by the customer
        available_points: Customer's current balance
        max_redeemable_points: Commission cap, see :func:`get_max_redeemable_points`.
            Defaults to the available balance.

    Returns:
        PointsApplication
    """
    original_total = to_decimal(order_total)
    available_points = max(0, int(available_points or 0))
    if max_redeemable_points is None:
        max_redeemable_points = available_points

    upper = min(available_points, int(max_redeemable_points), money_to_points(original_total))
    points_used = clamp_points(points_to_use, upper)
    discount = points_to_money(points_used)

    return PointsApplication(
        points_used=points_used,
        discount_amount=discount,
        original_total=original_total,
        new_total=non_negative(original_total - discount),
        store_weekly_commission_credit=discount,
        has_discount=points_used > 0,
    )


def validate_points_redemption(points_to_use: int, available_points: int, platform_commission) -> PointsValidationResult:
    """
    Check a redemption request without clamping it.

    Args:
        points_to_use: Points requested
        available_points: Customer's current balance
        platform_commission: Platform commission the discount must fit in

    Returns:
        PointsValidationResult, with ``discount_value`` set when valid
    """
    points_to_use = int(points_to_use or 0)
    if points_to_use <= 0:
        return PointsValidationResult(False, 'Points to use must be positive')

    if points_to_use > available_points:
        return PointsValidationResult(
            False, f'Insufficient points, available: {available_points}'
        )

    discount_value = points_to_money(points_to_use)
    if discount_value > to_decimal(platform_commission):
        return PointsValidationResult(
            False,
            f'Maximum redeemable is {money_to_points(platform_commission)} points',
        )

    return PointsValidationResult(True, discount_value=discount_value)


def record_points_usage(order_id, store_id, points_used: int, monetary_value):
    """
    Build (without saving) the usage record owed back to the store.

    Returns:
        Unsaved PointsUsageRecord stamped with the current time
    """
    from apps.points.models import PointsUsageRecord

    return PointsUsageRecord(
        order_id=order_id,
        shop_id=store_id,
        points_used=int(points_used),
        monetary_value=to_decimal(monetary_value),
        used_at=timezone.now(),
    )


def calculate_store_weekly_points_credit(records: Iterable, store_id) -> Decimal:
    """Sum ``monetary_value`` of the usage records belonging to ``store_id``."""
    total = ZERO
    for record in records:
        if record.shop_id == store_id:
            total += to_decimal(record.monetary_value)
    return total
