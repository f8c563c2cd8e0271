"""
Commission rules and the order financial snapshot.

Who pays for what:
    * The shop owes ``subtotal * commission_rate`` to the platform.
    * Points discounts and free delivery are absorbed by the platform alone,
      out of that commission, floored at zero.
    * Shop earnings and rider earnings never depend on points or free
      delivery; the shop is paid back for redeemed points at settlement.

Values are computed at full precision and rounded once, in
:func:`build_order_financials`, when the snapshot is produced.
"""

from dataclasses import dataclass
from decimal import Decimal

from apps.common.money import ZERO, to_decimal, round_money, non_negative
from apps.points.services.points_engine import apply_points, get_max_redeemable_points


def calculate_shop_commission(subtotal, rate) -> Decimal:
    return to_decimal(subtotal) * to_decimal(rate)


def calculate_free_delivery_cost(is_free_delivery: bool, delivery_fee) -> Decimal:
    return to_decimal(delivery_fee) if is_free_delivery else ZERO


def calculate_platform_commission(shop_commission, points_discount, free_delivery_cost) -> Decimal:
    """Shop commission net of what the platform absorbs, never below zero."""
    return non_negative(
        to_decimal(shop_commission) - to_decimal(points_discount) - to_decimal(free_delivery_cost)
    )


def calculate_customer_total(subtotal, delivery_fee, is_free_delivery: bool, points_discount) -> Decimal:
    effective_fee = ZERO if is_free_delivery else to_decimal(delivery_fee)
    return non_negative(to_decimal(subtotal) + effective_fee - to_decimal(points_discount))


def calculate_shop_earnings(subtotal, shop_commission) -> Decimal:
    """What the shop keeps, always measured before any points discount."""
    return to_decimal(subtotal) - to_decimal(shop_commission)


def calculate_rider_earnings(delivery_fee) -> Decimal:
    """The rider always gets the flat fee, free delivery or not."""
    return to_decimal(delivery_fee)


@dataclass(frozen=True)
class OrderFinancials:
    subtotal: Decimal
    delivery_fee: Decimal
    is_free_delivery: bool
    points_used: int
    points_discount: Decimal
    shop_commission: Decimal
    admin_commission: Decimal
    total_amount: Decimal
    free_delivery_cost: Decimal
    shop_earnings: Decimal
    rider_earnings: Decimal
    max_redeemable_points: int

    def as_order_fields(self) -> dict:
        """Keyword arguments for the ``Order`` snapshot columns."""
        return {
            'subtotal': self.subtotal,
            'delivery_fee': self.delivery_fee,
            'is_free_delivery': self.is_free_delivery,
            'points_used': self.points_used,
            'points_discount': self.points_discount,
            'shop_commission': self.shop_commission,
            'admin_commission': self.admin_commission,
            'total_amount': self.total_amount,
        }


def build_order_financials(
    *,
    subtotal,
    delivery_fee,
    commission_rate,
    is_free_delivery: bool = False,
    points_to_use: int = 0,
    available_points: int = 0,
) -> OrderFinancials:
    """
    Compute the frozen financial snapshot of a new order.

    The requested points are capped by the available balance, by the platform
    commission left after free delivery, and by the order total.

    Args:
        subtotal: Sum of line totals
        delivery_fee: Rider fee for the order
        commission_rate: Shop commission rate (fraction)
        is_free_delivery: Whether the platform waives the delivery fee
        points_to_use: Points requested by the customer
        available_points: Customer balance

    Returns:
        OrderFinancials with every money value rounded to 2 places
    """
    subtotal = to_decimal(subtotal)
    delivery_fee = to_decimal(delivery_fee)

    shop_commission = calculate_shop_commission(subtotal, commission_rate)
    free_delivery_cost = calculate_free_delivery_cost(is_free_delivery, delivery_fee)
    commission_before_discount = calculate_platform_commission(shop_commission, ZERO, free_delivery_cost)

    max_redeemable = get_max_redeemable_points(commission_before_discount, available_points)
    order_total = calculate_customer_total(subtotal, delivery_fee, is_free_delivery, ZERO)
    application = apply_points(order_total, points_to_use, available_points, max_redeemable)

    admin_commission = calculate_platform_commission(
        shop_commission, application.discount_amount, free_delivery_cost
    )
    total_amount = calculate_customer_total(
        subtotal, delivery_fee, is_free_delivery, application.discount_amount
    )

    return OrderFinancials(
        subtotal=round_money(subtotal),
        delivery_fee=round_money(delivery_fee),
        is_free_delivery=is_free_delivery,
        points_used=application.points_used,
        points_discount=round_money(application.discount_amount),
        shop_commission=round_money(shop_commission),
        admin_commission=round_money(admin_commission),
        total_amount=round_money(total_amount),
        free_delivery_cost=round_money(free_delivery_cost),
        shop_earnings=round_money(calculate_shop_earnings(subtotal, shop_commission)),
        rider_earnings=round_money(calculate_rider_earnings(delivery_fee)),
        max_redeemable_points=max_redeemable,
    )
