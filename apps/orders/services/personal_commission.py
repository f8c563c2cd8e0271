"""
Personal commission tracking.

An internal-accounting figure computed from the subtotal and the delivery fee.
It is stored on its own table and only ever surfaces in the period admin
summary; nothing here reads or changes shop, rider or platform amounts.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings

from apps.common.money import ZERO, to_decimal, round_money
from apps.orders.models import Order, PersonalCommission


@dataclass(frozen=True)
class PersonalCommissionBreakdown:
    from_store: Decimal
    from_delivery: Decimal
    total: Decimal


def calculate_personal_commission(subtotal, delivery_fee, is_free_delivery: bool) -> PersonalCommissionBreakdown:
    subtotal = to_decimal(subtotal)
    from_store = subtotal * settings.PERSONAL_COMMISSION_STORE_RATE if subtotal > 0 else ZERO
    from_delivery = ZERO if is_free_delivery else to_decimal(delivery_fee) * settings.PERSONAL_COMMISSION_DELIVERY_RATE

    return PersonalCommissionBreakdown(
        from_store=round_money(from_store),
        from_delivery=round_money(from_delivery),
        total=round_money(from_store + from_delivery),
    )


def record_personal_commission(*, order: Order) -> PersonalCommission:
    """Store the personal commission for a newly placed order."""
    breakdown = calculate_personal_commission(
        order.subtotal, order.delivery_fee, order.is_free_delivery
    )
    return PersonalCommission.objects.create(
        order=order,
        from_store=breakdown.from_store,
        from_delivery=breakdown.from_delivery,
        total=breakdown.total,
    )
