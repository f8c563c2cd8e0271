"""
Weekly settlement aggregation.

Closing a period is done in two steps:

1. Gate: lock the period, require ``active``, flip it to ``closed`` and open
   the next period, all in one transaction. A second close of the same period
   fails here with :class:`SettlementAlreadyExistsError`.
2. Aggregate: one savepoint per shop and per rider. A failure for one entity
   is logged and reported without touching the others.

Failed entities, or a close that stopped after the gate, are recovered with
:func:`regenerate_settlements`, which creates only the missing rows.

Only ``completed`` orders count towards money figures. Shops with no completed
order in the period get no settlement row.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from apps.common.money import ZERO, to_decimal, round_money
from apps.orders.models import Order, OrderStatus, PersonalCommission
from apps.points.models import PointsUsageRecord
from apps.points.services.points_engine import calculate_store_weekly_points_credit
from apps.settlements.models import (
    WeeklyPeriod,
    PeriodStatus,
    ShopSettlement,
    RiderSettlement,
    AdSpend,
)

from .exceptions import SettlementAlreadyExistsError, PeriodNotClosedError, PeriodNotFoundError
from .period_management import create_next_period, get_period

logger = logging.getLogger(__name__)

OPEN_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.PICKED_UP,
    OrderStatus.SHOP_PAID,
)


@dataclass
class PeriodCloseResult:
    period: WeeklyPeriod
    next_period: Optional[WeeklyPeriod]
    admin_summary: dict
    shop_settlements: list = field(default_factory=list)
    rider_settlements: list = field(default_factory=list)
    warnings: list = field(default_factory=list)
    failures: list = field(default_factory=list)


def calculate_shop_net_amount(gross_sales, total_commission, points_discounts, ads_cost) -> Decimal:
    """Net owed to the shop; redeemed points are paid back on top."""
    return (
        to_decimal(gross_sales)
        - to_decimal(total_commission)
        + to_decimal(points_discounts)
        - to_decimal(ads_cost)
    )


@transaction.atomic
def _lock_and_close(period_id, closed_by):
    """Close the period gate and open the next period."""
    queryset = WeeklyPeriod.objects.select_for_update()
    try:
        if period_id is None:
            period = queryset.get(status=PeriodStatus.ACTIVE)
        else:
            period = queryset.get(pk=period_id)
    except WeeklyPeriod.DoesNotExist:
        raise PeriodNotFoundError('No matching active period')

    if period.status != PeriodStatus.ACTIVE:
        raise SettlementAlreadyExistsError(f'Period is already {period.status}')

    now = timezone.now()
    WeeklyPeriod.objects.filter(pk=period.pk, status=PeriodStatus.ACTIVE).update(
        status=PeriodStatus.CLOSED,
        closed_at=now,
        closed_by=closed_by,
    )
    period.status = PeriodStatus.CLOSED
    period.closed_at = now
    period.closed_by = closed_by

    next_period = create_next_period(period)
    return period, next_period


def _shop_aggregates(period, completed_orders, cancelled_counts):
    """Per-shop totals over completed orders, keyed by shop id."""
    usage_records = list(PointsUsageRecord.objects.filter(
        order__period=period, order__status=OrderStatus.COMPLETED
    ))
    ads = dict(
        AdSpend.objects.filter(period=period)
        .values('shop_id')
        .annotate(total=Sum('amount'))
        .values_list('shop_id', 'total')
    )

    totals = defaultdict(lambda: {
        'completed_orders': 0,
        'gross_sales': ZERO,
        'total_commission': ZERO,
        'free_delivery_cost': ZERO,
    })
    for order in completed_orders:
        row = totals[order.shop_id]
        row['completed_orders'] += 1
        row['gross_sales'] += order.subtotal
        row['total_commission'] += order.shop_commission
        row['free_delivery_cost'] += order.free_delivery_cost

    for shop_id, row in totals.items():
        row['cancelled_orders'] = cancelled_counts.get(shop_id, 0)
        row['total_orders'] = row['completed_orders'] + row['cancelled_orders']
        row['points_discounts_credited'] = calculate_store_weekly_points_credit(usage_records, shop_id)
        row['ads_cost'] = to_decimal(ads.get(shop_id) or ZERO)
        row['net_amount'] = calculate_shop_net_amount(
            row['gross_sales'],
            row['total_commission'],
            row['points_discounts_credited'],
            row['ads_cost'],
        )
    return totals


def _rider_aggregates(completed_orders):
    totals = defaultdict(lambda: {
        'total_deliveries': 0,
        'total_earnings': ZERO,
        'total_cash_handled': ZERO,
    })
    for order in completed_orders:
        if order.rider_id is None:
            continue
        row = totals[order.rider_id]
        row['total_deliveries'] += 1
        row['total_earnings'] += order.rider_earnings
        row['total_cash_handled'] += order.total_amount
    return totals


def _create_shop_settlement(period, shop_id, row) -> ShopSettlement:
    with transaction.atomic():
        if ShopSettlement.objects.filter(shop_id=shop_id, period=period).exists():
            raise SettlementAlreadyExistsError(f'Shop {shop_id} already settled for this period')
        return ShopSettlement.objects.create(
            shop_id=shop_id,
            period=period,
            total_orders=row['total_orders'],
            completed_orders=row['completed_orders'],
            cancelled_orders=row['cancelled_orders'],
            gross_sales=round_money(row['gross_sales']),
            total_commission=round_money(row['total_commission']),
            points_discounts_credited=round_money(row['points_discounts_credited']),
            free_delivery_cost=round_money(row['free_delivery_cost']),
            ads_cost=round_money(row['ads_cost']),
            net_amount=round_money(row['net_amount']),
        )


def _create_rider_settlement(period, rider_id, row) -> RiderSettlement:
    with transaction.atomic():
        if RiderSettlement.objects.filter(rider_id=rider_id, period=period).exists():
            raise SettlementAlreadyExistsError(f'Rider {rider_id} already settled for this period')
        return RiderSettlement.objects.create(
            rider_id=rider_id,
            period=period,
            total_deliveries=row['total_deliveries'],
            total_earnings=round_money(row['total_earnings']),
            total_cash_handled=round_money(row['total_cash_handled']),
        )


def build_admin_summary(*, period, orders) -> dict:
    """
    Platform-level figures for the period.

    Commission, points cost and free delivery cost are taken over all
    completed orders; ads revenue over all ad spend booked in the period.
    Personal commission appears here and nowhere else.
    """
    completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
    cancelled = [o for o in orders if o.status == OrderStatus.CANCELLED]

    total_commissions = sum((o.shop_commission for o in completed), ZERO)
    points_cost = sum((o.points_discount for o in completed), ZERO)
    free_delivery_cost = sum((o.free_delivery_cost for o in completed), ZERO)
    ads_revenue = AdSpend.objects.filter(period=period).aggregate(total=Sum('amount'))['total'] or ZERO
    net_revenue = total_commissions - points_cost - free_delivery_cost + ads_revenue

    personal_total = PersonalCommission.objects.filter(
        order__period=period, order__status=OrderStatus.COMPLETED
    ).aggregate(total=Sum('total'))['total'] or ZERO

    figures = {
        'gross_sales': sum((o.subtotal for o in completed), ZERO),
        'total_delivery_fees': sum((o.delivery_fee for o in completed), ZERO),
        'admin_total_commissions': total_commissions,
        'admin_points_cost': points_cost,
        'admin_free_delivery_cost': free_delivery_cost,
        'admin_ads_revenue': to_decimal(ads_revenue),
        'admin_net_revenue': net_revenue,
        'personal_commission_total': to_decimal(personal_total),
    }
    summary = {key: str(round_money(value)) for key, value in figures.items()}
    summary.update({
        'total_orders': len(orders),
        'completed_orders': len(completed),
        'cancelled_orders': len(cancelled),
        'total_points_redeemed': sum(o.points_used for o in completed),
    })
    return summary


def _generate_settlements(period, result, *, skip_existing=False):
    """
    Create the shop and rider settlements of a closed period and store its
    admin summary on ``result`` and the period.

    With ``skip_existing`` the shops and riders that already have a row are
    left alone, so only the missing settlements are created.
    """
    orders = list(Order.objects.filter(period=period))
    completed_orders = [o for o in orders if o.status == OrderStatus.COMPLETED]
    cancelled_counts = defaultdict(int)
    for order in orders:
        if order.status == OrderStatus.CANCELLED:
            cancelled_counts[order.shop_id] += 1

    for order in orders:
        if order.status in OPEN_STATUSES:
            logger.warning(
                "Order %s is still %s at close of period %s; excluded from settlement",
                order.order_number, order.status, period.pk,
            )
            result.warnings.append({
                'order_id': str(order.pk),
                'order_number': order.order_number,
                'status': order.status,
            })

    settled_shops = set()
    settled_riders = set()
    if skip_existing:
        settled_shops = set(ShopSettlement.objects.filter(period=period).values_list('shop_id', flat=True))
        settled_riders = set(RiderSettlement.objects.filter(period=period).values_list('rider_id', flat=True))

    for shop_id, row in _shop_aggregates(period, completed_orders, cancelled_counts).items():
        if shop_id in settled_shops:
            continue
        try:
            result.shop_settlements.append(_create_shop_settlement(period, shop_id, row))
        except Exception as e:
            logger.exception("Shop settlement failed for shop %s in period %s", shop_id, period.pk)
            result.failures.append({'shop_id': str(shop_id), 'error': str(e)})

    for rider_id, row in _rider_aggregates(completed_orders).items():
        if rider_id in settled_riders:
            continue
        try:
            result.rider_settlements.append(_create_rider_settlement(period, rider_id, row))
        except Exception as e:
            logger.exception("Rider settlement failed for rider %s in period %s", rider_id, period.pk)
            result.failures.append({'rider_id': str(rider_id), 'error': str(e)})

    summary = build_admin_summary(period=period, orders=orders)
    summary['open_orders'] = len(result.warnings)
    summary['failures'] = result.failures
    WeeklyPeriod.objects.filter(pk=period.pk).update(admin_summary=summary)
    period.admin_summary = summary
    result.admin_summary = summary
    return result


def close_period(*, period_id=None, closed_by=None) -> PeriodCloseResult:
    """
    Close a weekly period and generate its settlements.

    Args:
        period_id: Period to close. Defaults to the active period.
        closed_by: Admin user performing the close

    Returns:
        PeriodCloseResult with the settlements, the admin summary, warnings
        for orders still open and any per-entity failures

    Raises:
        PeriodNotFoundError: No such period (or no active period)
        SettlementAlreadyExistsError: Period is not active
    """
    period, next_period = _lock_and_close(period_id, closed_by)
    logger.info("Closing period %s (%s - %s)", period.pk, period.start_date, period.end_date)

    result = PeriodCloseResult(period=period, next_period=next_period, admin_summary={})
    _generate_settlements(period, result)

    logger.info(
        "Closed period %s: %d shop settlements, %d rider settlements, %d warnings, %d failures",
        period.pk, len(result.shop_settlements), len(result.rider_settlements),
        len(result.warnings), len(result.failures),
    )
    return result


def regenerate_settlements(*, period_id) -> PeriodCloseResult:
    """
    Create the settlements a closed period is missing.

    Recovers shops and riders whose settlement failed at close, or a close
    that stopped after the gate. Existing rows are never touched or duplicated.

    Returns:
        PeriodCloseResult holding only the newly created settlements;
        ``next_period`` is None

    Raises:
        PeriodNotFoundError: No such period
        PeriodNotClosedError: Period is active or already settled
    """
    period = get_period(period_id)
    if period.status != PeriodStatus.CLOSED:
        raise PeriodNotClosedError(f'Period is {period.status}')

    logger.info("Regenerating settlements for period %s", period.pk)
    result = PeriodCloseResult(period=period, next_period=None, admin_summary={})
    _generate_settlements(period, result, skip_existing=True)

    logger.info(
        "Regenerated period %s: %d shop settlements, %d rider settlements, %d failures",
        period.pk, len(result.shop_settlements), len(result.rider_settlements),
        len(result.failures),
    )
    return result
