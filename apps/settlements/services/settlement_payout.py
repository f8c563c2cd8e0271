"""
Settlement payout.

Admins confirm each shop and rider payout individually. When the last pending
settlement of a closed period is confirmed, the period becomes ``settled``.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.settlements.models import (
    WeeklyPeriod,
    PeriodStatus,
    ShopSettlement,
    RiderSettlement,
    SettlementStatus,
)

from .exceptions import SettlementAlreadySettledError, SettlementNotFoundError

logger = logging.getLogger(__name__)


def _mark_settled(model, settlement_id, notes):
    try:
        settlement = model.objects.get(pk=settlement_id)
    except (model.DoesNotExist, DjangoValidationError, ValueError):
        raise SettlementNotFoundError()

    values = {'status': SettlementStatus.SETTLED, 'settled_at': timezone.now()}
    if notes:
        values['notes'] = notes

    updated = model.objects.filter(
        pk=settlement.pk, status=SettlementStatus.PENDING
    ).update(**values)
    if not updated:
        raise SettlementAlreadySettledError()

    settlement.refresh_from_db()
    settle_period_if_complete(settlement.period_id)
    return settlement


@transaction.atomic
def mark_shop_settlement_settled(*, settlement_id, notes: str = '') -> ShopSettlement:
    """
    Confirm payout of a shop settlement.

    Raises:
        SettlementNotFoundError: Unknown settlement
        SettlementAlreadySettledError: Already confirmed
    """
    settlement = _mark_settled(ShopSettlement, settlement_id, notes)
    logger.info("Shop settlement %s settled: %s", settlement.pk, settlement.net_amount)
    return settlement


@transaction.atomic
def mark_rider_settlement_settled(*, settlement_id, notes: str = '') -> RiderSettlement:
    """Confirm payout of a rider settlement."""
    settlement = _mark_settled(RiderSettlement, settlement_id, notes)
    logger.info("Rider settlement %s settled: %s", settlement.pk, settlement.total_earnings)
    return settlement


def settle_period_if_complete(period_id) -> bool:
    """
    Move a closed period to ``settled`` once nothing is pending.

    A period whose close reported failures stays ``closed`` until
    ``regenerate_settlements`` has created the missing rows.

    Returns:
        True if the period was moved to ``settled``
    """
    summary = WeeklyPeriod.objects.values_list('admin_summary', flat=True).get(pk=period_id)
    if (summary or {}).get('failures'):
        return False

    pending = (
        ShopSettlement.objects.filter(period_id=period_id, status=SettlementStatus.PENDING).exists()
        or RiderSettlement.objects.filter(period_id=period_id, status=SettlementStatus.PENDING).exists()
    )
    if pending:
        return False

    updated = WeeklyPeriod.objects.filter(pk=period_id, status=PeriodStatus.CLOSED).update(
        status=PeriodStatus.SETTLED,
        settled_at=timezone.now(),
    )
    if updated:
        logger.info("Period %s settled", period_id)
    return bool(updated)
