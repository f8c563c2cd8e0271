"""
Weekly period lifecycle.

Periods run Saturday to Friday in the project time zone and are contiguous:
each new period starts the day after the previous one ends.
"""

import logging
from datetime import date, timedelta

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.settlements.models import WeeklyPeriod, PeriodStatus

from .exceptions import PeriodNotFoundError

logger = logging.getLogger(__name__)

SATURDAY = 5
PERIOD_LENGTH_DAYS = 7


def week_bounds(day: date):
    """
    Saturday-Friday week containing ``day``.

    Returns:
        tuple: (start_date, end_date)
    """
    start = day - timedelta(days=(day.weekday() - SATURDAY) % PERIOD_LENGTH_DAYS)
    return start, start + timedelta(days=PERIOD_LENGTH_DAYS - 1)


def _create_period(start_date: date) -> WeeklyPeriod:
    iso_year, iso_week, _ = start_date.isocalendar()
    period = WeeklyPeriod.objects.create(
        year=iso_year,
        week_number=iso_week,
        start_date=start_date,
        end_date=start_date + timedelta(days=PERIOD_LENGTH_DAYS - 1),
        status=PeriodStatus.ACTIVE,
    )
    logger.info("Opened period %s (%s - %s)", period.pk, period.start_date, period.end_date)
    return period


def get_active_period() -> WeeklyPeriod:
    """
    Return the active period, opening one for the current week if none exists.
    """
    period = WeeklyPeriod.objects.filter(status=PeriodStatus.ACTIVE).first()
    if period:
        return period

    start_date, _ = week_bounds(timezone.localdate())
    try:
        with transaction.atomic():
            return _create_period(start_date)
    except IntegrityError:
        # Another request opened it first
        return WeeklyPeriod.objects.get(status=PeriodStatus.ACTIVE)


def lock_active_period() -> WeeklyPeriod:
    """
    Return the active period, row-locked until the surrounding transaction ends.

    Closing a period takes the same lock, so an order stamped with the
    returned period is committed before the close reads that period's orders,
    and an order placed after the close lands in the next period.

    Raises:
        PeriodNotFoundError: No active period could be locked
    """
    for _ in range(2):
        period = get_active_period()
        locked = (
            WeeklyPeriod.objects
            .select_for_update()
            .filter(pk=period.pk, status=PeriodStatus.ACTIVE)
            .first()
        )
        if locked:
            return locked
        # Closed between the read and the lock; the next period is active now
        logger.info("Period %s closed while locking, retrying", period.pk)
    raise PeriodNotFoundError('No active period')


def create_next_period(previous: WeeklyPeriod) -> WeeklyPeriod:
    """Open the period that starts the day after ``previous`` ends."""
    return _create_period(previous.end_date + timedelta(days=1))


def get_period(period_id) -> WeeklyPeriod:
    try:
        return WeeklyPeriod.objects.get(pk=period_id)
    except (WeeklyPeriod.DoesNotExist, DjangoValidationError, ValueError):
        raise PeriodNotFoundError()


def list_periods():
    return WeeklyPeriod.objects.all().order_by('-start_date')
