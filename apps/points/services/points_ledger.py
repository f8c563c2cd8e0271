"""
Points ledger service.

Every change to ``Customer.total_points`` goes through :func:`post_points`,
which performs a conditional ``UPDATE`` (decrement only while the balance
covers it) and appends the matching :class:`PointsTransaction` inside the same
database transaction. There is no code path that changes the balance without
a ledger row, or writes a ledger row without changing the balance.
"""

import logging

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import Customer, Referral, ReferralStatus
from apps.orders.models import Order
from apps.points.models import PointsTransaction, PointsTransactionType

from .exceptions import (
    InsufficientPointsError,
    DuplicatePointsPostingError,
    InvalidPointsAmountError,
)
from .points_engine import calculate_earned_points

logger = logging.getLogger(__name__)


def _change_balance(customer_id, delta: int) -> int:
    """
    Compare-and-set the balance by ``delta`` and return the new balance.

    Raises:
        InsufficientPointsError: The balance does not cover a deduction
    """
    queryset = Customer.objects.filter(pk=customer_id)
    if delta < 0:
        queryset = queryset.filter(total_points__gte=-delta)

    updated = queryset.update(
        total_points=F('total_points') + delta,
        updated_at=timezone.now(),
    )
    if not updated:
        available = Customer.objects.filter(pk=customer_id).values_list('total_points', flat=True).first()
        logger.warning(
            "Points deduction rejected for customer %s: requested %s, available %s",
            customer_id, -delta, available,
        )
        raise InsufficientPointsError(f'Insufficient points, available: {available or 0}')

    return Customer.objects.values_list('total_points', flat=True).get(pk=customer_id)


def post_points(
    *,
    customer: Customer,
    points: int,
    transaction_type: str,
    order: Order = None,
    description: str = '',
    created_by=None,
) -> PointsTransaction:
    """
    Apply a signed points change and append it to the ledger.

    Args:
        customer: Customer whose balance changes
        points: Signed amount (negative for deductions)
        transaction_type: A PointsTransactionType value
        order: Order the posting belongs to, if any
        description: Human-readable reason
        created_by: Admin user for manual adjustments

    Returns:
        Created PointsTransaction, with ``balance_after`` set

    Raises:
        InvalidPointsAmountError: ``points`` is zero
        InsufficientPointsError: Deduction exceeds the balance
        DuplicatePointsPostingError: Order already has this posting type
    """
    points = int(points)
    if points == 0:
        raise InvalidPointsAmountError('Points amount must not be zero')

    try:
        with transaction.atomic():
            balance_after = _change_balance(customer.pk, points)
            entry = PointsTransaction.objects.create(
                customer=customer,
                order=order,
                transaction_type=transaction_type,
                points=points,
                balance_after=balance_after,
                description=description,
                created_by=created_by,
            )
    except IntegrityError:
        raise DuplicatePointsPostingError()

    customer.total_points = balance_after
    logger.info(
        "Points posted: customer=%s type=%s points=%+d balance_after=%s order=%s",
        customer.pk, transaction_type, points, balance_after,
        order.pk if order else None,
    )
    return entry


def redeem_points(*, customer: Customer, order: Order, points: int) -> PointsTransaction:
    """Deduct points redeemed on ``order``."""
    if points <= 0:
        raise InvalidPointsAmountError('Points to redeem must be positive')

    return post_points(
        customer=customer,
        points=-points,
        transaction_type=PointsTransactionType.REDEEMED,
        order=order,
        description=f'Redeemed on order {order.order_number}',
    )


@transaction.atomic
def award_order_points(*, order: Order) -> int:
    """
    Credit the points earned by a completed order.

    Writes ``order.points_earned``, counts the completion on the customer and
    pays the referral bonus if this was the customer's first completed order.
    Calling it again for the same order posts nothing new.

    Args:
        order: Order that just transitioned to ``completed``

    Returns:
        Points earned by the order
    """
    customer = order.customer
    earned = calculate_earned_points(order.subtotal)

    # points_earned stays NULL until the first award
    claimed = Order.objects.filter(pk=order.pk, points_earned__isnull=True).update(
        points_earned=earned
    )
    if not claimed:
        order.refresh_from_db(fields=['points_earned'])
        logger.info("Points already awarded for order %s", order.order_number)
        return order.points_earned
    order.points_earned = earned

    if earned > 0:
        post_points(
            customer=customer,
            points=earned,
            transaction_type=PointsTransactionType.EARNED,
            order=order,
            description=f'Earned on order {order.order_number}',
        )

    Customer.objects.filter(pk=customer.pk).update(
        completed_orders_count=F('completed_orders_count') + 1
    )
    customer.refresh_from_db(fields=['completed_orders_count', 'total_points'])

    award_referral_bonus(customer=customer, order=order)
    return earned


@transaction.atomic
def award_referral_bonus(*, customer: Customer, order: Order):
    """
    Pay the referrer once the referred customer completes a first order.

    The ``Referral.points_awarded`` flag is flipped with a conditional update,
    so a retried completion can never pay twice.

    Returns:
        The referrer's PointsTransaction, or None when nothing was due
    """
    if customer.completed_orders_count != 1:
        return None

    claimed = Referral.objects.filter(
        referred_id=customer.pk,
        points_awarded=False,
    ).update(
        points_awarded=True,
        status=ReferralStatus.COMPLETED,
        first_order=order,
        completed_at=timezone.now(),
    )
    if not claimed:
        return None

    referral = Referral.objects.select_related('referrer').get(referred_id=customer.pk)
    return post_points(
        customer=referral.referrer,
        points=settings.REFERRAL_BONUS_POINTS,
        transaction_type=PointsTransactionType.REFERRAL,
        order=order,
        description=f'Referral bonus for {customer.full_name}',
    )


def refund_order_points(*, order: Order):
    """
    Return the points redeemed on a cancelled order.

    Returns:
        The refund PointsTransaction, or None when no points were used
    """
    if order.points_used <= 0:
        return None

    return post_points(
        customer=order.customer,
        points=order.points_used,
        transaction_type=PointsTransactionType.ADJUSTMENT,
        order=order,
        description=f'Refund for cancelled order {order.order_number}',
    )


def adjust_points(*, customer: Customer, points: int, reason: str, created_by=None) -> PointsTransaction:
    """
    Manual admin adjustment, signed by ``points``.

    Raises:
        InvalidPointsAmountError: Zero points or empty reason
        InsufficientPointsError: Deduction exceeds the balance
    """
    reason = (reason or '').strip()
    if not reason:
        raise InvalidPointsAmountError('A reason is required for manual adjustments')

    return post_points(
        customer=customer,
        points=points,
        transaction_type=PointsTransactionType.ADJUSTMENT,
        description=reason,
        created_by=created_by,
    )


def get_points_balance(*, customer: Customer) -> int:
    return Customer.objects.values_list('total_points', flat=True).get(pk=customer.pk)


def get_points_history(*, customer: Customer):
    """Ledger rows for ``customer``, newest first."""
    return (
        PointsTransaction.objects
        .filter(customer=customer)
        .select_related('order')
        .order_by('-created_at')
    )
