"""
Order status machine.

The legal edges and the roles allowed to take them live in one table,
:data:`TRANSITIONS`. :func:`apply_transition` is the single entry point that
changes ``Order.status``; it does a compare-and-set on the current status so
two concurrent requests cannot both move an order out of the same state.

Financial side effects (points award and refund) are not performed here;
see :mod:`apps.orders.services.order_transitions`.
"""

import logging

from django.utils import timezone

from apps.accounts.models import UserRole
from apps.orders.models import Order, OrderStatus, OrderStatusHistory

from .exceptions import InvalidStatusTransitionError

logger = logging.getLogger(__name__)


CANCELLERS = frozenset({UserRole.CUSTOMER, UserRole.SHOP, UserRole.ADMIN})

TRANSITIONS = {
    (OrderStatus.PENDING, OrderStatus.ACCEPTED): frozenset({UserRole.SHOP}),
    (OrderStatus.ACCEPTED, OrderStatus.PREPARING): frozenset({UserRole.SHOP}),
    (OrderStatus.PREPARING, OrderStatus.PICKED_UP): frozenset({UserRole.RIDER}),
    (OrderStatus.PICKED_UP, OrderStatus.SHOP_PAID): frozenset({UserRole.RIDER}),
    (OrderStatus.SHOP_PAID, OrderStatus.COMPLETED): frozenset({UserRole.SHOP}),
    (OrderStatus.PENDING, OrderStatus.CANCELLED): CANCELLERS,
    (OrderStatus.ACCEPTED, OrderStatus.CANCELLED): CANCELLERS,
}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

# Timestamp stamped on the order when it enters a status
STATUS_TIMESTAMPS = {
    OrderStatus.COMPLETED: 'completed_at',
    OrderStatus.CANCELLED: 'cancelled_at',
}


def allowed_targets(current_status, actor_role=None):
    """Statuses reachable from ``current_status``, optionally for one role."""
    return [
        target for (source, target), roles in TRANSITIONS.items()
        if source == current_status and (actor_role is None or actor_role in roles)
    ]


def is_terminal(status) -> bool:
    return status in TERMINAL_STATUSES


def validate_transition(current_status, target_status, actor_role) -> bool:
    """
    Check an edge against the transition table.

    Returns:
        False when ``target_status == current_status`` (nothing to do),
        True when the edge is allowed for ``actor_role``

    Raises:
        InvalidStatusTransitionError: Unknown edge or role not permitted
    """
    if target_status == current_status:
        return False

    roles = TRANSITIONS.get((current_status, target_status))
    if roles is None:
        raise InvalidStatusTransitionError(
            f'Cannot change order status from {current_status} to {target_status}'
        )
    if actor_role not in roles:
        raise InvalidStatusTransitionError(
            f'Role {actor_role} cannot change order status from {current_status} to {target_status}'
        )
    return True


def apply_transition(
    *,
    order: Order,
    target_status: str,
    actor_role: str,
    changed_by=None,
    notes: str = '',
    extra_fields: dict = None,
) -> bool:
    """
    Move ``order`` to ``target_status`` and record it in the history.

    Args:
        order: Order to change (its in-memory status is the expected source)
        target_status: Desired status
        actor_role: Role of the acting user
        changed_by: Acting user, stored on the history row
        notes: Free-text note for the history row
        extra_fields: Additional columns written with the status (e.g. rider)

    Returns:
        True if the status changed, False for a no-op

    Raises:
        InvalidStatusTransitionError: Illegal edge, wrong role, or the order
            was changed concurrently
    """
    current_status = order.status
    try:
        changed = validate_transition(current_status, target_status, actor_role)
    except InvalidStatusTransitionError:
        logger.warning(
            "Rejected transition for order %s: %s -> %s by %s",
            order.order_number, current_status, target_status, actor_role,
        )
        raise

    if not changed:
        return False

    now = timezone.now()
    values = dict(extra_fields or {})
    values['status'] = target_status
    values['updated_at'] = now
    if target_status in STATUS_TIMESTAMPS:
        values[STATUS_TIMESTAMPS[target_status]] = now

    updated = Order.objects.filter(pk=order.pk, status=current_status).update(**values)
    if not updated:
        order.refresh_from_db(fields=['status'])
        logger.warning(
            "Concurrent transition for order %s: expected %s, found %s",
            order.order_number, current_status, order.status,
        )
        raise InvalidStatusTransitionError(
            f'Order status changed concurrently (now {order.status})'
        )

    for field, value in values.items():
        setattr(order, field, value)

    OrderStatusHistory.objects.create(
        order=order,
        from_status=current_status,
        to_status=target_status,
        actor_role=actor_role,
        changed_by=changed_by,
        notes=notes,
    )

    logger.info(
        "Order %s: %s -> %s by %s",
        order.order_number, current_status, target_status, actor_role,
    )
    return True
