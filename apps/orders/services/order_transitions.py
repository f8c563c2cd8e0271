"""
Order transition service.

Wraps the status machine with ownership checks and the financial hooks:
points are awarded when an order completes and refunded when it is cancelled,
in the same transaction as the status change.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.accounts.models import UserRole
from apps.accounts.services.profiles import get_rider_for_user
from apps.common.exceptions import PermissionDeniedError
from apps.orders.models import Order, OrderStatus
from apps.points.services import award_order_points, refund_order_points

from .exceptions import OrderNotFoundError
from .status_machine import apply_transition

logger = logging.getLogger(__name__)


def _check_ownership(order, user, actor_role, target_status):
    if actor_role == UserRole.ADMIN:
        return
    if actor_role == UserRole.CUSTOMER:
        owner_id = order.customer.user_id
    elif actor_role == UserRole.SHOP:
        owner_id = order.shop.user_id
    elif actor_role == UserRole.RIDER:
        if target_status == OrderStatus.PICKED_UP and order.rider_id is None:
            # Any rider may pick up an unassigned order
            return
        owner_id = order.rider.user_id if order.rider_id else None
    else:
        owner_id = None

    if owner_id != user.pk:
        raise PermissionDeniedError('You cannot change the status of this order')


@transaction.atomic
def transition_order(*, order_id, target_status: str, user, notes: str = '') -> Order:
    """
    Move an order to ``target_status`` on behalf of ``user``.

    A transition to the current status is a no-op: nothing is written and no
    points are posted.

    Args:
        order_id: Order to change
        target_status: Desired status
        user: Acting user; their role is the actor role
        notes: Note stored on the history row

    Returns:
        The updated Order

    Raises:
        OrderNotFoundError: Unknown order
        PermissionDeniedError: User is not a party to the order
        InvalidStatusTransitionError: Illegal edge or role
    """
    try:
        order = (
            Order.objects
            .select_related('customer', 'shop', 'rider')
            .get(pk=order_id)
        )
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()

    actor_role = user.role
    if target_status == order.status:
        return order

    _check_ownership(order, user, actor_role, target_status)

    extra_fields = {}
    if target_status == OrderStatus.PICKED_UP and actor_role == UserRole.RIDER and order.rider_id is None:
        extra_fields['rider'] = get_rider_for_user(user)

    apply_transition(
        order=order,
        target_status=target_status,
        actor_role=actor_role,
        changed_by=user,
        notes=notes,
        extra_fields=extra_fields,
    )

    if target_status == OrderStatus.COMPLETED:
        award_order_points(order=order)
    elif target_status == OrderStatus.CANCELLED:
        refund_order_points(order=order)

    return order
