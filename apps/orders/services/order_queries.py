"""Role-scoped order lookups for the API layer."""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q

from apps.accounts.models import UserRole
from apps.orders.models import Order, OrderStatus

from .exceptions import OrderNotFoundError


def get_orders_for_user(user):
    """
    Orders visible to ``user``.

    Customers and shops see their own orders. Riders see orders assigned to
    them plus unassigned orders waiting for pickup. Admins see everything.
    """
    queryset = Order.objects.select_related('customer', 'shop', 'rider', 'period')

    if user.role == UserRole.ADMIN:
        return queryset
    if user.role == UserRole.CUSTOMER:
        return queryset.filter(customer__user=user)
    if user.role == UserRole.SHOP:
        return queryset.filter(shop__user=user)
    if user.role == UserRole.RIDER:
        return queryset.filter(
            Q(rider__user=user) | Q(rider__isnull=True, status=OrderStatus.PREPARING)
        )
    return queryset.none()


def get_order_for_user(*, user, order_id) -> Order:
    try:
        return get_orders_for_user(user).prefetch_related('items').get(pk=order_id)
    except (Order.DoesNotExist, DjangoValidationError, ValueError):
        raise OrderNotFoundError()


def get_order_history(*, user, order_id):
    order = get_order_for_user(user=user, order_id=order_id)
    return order.status_history.select_related('changed_by').order_by('created_at')
