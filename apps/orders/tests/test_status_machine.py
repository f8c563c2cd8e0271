import pytest

from apps.accounts.models import UserRole
from apps.orders.models import OrderStatus, OrderStatusHistory
from apps.orders.services.exceptions import InvalidStatusTransitionError
from apps.orders.services.status_machine import (
    TRANSITIONS,
    allowed_targets,
    is_terminal,
    validate_transition,
    apply_transition,
)

ALL_ROLES = [UserRole.CUSTOMER, UserRole.SHOP, UserRole.RIDER, UserRole.ADMIN]


class TestTransitionTable:

    @pytest.mark.parametrize('source, target, role', [
        (OrderStatus.PENDING, OrderStatus.ACCEPTED, UserRole.SHOP),
        (OrderStatus.ACCEPTED, OrderStatus.PREPARING, UserRole.SHOP),
        (OrderStatus.PREPARING, OrderStatus.PICKED_UP, UserRole.RIDER),
        (OrderStatus.PICKED_UP, OrderStatus.SHOP_PAID, UserRole.RIDER),
        (OrderStatus.SHOP_PAID, OrderStatus.COMPLETED, UserRole.SHOP),
        (OrderStatus.PENDING, OrderStatus.CANCELLED, UserRole.CUSTOMER),
        (OrderStatus.ACCEPTED, OrderStatus.CANCELLED, UserRole.ADMIN),
    ])
    def test_allowed_edges(self, source, target, role):
        assert validate_transition(source, target, role) is True

    def test_every_edge_outside_table_rejected(self):
        for source in OrderStatus.values:
            for target in OrderStatus.values:
                if source == target or (source, target) in TRANSITIONS:
                    continue
                for role in ALL_ROLES:
                    with pytest.raises(InvalidStatusTransitionError):
                        validate_transition(source, target, role)

    @pytest.mark.parametrize('source', [
        OrderStatus.PREPARING, OrderStatus.PICKED_UP, OrderStatus.SHOP_PAID, OrderStatus.COMPLETED,
    ])
    def test_cancellation_only_from_pending_or_accepted(self, source):
        with pytest.raises(InvalidStatusTransitionError):
            validate_transition(source, OrderStatus.CANCELLED, UserRole.ADMIN)

    def test_wrong_role_rejected(self):
        with pytest.raises(InvalidStatusTransitionError):
            validate_transition(OrderStatus.PENDING, OrderStatus.ACCEPTED, UserRole.CUSTOMER)

    def test_rider_cannot_cancel(self):
        with pytest.raises(InvalidStatusTransitionError):
            validate_transition(OrderStatus.PENDING, OrderStatus.CANCELLED, UserRole.RIDER)

    def test_same_status_is_noop(self):
        assert validate_transition(OrderStatus.COMPLETED, OrderStatus.COMPLETED, UserRole.CUSTOMER) is False

    def test_allowed_targets(self):
        assert set(allowed_targets(OrderStatus.PENDING)) == {OrderStatus.ACCEPTED, OrderStatus.CANCELLED}
        assert allowed_targets(OrderStatus.PENDING, UserRole.CUSTOMER) == [OrderStatus.CANCELLED]
        assert allowed_targets(OrderStatus.COMPLETED) == []

    def test_terminal_statuses(self):
        assert is_terminal(OrderStatus.COMPLETED)
        assert is_terminal(OrderStatus.CANCELLED)
        assert not is_terminal(OrderStatus.SHOP_PAID)


@pytest.mark.django_db
class TestApplyTransition:

    def test_writes_status_and_history(self, make_order, shop_user):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)

        changed = apply_transition(
            order=order, target_status=OrderStatus.ACCEPTED,
            actor_role=UserRole.SHOP, changed_by=shop_user,
        )

        order.refresh_from_db()
        assert changed is True
        assert order.status == OrderStatus.ACCEPTED
        entry = OrderStatusHistory.objects.get(order=order)
        assert entry.from_status == OrderStatus.PENDING
        assert entry.to_status == OrderStatus.ACCEPTED
        assert entry.changed_by == shop_user

    def test_rejected_transition_leaves_order_unchanged(self, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PREPARING)

        with pytest.raises(InvalidStatusTransitionError):
            apply_transition(order=order, target_status=OrderStatus.CANCELLED, actor_role=UserRole.SHOP)

        order.refresh_from_db()
        assert order.status == OrderStatus.PREPARING
        assert not OrderStatusHistory.objects.filter(order=order).exists()

    def test_stale_source_status_loses_compare_and_set(self, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)
        stale = type(order).objects.get(pk=order.pk)

        apply_transition(order=order, target_status=OrderStatus.ACCEPTED, actor_role=UserRole.SHOP)

        with pytest.raises(InvalidStatusTransitionError):
            apply_transition(order=stale, target_status=OrderStatus.CANCELLED, actor_role=UserRole.CUSTOMER)

        order.refresh_from_db()
        assert order.status == OrderStatus.ACCEPTED

    def test_completion_stamps_completed_at(self, make_order):
        order = make_order(subtotal='300', status=OrderStatus.SHOP_PAID)

        apply_transition(order=order, target_status=OrderStatus.COMPLETED, actor_role=UserRole.SHOP)

        order.refresh_from_db()
        assert order.completed_at is not None
