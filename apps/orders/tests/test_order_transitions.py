from decimal import Decimal

import pytest

from apps.accounts.models import Referral
from apps.common.exceptions import PermissionDeniedError
from apps.orders.models import OrderStatus, OrderStatusHistory
from apps.orders.services import (
    place_order,
    transition_order,
    InvalidStatusTransitionError,
    OrderNotFoundError,
)
from apps.points.models import PointsTransaction

ADDRESS = '12 Tahrir Street, Downtown Cairo'


@pytest.fixture
def placed_order(customer, shop, product, period, set_points):
    """300 EGP order redeeming 10 of the customer's 50 points."""
    set_points(customer, 50)
    return place_order(
        customer=customer,
        shop_id=shop.pk,
        items=[{'product_id': product.pk, 'quantity': 3}],
        delivery_address=ADDRESS,
        points_to_use=10,
    )


@pytest.fixture
def advance(shop_user, rider_user, rider):
    """Walk an order forward through the happy path up to ``target``."""
    steps = [
        (OrderStatus.ACCEPTED, shop_user),
        (OrderStatus.PREPARING, shop_user),
        (OrderStatus.PICKED_UP, rider_user),
        (OrderStatus.SHOP_PAID, rider_user),
        (OrderStatus.COMPLETED, shop_user),
    ]

    def _advance(order, target):
        for status, user in steps:
            order = transition_order(order_id=order.pk, target_status=status, user=user)
            if status == target:
                break
        return order
    return _advance


@pytest.mark.django_db
class TestHappyPath:

    def test_full_lifecycle_awards_points(self, placed_order, advance, customer, rider):
        order = advance(placed_order, OrderStatus.COMPLETED)

        order.refresh_from_db()
        customer.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        assert order.rider == rider
        assert order.points_earned == 3
        assert order.completed_at is not None
        # 50 - 10 redeemed + 3 earned
        assert customer.total_points == 43
        assert customer.completed_orders_count == 1

    def test_snapshot_unchanged_by_lifecycle(self, placed_order, advance):
        before = (
            placed_order.subtotal, placed_order.shop_commission,
            placed_order.admin_commission, placed_order.total_amount,
        )

        order = advance(placed_order, OrderStatus.COMPLETED)

        order.refresh_from_db()
        assert (order.subtotal, order.shop_commission, order.admin_commission, order.total_amount) == before

    def test_history_records_every_step(self, placed_order, advance):
        advance(placed_order, OrderStatus.COMPLETED)

        statuses = list(
            OrderStatusHistory.objects.filter(order=placed_order)
            .order_by('created_at')
            .values_list('to_status', flat=True)
        )
        assert len(statuses) == 6
        assert statuses[0] == OrderStatus.PENDING
        assert statuses[-1] == OrderStatus.COMPLETED

    def test_repeated_completion_is_noop(self, placed_order, advance, shop_user, customer):
        order = advance(placed_order, OrderStatus.COMPLETED)

        transition_order(order_id=order.pk, target_status=OrderStatus.COMPLETED, user=shop_user)

        customer.refresh_from_db()
        assert customer.total_points == 43
        assert OrderStatusHistory.objects.filter(order=order).count() == 6

    def test_referral_bonus_on_first_completion(self, placed_order, advance, customer, other_customer):
        Referral.objects.create(referrer=other_customer, referred=customer)

        advance(placed_order, OrderStatus.COMPLETED)

        other_customer.refresh_from_db()
        assert other_customer.total_points == 2


@pytest.mark.django_db
class TestCancellation:

    def test_customer_cancel_refunds_points(self, placed_order, customer_user, customer):
        order = transition_order(
            order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=customer_user,
        )

        customer.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED
        assert order.cancelled_at is not None
        assert customer.total_points == 50
        assert order.points_earned is None

    def test_shop_cancel_after_accept_refunds(self, placed_order, advance, shop_user, customer):
        order = advance(placed_order, OrderStatus.ACCEPTED)

        transition_order(order_id=order.pk, target_status=OrderStatus.CANCELLED, user=shop_user)

        customer.refresh_from_db()
        assert customer.total_points == 50

    def test_cannot_cancel_while_preparing(self, placed_order, advance, customer_user, customer):
        order = advance(placed_order, OrderStatus.PREPARING)

        with pytest.raises(InvalidStatusTransitionError):
            transition_order(order_id=order.pk, target_status=OrderStatus.CANCELLED, user=customer_user)

        customer.refresh_from_db()
        assert customer.total_points == 40

    def test_double_cancel_refunds_once(self, placed_order, customer_user, customer):
        transition_order(order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=customer_user)
        transition_order(order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=customer_user)

        customer.refresh_from_db()
        assert customer.total_points == 50
        assert PointsTransaction.objects.filter(order=placed_order).count() == 2

    def test_cancelled_order_cannot_complete(self, placed_order, customer_user, shop_user):
        transition_order(order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=customer_user)

        with pytest.raises(InvalidStatusTransitionError):
            transition_order(order_id=placed_order.pk, target_status=OrderStatus.COMPLETED, user=shop_user)


@pytest.mark.django_db
class TestAuthorization:

    def test_customer_cannot_accept(self, placed_order, customer_user):
        with pytest.raises(InvalidStatusTransitionError):
            transition_order(order_id=placed_order.pk, target_status=OrderStatus.ACCEPTED, user=customer_user)

    def test_other_shop_cannot_accept(self, placed_order, other_shop):
        with pytest.raises(PermissionDeniedError):
            transition_order(order_id=placed_order.pk, target_status=OrderStatus.ACCEPTED, user=other_shop.user)

    def test_other_customer_cannot_cancel(self, placed_order, other_customer):
        with pytest.raises(PermissionDeniedError):
            transition_order(order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=other_customer.user)

    def test_admin_can_cancel_any_order(self, placed_order, admin_user):
        order = transition_order(order_id=placed_order.pk, target_status=OrderStatus.CANCELLED, user=admin_user)

        assert order.status == OrderStatus.CANCELLED

    def test_shop_cannot_skip_steps(self, placed_order, shop_user):
        with pytest.raises(InvalidStatusTransitionError):
            transition_order(order_id=placed_order.pk, target_status=OrderStatus.COMPLETED, user=shop_user)

    def test_unknown_order(self, shop_user):
        with pytest.raises(OrderNotFoundError):
            transition_order(
                order_id='00000000-0000-0000-0000-000000000000',
                target_status=OrderStatus.ACCEPTED,
                user=shop_user,
            )
