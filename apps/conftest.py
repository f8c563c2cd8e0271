"""Fixtures shared by every app's test suite."""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole, Customer, Shop, Rider
from apps.orders.models import Order, OrderStatus, Product
from apps.orders.services.commission import build_order_financials
from apps.points.services.points_engine import record_points_usage
from apps.settlements.services.period_management import get_active_period


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for():
    """Return a factory building a JWT-authenticated API client for a user."""
    def _client_for(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _client_for


@pytest.fixture
def customer_user(db):
    return User.objects.create_user(
        email='mona@example.com',
        password='TestPass123!',
        display_name='Mona',
        role=UserRole.CUSTOMER,
    )


@pytest.fixture
def customer(customer_user):
    """Customer with an empty points balance."""
    return Customer.objects.create(
        user=customer_user,
        full_name='Mona Adel',
        address_text='12 Tahrir Street, Downtown',
    )


@pytest.fixture
def other_customer(db):
    user = User.objects.create_user(
        email='karim@example.com',
        password='TestPass123!',
        role=UserRole.CUSTOMER,
    )
    return Customer.objects.create(user=user, full_name='Karim Hassan')


@pytest.fixture
def shop_user(db):
    return User.objects.create_user(
        email='bakery@example.com',
        password='TestPass123!',
        role=UserRole.SHOP,
    )


@pytest.fixture
def shop(shop_user):
    """Open shop with the default 10% commission and a 50 EGP minimum."""
    return Shop.objects.create(
        user=shop_user,
        name='Abu Ali Bakery',
        commission_rate=Decimal('0.10'),
        min_order_amount=Decimal('50.00'),
    )


@pytest.fixture
def other_shop(db):
    user = User.objects.create_user(
        email='grocery@example.com',
        password='TestPass123!',
        role=UserRole.SHOP,
    )
    return Shop.objects.create(user=user, name='Nile Grocery', commission_rate=Decimal('0.10'))


@pytest.fixture
def rider_user(db):
    return User.objects.create_user(
        email='rider@example.com',
        password='TestPass123!',
        role=UserRole.RIDER,
    )


@pytest.fixture
def rider(rider_user):
    return Rider.objects.create(user=rider_user, full_name='Sayed Rider')


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(
        email='admin@example.com',
        password='AdminPass123!',
    )


@pytest.fixture
def period(db):
    """The active weekly period."""
    return get_active_period()


@pytest.fixture
def product(shop):
    """100 EGP product, so quantities map directly to subtotals."""
    return Product.objects.create(shop=shop, name='Family Box', price=Decimal('100.00'))


@pytest.fixture
def set_points():
    """Set a customer's balance directly (test setup only)."""
    def _set_points(customer, points):
        Customer.objects.filter(pk=customer.pk).update(total_points=points)
        customer.refresh_from_db()
        return customer
    return _set_points


@pytest.fixture
def make_order(customer, shop, period):
    """
    Create an order with a computed snapshot, bypassing placement checks.

    Used to build period data for settlement tests.
    """
    def _make_order(
        *,
        subtotal,
        points_used=0,
        is_free_delivery=False,
        status=OrderStatus.COMPLETED,
        rider=None,
        order_shop=None,
        order_customer=None,
        delivery_fee=Decimal('10.00'),
    ):
        order_shop = order_shop or shop
        financials = build_order_financials(
            subtotal=Decimal(subtotal),
            delivery_fee=delivery_fee,
            commission_rate=order_shop.commission_rate,
            is_free_delivery=is_free_delivery,
            points_to_use=points_used,
            available_points=points_used,
        )
        order = Order.objects.create(
            customer=order_customer or customer,
            shop=order_shop,
            rider=rider,
            period=period,
            status=status,
            delivery_address='12 Tahrir Street, Downtown',
            **financials.as_order_fields(),
        )
        if order.points_used:
            record_points_usage(order.pk, order_shop.pk, order.points_used, order.points_discount).save()
        return order
    return _make_order
