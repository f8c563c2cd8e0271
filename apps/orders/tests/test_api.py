import pytest
from django.urls import reverse
from rest_framework import status

from apps.orders.models import Order, OrderStatus


@pytest.fixture
def order_payload(shop, product):
    return {
        'shop_id': str(shop.pk),
        'items': [{'product_id': str(product.pk), 'quantity': 3}],
        'delivery_address': '12 Tahrir Street, Downtown Cairo',
        'points_to_use': 10,
    }


@pytest.mark.django_db
class TestCreateOrder:
    """Tests for POST /api/orders/"""

    def test_create(self, client_for, customer_user, customer, set_points, order_payload, period):
        set_points(customer, 50)

        response = client_for(customer_user).post(reverse('orders:order-list'), order_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'pending'
        assert response.data['subtotal'] == '300.00'
        assert response.data['points_used'] == 10
        assert response.data['shop_commission'] == '30.00'
        assert response.data['admin_commission'] == '20.00'
        assert response.data['total_amount'] == '300.00'
        assert response.data['shop_earnings'] == '270.00'
        assert response.data['rider_earnings'] == '10.00'

    def test_insufficient_points(self, client_for, customer_user, customer, order_payload, period):
        response = client_for(customer_user).post(reverse('orders:order-list'), order_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INSUFFICIENT_POINTS'

    def test_shop_closed(self, client_for, customer_user, customer, shop, order_payload, period):
        shop.is_open = False
        shop.save()
        order_payload['points_to_use'] = 0

        response = client_for(customer_user).post(reverse('orders:order-list'), order_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'SHOP_CLOSED'

    def test_short_address(self, client_for, customer_user, customer, order_payload, period):
        order_payload.update(points_to_use=0, delivery_address='Cairo')

        response = client_for(customer_user).post(reverse('orders:order-list'), order_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_shop_cannot_place_orders(self, client_for, shop_user, order_payload):
        response = client_for(shop_user).post(reverse('orders:order-list'), order_payload, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestListOrders:
    """Tests for GET /api/orders/"""

    def test_customer_sees_own_orders(self, client_for, customer_user, make_order, other_customer):
        make_order(subtotal='300')
        make_order(subtotal='200', order_customer=other_customer)

        response = client_for(customer_user).get(reverse('orders:order-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_shop_sees_own_orders(self, client_for, shop_user, make_order, other_shop):
        make_order(subtotal='300')
        make_order(subtotal='300', order_shop=other_shop)

        response = client_for(shop_user).get(reverse('orders:order-list'))

        assert response.data['count'] == 1

    def test_rider_sees_orders_awaiting_pickup(self, client_for, rider_user, rider, make_order):
        make_order(subtotal='300', status=OrderStatus.PREPARING)
        make_order(subtotal='300', status=OrderStatus.PENDING)

        response = client_for(rider_user).get(reverse('orders:order-list'))

        assert response.data['count'] == 1

    def test_status_filter(self, client_for, admin_user, make_order):
        make_order(subtotal='300', status=OrderStatus.COMPLETED)
        make_order(subtotal='300', status=OrderStatus.CANCELLED)

        response = client_for(admin_user).get(reverse('orders:order-list'), {'status': 'cancelled'})

        assert response.data['count'] == 1

    def test_retrieve_other_customers_order_not_found(self, client_for, customer_user, customer, make_order, other_customer):
        order = make_order(subtotal='300', order_customer=other_customer)

        response = client_for(customer_user).get(reverse('orders:order-detail', args=[order.pk]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestTransitionOrder:
    """Tests for POST /api/orders/{id}/transition/"""

    def test_shop_accepts(self, client_for, shop_user, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)

        response = client_for(shop_user).post(
            reverse('orders:order-transition', args=[order.pk]),
            {'target_status': 'accepted'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'accepted'

    def test_invalid_transition(self, client_for, shop_user, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)

        response = client_for(shop_user).post(
            reverse('orders:order-transition', args=[order.pk]),
            {'target_status': 'completed'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INVALID_STATUS_TRANSITION'
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_unknown_status_value(self, client_for, shop_user, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)

        response = client_for(shop_user).post(
            reverse('orders:order-transition', args=[order.pk]),
            {'target_status': 'teleported'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rider_pickup_assigns_rider(self, client_for, rider_user, rider, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PREPARING)

        response = client_for(rider_user).post(
            reverse('orders:order-transition', args=[order.pk]),
            {'target_status': 'picked_up'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert Order.objects.get(pk=order.pk).rider == rider


@pytest.mark.django_db
class TestOrderHistory:
    """Tests for GET /api/orders/{id}/history/"""

    def test_history(self, client_for, shop_user, make_order):
        order = make_order(subtotal='300', status=OrderStatus.PENDING)
        client = client_for(shop_user)
        client.post(reverse('orders:order-transition', args=[order.pk]), {'target_status': 'accepted'}, format='json')

        response = client.get(reverse('orders:order-history', args=[order.pk]))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['from_status'] == 'pending'
        assert response.data[0]['to_status'] == 'accepted'
        assert response.data[0]['actor_role'] == 'shop'
