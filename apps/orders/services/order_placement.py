"""
Order placement service.

Validates the request, prices the items from the shop's catalogue, computes
the financial snapshot and persists the order together with its points
redemption, usage record and personal commission in one transaction.
"""

import logging
from collections import OrderedDict

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.accounts.models import Customer, Shop, UserRole
from apps.common.exceptions import ValidationError
from apps.common.money import ZERO, round_money
from apps.orders.models import Order, OrderItem, OrderStatus, OrderStatusHistory, Product
from apps.points.services import InsufficientPointsError, record_points_usage, redeem_points
from apps.settlements.services.period_management import lock_active_period

from .commission import build_order_financials
from .exceptions import ShopClosedError, MinOrderNotMetError, ShopNotFoundError
from .personal_commission import record_personal_commission

logger = logging.getLogger(__name__)


def validate_order_request(*, items, delivery_address):
    """
    Check item count, quantities and the delivery address.

    Returns:
        tuple: (cleaned address, OrderedDict of product_id -> quantity)

    Raises:
        ValidationError: Any rule is violated
    """
    if not items:
        raise ValidationError('Order must contain at least one item')
    if len(items) > settings.MAX_ITEMS_PER_ORDER:
        raise ValidationError(f'Order cannot contain more than {settings.MAX_ITEMS_PER_ORDER} items')

    quantities = OrderedDict()
    for item in items:
        product_id = item.get('product_id')
        quantity = item.get('quantity')
        if product_id is None:
            raise ValidationError('Each item needs a product_id')
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ValidationError('Item quantity must be a positive whole number')
        key = str(product_id)
        quantities[key] = quantities.get(key, 0) + quantity

    address = (delivery_address or '').strip()
    if len(address) < settings.MIN_DELIVERY_ADDRESS_LENGTH:
        raise ValidationError(
            f'Delivery address must be at least {settings.MIN_DELIVERY_ADDRESS_LENGTH} characters'
        )

    return address, quantities


def _priced_lines(shop, quantities):
    products = {
        str(p.pk): p for p in Product.objects.filter(shop=shop, pk__in=list(quantities))
    }
    lines = []
    for product_id, quantity in quantities.items():
        product = products.get(product_id)
        if product is None:
            raise ValidationError(f'Product {product_id} is not sold by this shop')
        if not product.is_available:
            raise ValidationError(f'{product.name} is not available')
        if product.price < 0:
            raise ValidationError(f'{product.name} has an invalid price')
        lines.append((product, quantity, product.price * quantity))
    return lines


@transaction.atomic
def place_order(
    *,
    customer: Customer,
    shop_id,
    items,
    delivery_address: str,
    points_to_use: int = 0,
    is_free_delivery: bool = False,
    notes: str = '',
) -> Order:
    """
    Create an order in ``pending`` with its frozen financial snapshot.

    Args:
        customer: Ordering customer
        shop_id: Shop to order from
        items: List of ``{'product_id', 'quantity'}`` dicts
        delivery_address: Free-text address
        points_to_use: Points the customer wants to redeem
        is_free_delivery: Platform waives the delivery fee
        notes: Customer notes for the shop

    Returns:
        The created Order

    Raises:
        ValidationError: Malformed items, address or points
        ShopNotFoundError: Unknown shop
        ShopClosedError: Shop inactive or closed
        MinOrderNotMetError: Subtotal below the shop minimum
        InsufficientPointsError: More points requested than available
    """
    address, quantities = validate_order_request(items=items, delivery_address=delivery_address)

    points_to_use = points_to_use or 0
    if not isinstance(points_to_use, int) or points_to_use < 0:
        raise ValidationError('points_to_use must be a non-negative whole number')

    try:
        shop = Shop.objects.get(pk=shop_id)
    except (Shop.DoesNotExist, DjangoValidationError, ValueError):
        raise ShopNotFoundError()
    if not shop.accepts_orders:
        raise ShopClosedError()

    lines = _priced_lines(shop, quantities)
    subtotal = sum((line_total for _, _, line_total in lines), ZERO)
    if subtotal < shop.min_order_amount:
        raise MinOrderNotMetError(
            f'Minimum order for {shop.name} is {shop.min_order_amount} EGP'
        )

    customer = Customer.objects.select_for_update().get(pk=customer.pk)
    if points_to_use > customer.total_points:
        raise InsufficientPointsError(f'Insufficient points, available: {customer.total_points}')

    financials = build_order_financials(
        subtotal=subtotal,
        delivery_fee=settings.DEFAULT_DELIVERY_FEE,
        commission_rate=shop.commission_rate,
        is_free_delivery=is_free_delivery,
        points_to_use=points_to_use,
        available_points=customer.total_points,
    )

    order = Order.objects.create(
        customer=customer,
        shop=shop,
        period=lock_active_period(),
        status=OrderStatus.PENDING,
        delivery_address=address,
        notes=notes,
        **financials.as_order_fields(),
    )

    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product=product,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
            line_total=round_money(line_total),
        )
        for product, quantity, line_total in lines
    ])

    OrderStatusHistory.objects.create(
        order=order,
        from_status=None,
        to_status=OrderStatus.PENDING,
        actor_role=UserRole.CUSTOMER,
        changed_by=customer.user,
    )

    if order.points_used > 0:
        redeem_points(customer=customer, order=order, points=order.points_used)
        record_points_usage(order.pk, shop.pk, order.points_used, order.points_discount).save()

    record_personal_commission(order=order)

    logger.info(
        "Order placed: %s customer=%s shop=%s subtotal=%s points_used=%s total=%s",
        order.order_number, customer.pk, shop.pk,
        order.subtotal, order.points_used, order.total_amount,
    )
    return order
