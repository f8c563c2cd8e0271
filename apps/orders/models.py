from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import secrets
import uuid


def generate_order_number():
    """Human-facing order reference, e.g. ``BLD-261019-7KQ2XM``."""
    alphabet = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
    suffix = ''.join(secrets.choice(alphabet) for _ in range(6))
    return f"BLD-{timezone.localdate():%y%m%d}-{suffix}"


class Product(models.Model):
    """Item sold by a shop."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey('accounts.Shop', on_delete=models.CASCADE, related_name='products')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['shop', 'is_available'], name='products_shop_avail_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.shop})"


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    PREPARING = 'preparing', 'Preparing'
    PICKED_UP = 'picked_up', 'Picked up'
    SHOP_PAID = 'shop_paid', 'Shop paid'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class Order(models.Model):
    """
    Customer order with its financial snapshot.

    Money fields are fixed when the order is placed. Only ``status``, the
    rider assignment, the status timestamps and ``points_earned`` (set once, on
    completion) change afterwards.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True, default=generate_order_number, editable=False)
    customer = models.ForeignKey('accounts.Customer', on_delete=models.PROTECT, related_name='orders')
    shop = models.ForeignKey('accounts.Shop', on_delete=models.PROTECT, related_name='orders')
    rider = models.ForeignKey(
        'accounts.Rider',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='orders'
    )
    period = models.ForeignKey('settlements.WeeklyPeriod', on_delete=models.PROTECT, related_name='orders')
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True
    )

    # Financial snapshot
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2)
    is_free_delivery = models.BooleanField(default=False)
    points_used = models.PositiveIntegerField(default=0)
    points_discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    shop_commission = models.DecimalField(max_digits=10, decimal_places=2)
    admin_commission = models.DecimalField(max_digits=10, decimal_places=2)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    points_earned = models.PositiveIntegerField(null=True, blank=True)

    delivery_address = models.TextField()
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'orders'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(admin_commission__gte=0),
                name='order_admin_commission_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name='order_total_non_negative',
            ),
            models.CheckConstraint(
                condition=models.Q(points_discount__lte=models.F('shop_commission')),
                name='order_discount_within_commission',
            ),
        ]
        indexes = [
            models.Index(fields=['period', 'status'], name='orders_period_status_idx'),
            models.Index(fields=['shop', 'created_at'], name='orders_shop_created_idx'),
            models.Index(fields=['customer', 'created_at'], name='orders_customer_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    @property
    def effective_delivery_fee(self):
        return Decimal('0.00') if self.is_free_delivery else self.delivery_fee

    @property
    def free_delivery_cost(self):
        return self.delivery_fee if self.is_free_delivery else Decimal('0.00')

    @property
    def shop_earnings(self):
        return self.subtotal - self.shop_commission

    @property
    def rider_earnings(self):
        return self.delivery_fee


class OrderItem(models.Model):
    """Order line, priced at the time the order was placed."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items'
    )
    product_name = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    line_total = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"


class OrderStatusHistory(models.Model):
    """Append-only audit trail of status changes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='status_history')
    from_status = models.CharField(max_length=20, choices=OrderStatus.choices, null=True, blank=True)
    to_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    actor_role = models.CharField(max_length=20)
    changed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_status_history'
        ordering = ['created_at']
        verbose_name_plural = 'order status history'

    def __str__(self):
        return f"{self.order_id}: {self.from_status or '-'} -> {self.to_status}"


class PersonalCommission(models.Model):
    """Internal-only commission figure, kept apart from the order snapshot."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name='personal_commission')
    from_store = models.DecimalField(max_digits=10, decimal_places=2)
    from_delivery = models.DecimalField(max_digits=10, decimal_places=2)
    total = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'personal_commissions'

    def __str__(self):
        return f"{self.order_id}: {self.total}"
