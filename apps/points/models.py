from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class PointsTransactionType(models.TextChoices):
    EARNED = 'earned', 'Earned'
    REDEEMED = 'redeemed', 'Redeemed'
    REFERRAL = 'referral', 'Referral'
    ADJUSTMENT = 'adjustment', 'Adjustment'


class PointsTransaction(models.Model):
    """Append-only ledger row for every change to a customer's points balance."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        'accounts.Customer',
        on_delete=models.CASCADE,
        related_name='points_transactions'
    )
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='points_transactions'
    )
    transaction_type = models.CharField(max_length=20, choices=PointsTransactionType.choices)
    points = models.IntegerField()
    balance_after = models.PositiveIntegerField()
    description = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'points_transactions'
        constraints = [
            # One posting of each kind per order (earn, redeem, refund, referral)
            models.UniqueConstraint(
                fields=['order', 'transaction_type'],
                condition=models.Q(order__isnull=False),
                name='unique_points_posting_per_order',
            ),
        ]
        indexes = [
            models.Index(fields=['customer', 'created_at'], name='points_tx_customer_idx'),
            models.Index(fields=['transaction_type', 'created_at'], name='points_tx_type_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        sign = '+' if self.points >= 0 else ''
        return f"{self.customer} {sign}{self.points} ({self.transaction_type})"


class PointsUsageRecord(models.Model):
    """Points redeemed on an order, owed back to the shop at settlement."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(
        'orders.Order',
        on_delete=models.CASCADE,
        related_name='points_usage'
    )
    shop = models.ForeignKey(
        'accounts.Shop',
        on_delete=models.CASCADE,
        related_name='points_usage_records'
    )
    points_used = models.PositiveIntegerField()
    monetary_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    used_at = models.DateTimeField()

    class Meta:
        db_table = 'points_usage_records'
        indexes = [
            models.Index(fields=['shop', 'used_at'], name='points_usage_shop_idx'),
        ]
        ordering = ['-used_at']

    def __str__(self):
        return f"{self.points_used} pts on {self.order_id} -> {self.shop}"
