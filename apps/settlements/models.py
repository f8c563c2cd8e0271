from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class PeriodStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    CLOSED = 'closed', 'Closed'
    SETTLED = 'settled', 'Settled'


class SettlementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SETTLED = 'settled', 'Settled'


class WeeklyPeriod(models.Model):
    """
    Saturday to Friday settlement week.

    Exactly one period is ``active``; new orders are stamped with it. Closing
    the period produces the shop and rider settlements and opens the next one.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    year = models.PositiveIntegerField()
    week_number = models.PositiveSmallIntegerField()
    start_date = models.DateField(unique=True)
    end_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=PeriodStatus.choices,
        default=PeriodStatus.ACTIVE,
        db_index=True
    )

    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    settled_at = models.DateTimeField(null=True, blank=True)
    admin_summary = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'weekly_periods'
        constraints = [
            models.UniqueConstraint(
                fields=['status'],
                condition=models.Q(status='active'),
                name='single_active_period',
            ),
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F('start_date')),
                name='period_end_after_start',
            ),
        ]
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.year}-W{self.week_number:02d} ({self.start_date} - {self.end_date}, {self.status})"


class ShopSettlement(models.Model):
    """What the platform owes a shop (or is owed) for one closed period."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey('accounts.Shop', on_delete=models.PROTECT, related_name='settlements')
    period = models.ForeignKey(WeeklyPeriod, on_delete=models.PROTECT, related_name='shop_settlements')

    total_orders = models.PositiveIntegerField(default=0)
    completed_orders = models.PositiveIntegerField(default=0)
    cancelled_orders = models.PositiveIntegerField(default=0)

    gross_sales = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_commission = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    points_discounts_credited = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    free_delivery_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    ads_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    status = models.CharField(
        max_length=20,
        choices=SettlementStatus.choices,
        default=SettlementStatus.PENDING
    )
    settled_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'shop_settlements'
        constraints = [
            models.UniqueConstraint(fields=['shop', 'period'], name='unique_shop_settlement_per_period'),
        ]
        indexes = [
            models.Index(fields=['period', 'status'], name='shop_settle_period_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.shop} / {self.period_id}: {self.net_amount} ({self.status})"


class RiderSettlement(models.Model):
    """Delivery fees earned and cash handled by a rider in one closed period."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    rider = models.ForeignKey('accounts.Rider', on_delete=models.PROTECT, related_name='settlements')
    period = models.ForeignKey(WeeklyPeriod, on_delete=models.PROTECT, related_name='rider_settlements')

    total_deliveries = models.PositiveIntegerField(default=0)
    total_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_cash_handled = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    status = models.CharField(
        max_length=20,
        choices=SettlementStatus.choices,
        default=SettlementStatus.PENDING
    )
    settled_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'rider_settlements'
        constraints = [
            models.UniqueConstraint(fields=['rider', 'period'], name='unique_rider_settlement_per_period'),
        ]
        indexes = [
            models.Index(fields=['period', 'status'], name='rider_settle_period_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rider} / {self.period_id}: {self.total_earnings} ({self.status})"


class AdSpend(models.Model):
    """Advertising bought by a shop, charged against its settlement."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey('accounts.Shop', on_delete=models.CASCADE, related_name='ad_spends')
    period = models.ForeignKey(WeeklyPeriod, on_delete=models.PROTECT, related_name='ad_spends')
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ad_spends'
        indexes = [
            models.Index(fields=['shop', 'period'], name='ad_spends_shop_period_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.shop}: {self.amount}"
