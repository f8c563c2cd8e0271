# Generated manually for the settlements app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WeeklyPeriod',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('year', models.PositiveIntegerField()),
                ('week_number', models.PositiveSmallIntegerField()),
                ('start_date', models.DateField(unique=True)),
                ('end_date', models.DateField()),
                ('status', models.CharField(choices=[('active', 'Active'), ('closed', 'Closed'), ('settled', 'Settled')], db_index=True, default='active', max_length=20)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('admin_summary', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('closed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
            ],
            options={
                'db_table': 'weekly_periods',
                'ordering': ['-start_date'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(status='active'), fields=('status',), name='single_active_period'),
                    models.CheckConstraint(condition=models.Q(end_date__gte=models.F('start_date')), name='period_end_after_start'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShopSettlement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total_orders', models.PositiveIntegerField(default=0)),
                ('completed_orders', models.PositiveIntegerField(default=0)),
                ('cancelled_orders', models.PositiveIntegerField(default=0)),
                ('gross_sales', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('points_discounts_credited', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('free_delivery_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('ads_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('net_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('settled', 'Settled')], default='pending', max_length=20)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shop_settlements', to='settlements.weeklyperiod')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='settlements', to='accounts.shop')),
            ],
            options={
                'db_table': 'shop_settlements',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['period', 'status'], name='shop_settle_period_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('shop', 'period'), name='unique_shop_settlement_per_period'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RiderSettlement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total_deliveries', models.PositiveIntegerField(default=0)),
                ('total_earnings', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total_cash_handled', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('settled', 'Settled')], default='pending', max_length=20)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='rider_settlements', to='settlements.weeklyperiod')),
                ('rider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='settlements', to='accounts.rider')),
            ],
            options={
                'db_table': 'rider_settlements',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['period', 'status'], name='rider_settle_period_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('rider', 'period'), name='unique_rider_settlement_per_period'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AdSpend',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.00'))])),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ad_spends', to='settlements.weeklyperiod')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ad_spends', to='accounts.shop')),
            ],
            options={
                'db_table': 'ad_spends',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['shop', 'period'], name='ad_spends_shop_period_idx'),
                ],
            },
        ),
    ]
