# Generated manually for the orders app

import uuid
from decimal import Decimal
import apps.orders.models
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion

ORDER_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('accepted', 'Accepted'),
    ('preparing', 'Preparing'),
    ('picked_up', 'Picked up'),
    ('shop_paid', 'Shop paid'),
    ('completed', 'Completed'),
    ('cancelled', 'Cancelled'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('settlements', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.00'))])),
                ('is_available', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='accounts.shop')),
            ],
            options={
                'db_table': 'products',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['shop', 'is_available'], name='products_shop_avail_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.CharField(default=apps.orders.models.generate_order_number, editable=False, max_length=20, unique=True)),
                ('status', models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default='pending', max_length=20)),
                ('subtotal', models.DecimalField(decimal_places=2, max_digits=10)),
                ('delivery_fee', models.DecimalField(decimal_places=2, max_digits=10)),
                ('is_free_delivery', models.BooleanField(default=False)),
                ('points_used', models.PositiveIntegerField(default=0)),
                ('points_discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('shop_commission', models.DecimalField(decimal_places=2, max_digits=10)),
                ('admin_commission', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('points_earned', models.PositiveIntegerField(blank=True, null=True)),
                ('delivery_address', models.TextField()),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='accounts.customer')),
                ('period', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='settlements.weeklyperiod')),
                ('rider', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='accounts.rider')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='accounts.shop')),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['period', 'status'], name='orders_period_status_idx'),
                    models.Index(fields=['shop', 'created_at'], name='orders_shop_created_idx'),
                    models.Index(fields=['customer', 'created_at'], name='orders_customer_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(admin_commission__gte=0), name='order_admin_commission_non_negative'),
                    models.CheckConstraint(condition=models.Q(total_amount__gte=0), name='order_total_non_negative'),
                    models.CheckConstraint(condition=models.Q(points_discount__lte=models.F('shop_commission')), name='order_discount_within_commission'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(max_length=200)),
                ('unit_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('quantity', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('line_total', models.DecimalField(decimal_places=2, max_digits=10)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='orders.product')),
            ],
            options={
                'db_table': 'order_items',
            },
        ),
        migrations.CreateModel(
            name='OrderStatusHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_status', models.CharField(blank=True, choices=ORDER_STATUS_CHOICES, max_length=20, null=True)),
                ('to_status', models.CharField(choices=ORDER_STATUS_CHOICES, max_length=20)),
                ('actor_role', models.CharField(max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('changed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='orders.order')),
            ],
            options={
                'db_table': 'order_status_history',
                'ordering': ['created_at'],
                'verbose_name_plural': 'order status history',
            },
        ),
        migrations.CreateModel(
            name='PersonalCommission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_store', models.DecimalField(decimal_places=2, max_digits=10)),
                ('from_delivery', models.DecimalField(decimal_places=2, max_digits=10)),
                ('total', models.DecimalField(decimal_places=2, max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='personal_commission', to='orders.order')),
            ],
            options={
                'db_table': 'personal_commissions',
            },
        ),
    ]
