# Generated manually for the points app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PointsTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('transaction_type', models.CharField(choices=[('earned', 'Earned'), ('redeemed', 'Redeemed'), ('referral', 'Referral'), ('adjustment', 'Adjustment')], max_length=20)),
                ('points', models.IntegerField()),
                ('balance_after', models.PositiveIntegerField()),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='points_transactions', to='accounts.customer')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='points_transactions', to='orders.order')),
            ],
            options={
                'db_table': 'points_transactions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer', 'created_at'], name='points_tx_customer_idx'),
                    models.Index(fields=['transaction_type', 'created_at'], name='points_tx_type_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(order__isnull=False), fields=('order', 'transaction_type'), name='unique_points_posting_per_order'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PointsUsageRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('points_used', models.PositiveIntegerField()),
                ('monetary_value', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.00'))])),
                ('used_at', models.DateTimeField()),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='points_usage', to='orders.order')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='points_usage_records', to='accounts.shop')),
            ],
            options={
                'db_table': 'points_usage_records',
                'ordering': ['-used_at'],
                'indexes': [
                    models.Index(fields=['shop', 'used_at'], name='points_usage_shop_idx'),
                ],
            },
        ),
    ]
