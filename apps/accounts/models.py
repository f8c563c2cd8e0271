from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import secrets
import string
import uuid


REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code():
    return ''.join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))


def default_commission_rate():
    return settings.DEFAULT_SHOP_COMMISSION_RATE


class UserRole(models.TextChoices):
    CUSTOMER = 'customer', 'Customer'
    SHOP = 'shop', 'Shop'
    RIDER = 'rider', 'Rider'
    ADMIN = 'admin', 'Admin'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Custom user model with email authentication and a platform role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.CUSTOMER)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['role'], name='users_role_idx'),
            models.Index(fields=['created_at'], name='users_created_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]


class Customer(models.Model):
    """Customer profile: delivery details and loyalty points balance.

    ``total_points`` is only ever changed through the points ledger
    (``apps.points.services.points_ledger``), which writes a
    ``PointsTransaction`` in the same database transaction.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='customer')
    full_name = models.CharField(max_length=150)
    address_text = models.TextField(blank=True)
    landmark = models.CharField(max_length=200, blank=True)
    area = models.CharField(max_length=100, blank=True)

    total_points = models.PositiveIntegerField(default=0)
    referral_code = models.CharField(max_length=16, unique=True, db_index=True, editable=False)
    completed_orders_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_points__gte=0),
                name='customer_points_non_negative',
            ),
        ]
        ordering = ['full_name']

    def __str__(self):
        return self.full_name

    def save(self, *args, **kwargs):
        if not self.referral_code:
            self.referral_code = generate_referral_code()
        super().save(*args, **kwargs)

    @property
    def referred_by(self):
        """The referring customer, if this customer applied a referral code."""
        referral = getattr(self, 'referral_received', None)
        return referral.referrer if referral else None


class Shop(models.Model):
    """Shop profile with its commission terms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='shop')
    name = models.CharField(max_length=200)
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=default_commission_rate,
    )
    min_order_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    is_active = models.BooleanField(default=True)
    is_open = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shops'
        indexes = [
            models.Index(fields=['is_active', 'is_open'], name='shops_active_open_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    def clean(self):
        low = settings.MIN_SHOP_COMMISSION_RATE
        high = settings.MAX_SHOP_COMMISSION_RATE
        if self.commission_rate is not None and not (low <= self.commission_rate <= high):
            raise ValidationError({
                'commission_rate': f'Commission rate must be between {low} and {high}.'
            })

    @property
    def accepts_orders(self):
        return self.is_active and self.is_open


class Rider(models.Model):
    """Delivery rider, paid the delivery fee frozen on each completed order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='rider')
    full_name = models.CharField(max_length=150)
    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'riders'
        ordering = ['full_name']

    def __str__(self):
        return self.full_name


class ReferralStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'


class Referral(models.Model):
    """Referrer -> referred link; the bonus is paid once, on the first completed order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    referrer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='referrals_made')
    referred = models.OneToOneField(Customer, on_delete=models.CASCADE, related_name='referral_received')
    status = models.CharField(max_length=20, choices=ReferralStatus.choices, default=ReferralStatus.PENDING)
    first_order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    points_awarded = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'referrals'
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(referrer=models.F('referred')),
                name='referral_not_self',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.referrer} -> {self.referred} ({self.status})"
