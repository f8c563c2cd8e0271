from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from apps.accounts.models import (
    User,
    UserRole,
    Customer,
    Shop,
    Referral,
    ReferralStatus,
    REFERRAL_CODE_ALPHABET,
)
from apps.accounts.services import (
    apply_referral_code,
    InvalidReferralCodeError,
    SelfReferralError,
    DuplicateReferralError,
    ReferralNotAllowedError,
)


@pytest.mark.django_db
class TestApplyReferralCode:

    def test_apply_code(self, customer, other_customer):
        referral = apply_referral_code(customer=customer, referral_code=other_customer.referral_code)

        assert referral.referrer == other_customer
        assert referral.referred == customer
        assert referral.status == ReferralStatus.PENDING
        assert referral.points_awarded is False
        assert Customer.objects.get(pk=customer.pk).referred_by == other_customer

    def test_code_is_case_insensitive(self, customer, other_customer):
        referral = apply_referral_code(
            customer=customer,
            referral_code=f'  {other_customer.referral_code.lower()} ',
        )

        assert referral.referrer == other_customer

    def test_unknown_code(self, customer):
        with pytest.raises(InvalidReferralCodeError):
            apply_referral_code(customer=customer, referral_code='NOPE0000')

    def test_empty_code(self, customer):
        with pytest.raises(InvalidReferralCodeError):
            apply_referral_code(customer=customer, referral_code='   ')

    def test_own_code(self, customer):
        with pytest.raises(SelfReferralError):
            apply_referral_code(customer=customer, referral_code=customer.referral_code)

    def test_second_code_rejected(self, customer, other_customer):
        apply_referral_code(customer=customer, referral_code=other_customer.referral_code)
        user = User.objects.create_user(email='nour@example.com', password='TestPass123!')
        third = Customer.objects.create(user=user, full_name='Nour Said')

        with pytest.raises(DuplicateReferralError):
            apply_referral_code(customer=customer, referral_code=third.referral_code)

        assert Referral.objects.filter(referred=customer).count() == 1

    def test_rejected_after_first_completed_order(self, customer, other_customer):
        Customer.objects.filter(pk=customer.pk).update(completed_orders_count=1)

        with pytest.raises(ReferralNotAllowedError):
            apply_referral_code(customer=customer, referral_code=other_customer.referral_code)


@pytest.mark.django_db
class TestCustomerModel:

    def test_referral_code_generated(self, customer):
        assert len(customer.referral_code) == 8
        assert set(customer.referral_code) <= set(REFERRAL_CODE_ALPHABET)

    def test_referred_by_empty(self, customer):
        assert customer.referred_by is None


@pytest.mark.django_db
class TestShopModel:

    def test_commission_rate_out_of_range(self, shop):
        shop.commission_rate = '0.50'

        with pytest.raises(DjangoValidationError):
            shop.full_clean()

    def test_accepts_orders(self, shop):
        assert shop.accepts_orders

        shop.is_open = False
        assert not shop.accepts_orders

    def test_default_commission_rate_from_settings(self, settings, other_shop):
        settings.DEFAULT_SHOP_COMMISSION_RATE = Decimal('0.15')
        user = User.objects.create_user(
            email='pharmacy@example.com',
            password='TestPass123!',
            role=UserRole.SHOP,
        )

        shop = Shop.objects.create(user=user, name='Corner Pharmacy')
        shop.refresh_from_db()

        assert shop.commission_rate == Decimal('0.15')
        assert other_shop.commission_rate == Decimal('0.10')


@pytest.mark.django_db
class TestDatabaseConstraints:

    def test_negative_points_rejected(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            Customer.objects.filter(pk=customer.pk).update(total_points=-1)

    def test_self_referral_rejected(self, customer):
        with pytest.raises(IntegrityError), transaction.atomic():
            Referral.objects.create(referrer=customer, referred=customer)
