"""
Referral management service.

A customer may apply another customer's referral code exactly once, and only
before their first completed order. The bonus itself is paid by the points
ledger when that first order completes.
"""

import logging

from django.db import transaction, IntegrityError

from apps.accounts.models import Customer, Referral

from .exceptions import (
    InvalidReferralCodeError,
    SelfReferralError,
    DuplicateReferralError,
    ReferralNotAllowedError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def apply_referral_code(*, customer: Customer, referral_code: str) -> Referral:
    """
    Link ``customer`` to the owner of ``referral_code``.

    Args:
        customer: Customer applying the code
        referral_code: The referrer's code (case-insensitive)

    Returns:
        Created Referral in ``pending`` status

    Raises:
        InvalidReferralCodeError: Empty or unknown code
        SelfReferralError: Code belongs to the customer
        DuplicateReferralError: Customer already has a referral
        ReferralNotAllowedError: Customer already completed an order
    """
    code = (referral_code or '').strip().upper()
    if not code:
        raise InvalidReferralCodeError('Referral code is required')

    # Lock the customer so two concurrent applications cannot both pass the check
    customer = Customer.objects.select_for_update().get(pk=customer.pk)

    try:
        referrer = Customer.objects.get(referral_code=code)
    except Customer.DoesNotExist:
        raise InvalidReferralCodeError('Invalid referral code')

    if referrer.pk == customer.pk:
        raise SelfReferralError()

    if Referral.objects.filter(referred=customer).exists():
        raise DuplicateReferralError()

    if customer.completed_orders_count > 0:
        raise ReferralNotAllowedError(
            'Referral codes can only be applied before your first completed order'
        )

    try:
        with transaction.atomic():
            referral = Referral.objects.create(referrer=referrer, referred=customer)
    except IntegrityError:
        raise DuplicateReferralError()

    logger.info("Referral applied: %s referred by %s", customer.pk, referrer.pk)
    return referral
