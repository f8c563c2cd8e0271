"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    ProfileNotFoundError,
    InvalidReferralCodeError,
    SelfReferralError,
    DuplicateReferralError,
    ReferralNotAllowedError,
)
from .profiles import get_customer_for_user, get_shop_for_user, get_rider_for_user
from .referral_management import apply_referral_code

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'ProfileNotFoundError',
    'InvalidReferralCodeError',
    'SelfReferralError',
    'DuplicateReferralError',
    'ReferralNotAllowedError',
    # Services
    'get_customer_for_user',
    'get_shop_for_user',
    'get_rider_for_user',
    'apply_referral_code',
]
