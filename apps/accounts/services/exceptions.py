"""Domain-specific exceptions for accounts services."""

from apps.common.exceptions import DomainError, NotFoundError, ValidationError


class AccountsServiceError(DomainError):
    """Base exception for accounts services."""
    pass


class ProfileNotFoundError(NotFoundError):
    """Raised when a user has no customer/shop/rider profile for the action."""
    code = 'PROFILE_NOT_FOUND'


class InvalidReferralCodeError(ValidationError):
    """Raised when a referral code is empty or matches no customer."""
    pass


class SelfReferralError(AccountsServiceError):
    """Raised when a customer applies their own referral code."""
    code = 'SELF_REFERRAL'
    default_message = 'You cannot use your own referral code.'


class DuplicateReferralError(AccountsServiceError):
    """Raised when a customer has already applied a referral code."""
    code = 'DUPLICATE_REFERRAL'
    default_message = 'A referral code has already been applied to this account.'


class ReferralNotAllowedError(ValidationError):
    """Raised when the customer already completed an order before applying a code."""
    pass
