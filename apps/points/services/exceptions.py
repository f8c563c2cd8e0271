"""Domain-specific exceptions for points services."""

from apps.common.exceptions import DomainError, ValidationError


class PointsServiceError(DomainError):
    """Base exception for points services."""
    pass


class InsufficientPointsError(PointsServiceError):
    """Raised when a deduction would take a balance below zero."""
    code = 'INSUFFICIENT_POINTS'
    default_message = 'Insufficient points.'


class DuplicatePointsPostingError(PointsServiceError):
    """Raised when an order already has a posting of the same type."""
    code = 'DUPLICATE_POINTS_POSTING'
    status_code = 409
    default_message = 'Points for this order have already been posted.'


class InvalidPointsAmountError(ValidationError):
    """Raised when a points amount is zero or has the wrong sign."""
    pass
