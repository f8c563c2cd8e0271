"""Domain-specific exceptions for settlements services."""

from apps.common.exceptions import DomainError, NotFoundError


class SettlementsServiceError(DomainError):
    """Base exception for settlements services."""
    pass


class SettlementAlreadyExistsError(SettlementsServiceError):
    """
    Raised when a period is closed twice, or a (shop, period) or
    (rider, period) settlement already exists.
    """
    code = 'SETTLEMENT_ALREADY_EXISTS'
    status_code = 409
    default_message = 'Settlements for this period already exist.'


class SettlementAlreadySettledError(SettlementsServiceError):
    """Raised when marking a settlement that is already settled."""
    code = 'SETTLEMENT_ALREADY_SETTLED'
    status_code = 409
    default_message = 'This settlement is already settled.'


class PeriodNotClosedError(SettlementsServiceError):
    """Raised when regenerating settlements for a period that is not closed."""
    code = 'PERIOD_NOT_CLOSED'
    status_code = 409
    default_message = 'Settlements can only be regenerated for a closed period.'


class PeriodNotFoundError(NotFoundError):
    code = 'PERIOD_NOT_FOUND'
    default_message = 'Period not found.'


class SettlementNotFoundError(NotFoundError):
    code = 'SETTLEMENT_NOT_FOUND'
    default_message = 'Settlement not found.'
