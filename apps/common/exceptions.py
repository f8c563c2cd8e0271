"""
Base error taxonomy shared by every service layer.

Services raise subclasses of :class:`DomainError`; views catch them and turn
them into HTTP responses through :func:`apps.common.responses.error_response`.
Each subclass carries a stable ``code`` that API clients can switch on and the
HTTP status the failure maps to.
"""


class DomainError(Exception):
    """Base class for expected, recoverable business rule violations."""

    code = 'DOMAIN_ERROR'
    status_code = 400
    default_message = 'The request violates a business rule.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Malformed input: empty items, negative amounts, missing address."""

    code = 'VALIDATION_ERROR'
    default_message = 'Invalid input.'


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Not found.'


class PermissionDeniedError(DomainError):
    """The acting user may not perform this operation."""

    code = 'PERMISSION_DENIED'
    status_code = 403
    default_message = 'You do not have permission to perform this action.'
