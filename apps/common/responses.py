"""Helpers for turning domain errors into API responses."""

from rest_framework.response import Response

from .exceptions import DomainError


def error_response(exc: DomainError) -> Response:
    """Map a :class:`DomainError` to ``{"error", "code"}`` with its HTTP status."""
    return Response(
        {'error': str(exc), 'code': exc.code},
        status=exc.status_code,
    )
