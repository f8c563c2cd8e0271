"""Domain-specific exceptions for orders services."""

from apps.common.exceptions import DomainError, NotFoundError


class OrdersServiceError(DomainError):
    """Base exception for orders services."""
    pass


class ShopClosedError(OrdersServiceError):
    """Raised when an order targets an inactive or closed shop."""
    code = 'SHOP_CLOSED'
    default_message = 'This shop is not accepting orders right now.'


class MinOrderNotMetError(OrdersServiceError):
    """Raised when the subtotal is below the shop's minimum order amount."""
    code = 'MIN_ORDER_NOT_MET'
    default_message = 'Order subtotal is below the shop minimum.'


class InvalidStatusTransitionError(OrdersServiceError):
    """Raised for an illegal edge, or a legal edge taken by the wrong role."""
    code = 'INVALID_STATUS_TRANSITION'
    default_message = 'This status change is not allowed.'


class OrderNotFoundError(NotFoundError):
    code = 'ORDER_NOT_FOUND'
    default_message = 'Order not found.'


class ShopNotFoundError(NotFoundError):
    code = 'SHOP_NOT_FOUND'
    default_message = 'Shop not found.'
