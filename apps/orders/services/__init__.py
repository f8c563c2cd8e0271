"""Services for order placement, status changes and commission rules."""

from .exceptions import (
    OrdersServiceError,
    ShopClosedError,
    MinOrderNotMetError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    ShopNotFoundError,
)
from .status_machine import (
    TRANSITIONS,
    allowed_targets,
    is_terminal,
    validate_transition,
    apply_transition,
)
from .commission import (
    OrderFinancials,
    calculate_shop_commission,
    calculate_free_delivery_cost,
    calculate_platform_commission,
    calculate_customer_total,
    calculate_shop_earnings,
    calculate_rider_earnings,
    build_order_financials,
)
from .personal_commission import (
    PersonalCommissionBreakdown,
    calculate_personal_commission,
    record_personal_commission,
)
from .order_placement import validate_order_request, place_order
from .order_transitions import transition_order
from .order_queries import get_orders_for_user, get_order_for_user, get_order_history

__all__ = [
    # Exceptions
    'OrdersServiceError',
    'ShopClosedError',
    'MinOrderNotMetError',
    'InvalidStatusTransitionError',
    'OrderNotFoundError',
    'ShopNotFoundError',
    # Status machine
    'TRANSITIONS',
    'allowed_targets',
    'is_terminal',
    'validate_transition',
    'apply_transition',
    # Commission
    'OrderFinancials',
    'calculate_shop_commission',
    'calculate_free_delivery_cost',
    'calculate_platform_commission',
    'calculate_customer_total',
    'calculate_shop_earnings',
    'calculate_rider_earnings',
    'build_order_financials',
    # Personal commission
    'PersonalCommissionBreakdown',
    'calculate_personal_commission',
    'record_personal_commission',
    # Orders
    'validate_order_request',
    'place_order',
    'transition_order',
    'get_orders_for_user',
    'get_order_for_user',
    'get_order_history',
]
