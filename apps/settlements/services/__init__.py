"""Services for weekly periods, settlement generation and payouts."""

from .exceptions import (
    SettlementsServiceError,
    SettlementAlreadyExistsError,
    SettlementAlreadySettledError,
    PeriodNotClosedError,
    PeriodNotFoundError,
    SettlementNotFoundError,
)
from .period_management import (
    week_bounds,
    get_active_period,
    lock_active_period,
    create_next_period,
    get_period,
    list_periods,
)
from .settlement_aggregation import (
    PeriodCloseResult,
    calculate_shop_net_amount,
    build_admin_summary,
    close_period,
    regenerate_settlements,
)
from .settlement_payout import (
    mark_shop_settlement_settled,
    mark_rider_settlement_settled,
    settle_period_if_complete,
)

__all__ = [
    # Exceptions
    'SettlementsServiceError',
    'SettlementAlreadyExistsError',
    'SettlementAlreadySettledError',
    'PeriodNotClosedError',
    'PeriodNotFoundError',
    'SettlementNotFoundError',
    # Periods
    'week_bounds',
    'get_active_period',
    'lock_active_period',
    'create_next_period',
    'get_period',
    'list_periods',
    # Aggregation
    'PeriodCloseResult',
    'calculate_shop_net_amount',
    'build_admin_summary',
    'close_period',
    'regenerate_settlements',
    # Payout
    'mark_shop_settlement_settled',
    'mark_rider_settlement_settled',
    'settle_period_if_complete',
]
