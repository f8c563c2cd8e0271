"""Services for loyalty points: pure rules and the balance ledger."""

from .exceptions import (
    PointsServiceError,
    InsufficientPointsError,
    DuplicatePointsPostingError,
    InvalidPointsAmountError,
)
from .points_engine import (
    PointsApplication,
    PointsValidationResult,
    points_to_money,
    money_to_points,
    calculate_earned_points,
    get_max_redeemable_points,
    apply_points,
    validate_points_redemption,
    record_points_usage,
    calculate_store_weekly_points_credit,
)
from .points_ledger import (
    post_points,
    redeem_points,
    award_order_points,
    award_referral_bonus,
    refund_order_points,
    adjust_points,
    get_points_balance,
    get_points_history,
)

__all__ = [
    # Exceptions
    'PointsServiceError',
    'InsufficientPointsError',
    'DuplicatePointsPostingError',
    'InvalidPointsAmountError',
    # Rules
    'PointsApplication',
    'PointsValidationResult',
    'points_to_money',
    'money_to_points',
    'calculate_earned_points',
    'get_max_redeemable_points',
    'apply_points',
    'validate_points_redemption',
    'record_points_usage',
    'calculate_store_weekly_points_credit',
    # Ledger
    'post_points',
    'redeem_points',
    'award_order_points',
    'award_referral_bonus',
    'refund_order_points',
    'adjust_points',
    'get_points_balance',
    'get_points_history',
]
