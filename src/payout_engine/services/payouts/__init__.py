"""Payout strategy services."""

from .comparison import compare_strategies
from .dispatcher import STRATEGY_NAMES, get_strategy, resolve_thresholds
from .service import calculate_dataset_payouts, calculate_payouts, compare_payouts

__all__ = [
    "STRATEGY_NAMES",
    "get_strategy",
    "resolve_thresholds",
    "compare_strategies",
    "calculate_payouts",
    "calculate_dataset_payouts",
    "compare_payouts",
]
