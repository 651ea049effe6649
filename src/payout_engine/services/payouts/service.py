"""High-level orchestration for payout requests."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...data.route_repository import load_location_data, load_routes
from ...models.domain import LocationData, Route
from .comparison import compare_strategies
from .dispatcher import STRATEGY_NAMES, get_strategy, resolve_thresholds
from .models import ComparisonReport, PayoutResult


def calculate_payouts(
    strategy: str,
    routes: Sequence[Route],
    location_data: LocationData,
    thresholds: Optional[dict] = None,
) -> PayoutResult:
    resolved = resolve_thresholds(strategy, thresholds)
    logging.info(f"Calculating {strategy} payouts for {len(routes)} routes")
    return get_strategy(strategy).calculate(routes, location_data, resolved)


def calculate_dataset_payouts(strategy: str, thresholds: Optional[dict] = None) -> PayoutResult:
    """Run a strategy over the dataset files configured in settings."""

    if strategy not in STRATEGY_NAMES:
        raise ValueError(f"Unknown payout strategy '{strategy}'.")
    return calculate_payouts(strategy, load_routes(), load_location_data(), thresholds)


def compare_payouts(
    routes: Sequence[Route],
    location_data: LocationData,
    *,
    cluster_thresholds: Optional[dict] = None,
    direct_thresholds: Optional[dict] = None,
    flat_thresholds: Optional[dict] = None,
) -> tuple[PayoutResult, PayoutResult, PayoutResult, ComparisonReport]:
    cluster = calculate_payouts("cluster", routes, location_data, cluster_thresholds)
    direct = calculate_payouts("direct", routes, location_data, direct_thresholds)
    flat = calculate_payouts("flat", routes, location_data, flat_thresholds)
    return cluster, direct, flat, compare_strategies(cluster, direct, flat)
