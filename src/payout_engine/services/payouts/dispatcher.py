"""Factory for payout strategies and their threshold models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ...config import settings
from ...schemas.thresholds import ClusterThresholds, DirectDistanceThresholds, FlatDistanceThresholds
from .base import PayoutStrategy
from .cluster import ClusterPayoutStrategy
from .direct import DirectDistancePayoutStrategy
from .flat import FlatDistancePayoutStrategy

STRATEGY_NAMES = ("cluster", "direct", "flat")


def get_strategy(name: str, **kwargs: Any) -> PayoutStrategy:
    match name:
        case "cluster":
            return ClusterPayoutStrategy(**kwargs)
        case "direct":
            return DirectDistancePayoutStrategy(**kwargs)
        case "flat":
            return FlatDistancePayoutStrategy(**kwargs)
        case _:
            raise ValueError(f"Unknown payout strategy '{name}'.")


def resolve_thresholds(name: str, payload: Optional[dict] = None) -> BaseModel:
    """Validate ``payload`` as the strategy's thresholds, defaulting to configured values."""

    match name:
        case "cluster":
            model, default = ClusterThresholds, settings.cluster_thresholds
        case "direct":
            model, default = DirectDistanceThresholds, settings.direct_thresholds
        case "flat":
            model, default = FlatDistanceThresholds, settings.flat_thresholds
        case _:
            raise ValueError(f"Unknown payout strategy '{name}'.")
    if not payload:
        return default
    merged = {**default.model_dump(), **model.model_validate(payload).model_dump(exclude_unset=True)}
    return model.model_validate(merged)
