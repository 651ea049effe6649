"""Flat-distance payouts: a fixed incentive once the DC distance passes the threshold."""

from __future__ import annotations

from ...schemas.thresholds import FlatDistanceThresholds
from .base import DistancePayoutStrategy
from .models import FlatDistancePayout
from .rto import CappedRtoPolicy, RtoPolicy


class FlatDistancePayoutStrategy(DistancePayoutStrategy):
    name = "flat"
    row_type = FlatDistancePayout
    incentive_field = "flat_incentive"

    @property
    def row_policy(self) -> RtoPolicy:
        return CappedRtoPolicy(cap=self.rto_cap)

    def incentive(self, excess_distance: float, thresholds: FlatDistanceThresholds) -> float:
        return thresholds.flat_incentive if excess_distance > 0 else 0.0
