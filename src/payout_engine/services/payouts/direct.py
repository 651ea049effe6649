"""Direct-distance payouts: incentive proportional to excess distance from the DC."""

from __future__ import annotations

from ...schemas.thresholds import DirectDistanceThresholds
from .base import DistancePayoutStrategy
from .models import DirectDistancePayout
from .rto import RtoPolicy, UncappedRtoPolicy


class DirectDistancePayoutStrategy(DistancePayoutStrategy):
    name = "direct"
    row_type = DirectDistancePayout
    incentive_field = "distance_incentive"

    @property
    def row_policy(self) -> RtoPolicy:
        return UncappedRtoPolicy()

    def incentive(self, excess_distance: float, thresholds: DirectDistanceThresholds) -> float:
        return excess_distance * thresholds.incentive_per_meter
