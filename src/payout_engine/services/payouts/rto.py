"""RTO (return-to-origin) adjustment policies.

Incentives, never base pay, are grossed up so that the expected share of
shipments that will be returned does not eat into the pilot's incentive:
``adjusted = incentive / (1 - rto / 100)``. The strategies do not agree on
whether the RTO rate is capped, so each policy is a named variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class RtoPolicy(ABC):
    """Contract for turning a raw RTO percentage into an incentive multiplier."""

    name: str = "rto"

    @abstractmethod
    def effective_rate(self, rto_percentage: float) -> float:
        raise NotImplementedError

    def adjust(self, incentive: float, rto_percentage: float) -> float:
        divisor = 1 - (self.effective_rate(rto_percentage) / 100)
        if divisor <= 0:
            return incentive
        return incentive / divisor


@dataclass(frozen=True)
class CappedRtoPolicy(RtoPolicy):
    cap: float = 30.0
    name: str = "capped"

    def effective_rate(self, rto_percentage: float) -> float:
        return min(rto_percentage, self.cap)


@dataclass(frozen=True)
class UncappedRtoPolicy(RtoPolicy):
    name: str = "uncapped"

    def effective_rate(self, rto_percentage: float) -> float:
        return rto_percentage


def per_shipment(total: float, shipments: int) -> float:
    return total / shipments if shipments > 0 else 0.0
