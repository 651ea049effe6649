"""Payout domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from ...models.domain import Activity
from .rto import RtoPolicy, UncappedRtoPolicy

RETURN_TO_DC = "Return to DC"


@dataclass(slots=True)
class ClusterGroup:
    cluster_id: int
    hexagons: List[Activity] = field(default_factory=list)
    total_shipments: int = 0
    first_hexagon: Optional[Activity] = None


@dataclass(slots=True)
class ClusterGraph:
    """Per-route view of clusters, the distances between them and hexagon links."""

    activities: List[Activity]
    groups: Dict[int, ClusterGroup]
    cluster_order: List[int]
    distances: Dict[str, float]
    connected: Dict[int, Optional[str]]
    incoming: Dict[int, Optional[str]]
    return_activity: Optional[Activity] = None

    def pair_distance(self, from_cluster: int, to_cluster: int) -> float:
        return self.distances.get(f"{from_cluster}-{to_cluster}", 0.0)


@dataclass(slots=True)
class PayoutCalculation:
    hexagon_id: str
    cluster_id: str
    dc_code: str
    fe_number: str
    date: str
    total_shipments: int
    dc_to_hex_distance: float
    dc_to_hex_excess: float
    dc_to_hex_incentive: float
    hex_to_hex_distance: float
    hex_to_hex_excess: float
    hex_to_hex_incentive: float
    return_journey_share: float
    total_incentive: float
    base_earnings: float
    total_earnings: float
    incentive_per_shipment: float
    earnings_per_shipment: float
    earnings_per_shipment_pre_rto: float
    earnings_per_shipment_post_rto: float
    connected_hex_id: Optional[str]
    is_first_hex_in_cluster: bool
    incoming_hex_id: Optional[str]
    rto_percentage: float
    cluster_rto_percentage: float

    @property
    def is_return_row(self) -> bool:
        return self.hexagon_id == RETURN_TO_DC


@dataclass(slots=True)
class DirectDistancePayout:
    hexagon_id: str
    dc_code: str
    fe_number: str
    date: str
    total_shipments: int
    direct_distance: float
    excess_distance: float
    distance_incentive: float
    base_earnings: float
    total_earnings: float
    earnings_per_shipment: float
    earnings_per_shipment_pre_rto: float
    earnings_per_shipment_post_rto: float
    rto_percentage: float

    @property
    def incentive(self) -> float:
        return self.distance_incentive


@dataclass(slots=True)
class FlatDistancePayout:
    hexagon_id: str
    dc_code: str
    fe_number: str
    date: str
    total_shipments: int
    direct_distance: float
    excess_distance: float
    flat_incentive: float
    base_earnings: float
    total_earnings: float
    earnings_per_shipment: float
    earnings_per_shipment_pre_rto: float
    earnings_per_shipment_post_rto: float
    rto_percentage: float

    @property
    def incentive(self) -> float:
        return self.flat_incentive


PayoutRow = Union[PayoutCalculation, DirectDistancePayout, FlatDistancePayout]


@dataclass(slots=True)
class SummaryEntry:
    """One row's contribution to the DC and pilot summaries."""

    dc_code: str
    fe_number: str
    shipments: int
    base_earnings: float
    incentive: float
    rto_percentage: float


@dataclass(slots=True)
class PilotSummary:
    shipments: int = 0
    incentives_pre_rto: float = 0.0
    incentives_post_rto: float = 0.0
    base_earnings: float = 0.0
    total_earnings_pre_rto: float = 0.0
    total_earnings_post_rto: float = 0.0
    earnings_per_shipment_pre_rto: float = 0.0
    earnings_per_shipment_post_rto: float = 0.0


@dataclass(slots=True)
class PayoutSummary:
    dc_code: str
    total_shipments: int = 0
    total_incentives_pre_rto: float = 0.0
    total_incentives_post_rto: float = 0.0
    total_base_earnings: float = 0.0
    total_earnings_pre_rto: float = 0.0
    total_earnings_post_rto: float = 0.0
    avg_earnings_per_shipment_pre_rto: float = 0.0
    avg_earnings_per_shipment_post_rto: float = 0.0
    pilots: Dict[str, PilotSummary] = field(default_factory=dict)


@dataclass(slots=True)
class PayoutResult:
    strategy: str
    summaries: List[PayoutSummary]
    calculations: List[PayoutRow]
    summary_entries: List[SummaryEntry] = field(default_factory=list)
    rto_policy: RtoPolicy = field(default_factory=UncappedRtoPolicy)


@dataclass(slots=True)
class StrategyMetrics:
    name: str
    total_orders: int
    incentivized_orders: int
    percentage_incentivized: float
    avg_incentive_per_order_pre_rto: float
    avg_incentive_per_order_post_rto: float


@dataclass(slots=True)
class ComparisonReport:
    metrics: List[StrategyMetrics]
    dc_comparison: List[dict]
    fe_comparison: List[dict]
