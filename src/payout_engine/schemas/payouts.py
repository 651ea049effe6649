"""Payout request/response schemas."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.domain import (
    Activity,
    DcLocation,
    HexagonCentroid,
    HexagonCustomerMapping,
    LocationData,
    Route,
)
from ..services.payouts.models import PayoutResult
from .thresholds import ClusterThresholds, DirectDistanceThresholds, FlatDistanceThresholds


def _hexagon_to_str(value: Any) -> Any:
    if value is None:
        return value
    return str(value).strip()


# Hexagon ids are 18 digit integers upstream; strings avoid float precision loss.
HexagonId = Annotated[str, BeforeValidator(_hexagon_to_str)]


class ActivityModel(BaseModel):
    sequence: int
    type: Literal["depot", "delivery"]
    lat: float = 0.0
    lng: float = 0.0
    cluster_id: Optional[int] = None
    hexagon_index: Optional[HexagonId] = None
    distance_from_prev: Optional[float] = None
    distance_from_dc: Optional[float] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_domain(self) -> Activity:
        return Activity(**self.model_dump())


class RouteModel(BaseModel):
    dc_code: str
    fe_number: str
    city: str = ""
    date: str = Field(..., validation_alias=AliasChoices("date", "ofd_date"))
    total_distance: float = 0.0
    activities: List[ActivityModel] = Field(default_factory=list)

    @field_validator("total_distance", mode="before")
    @classmethod
    def _parse_distance(cls, value: Any) -> float:
        """Upstream exports carry the distance as text; unparsable values count as 0."""
        if value is None or value == "":
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    def to_domain(self) -> Route:
        return Route(
            dc_code=self.dc_code,
            fe_number=self.fe_number,
            city=self.city,
            date=self.date,
            total_distance=self.total_distance,
            activities=[activity.to_domain() for activity in self.activities],
        )


class DcLocationModel(BaseModel):
    dc_code: str
    city: str = ""
    lat: float
    lng: float


class HexagonCentroidModel(BaseModel):
    hexagon_id: HexagonId
    cluster_id: Optional[int] = None
    lat: float
    lng: float


class HexagonMappingModel(BaseModel):
    city: str = ""
    dc_code: str
    fe_number: str
    ofd_date: str
    hexagon_index: HexagonId
    hexagon_lat: float = 0.0
    hexagon_lng: float = 0.0
    delivery_count: int = 0
    rto_percentage: float = Field(0.0, ge=0.0, lt=100.0)


class LocationDataModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dc_locations: List[DcLocationModel] = Field(default_factory=list, alias="dcLocations")
    hexagon_centroids: List[HexagonCentroidModel] = Field(default_factory=list, alias="hexagonCentroids")
    hexagon_customer_mapping: List[HexagonMappingModel] = Field(default_factory=list, alias="hexagonCustomerMapping")

    def to_domain(self) -> LocationData:
        return LocationData(
            dc_locations=[DcLocation(**item.model_dump()) for item in self.dc_locations],
            hexagon_centroids=[HexagonCentroid(**item.model_dump()) for item in self.hexagon_centroids],
            hexagon_customer_mapping=[
                HexagonCustomerMapping(**item.model_dump()) for item in self.hexagon_customer_mapping
            ],
        )


class PayoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    routes: List[RouteModel]
    location_data: LocationDataModel = Field(default_factory=LocationDataModel, alias="locationData")
    thresholds: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Overrides for the strategy's thresholds; omitted fields use configured defaults.",
    )

    def domain_routes(self) -> List[Route]:
        return [route.to_domain() for route in self.routes]


class CompareRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    routes: List[RouteModel]
    location_data: LocationDataModel = Field(default_factory=LocationDataModel, alias="locationData")
    cluster_thresholds: Optional[ClusterThresholds] = Field(default=None, alias="clusterThresholds")
    direct_thresholds: Optional[DirectDistanceThresholds] = Field(default=None, alias="directThresholds")
    flat_thresholds: Optional[FlatDistanceThresholds] = Field(default=None, alias="flatThresholds")

    def domain_routes(self) -> List[Route]:
        return [route.to_domain() for route in self.routes]


class DistanceMetricsRequest(BaseModel):
    routes: List[RouteModel]


class _ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PayoutCalculationModel(_ResponseModel):
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


class _DistancePayoutModel(_ResponseModel):
    hexagon_id: str
    dc_code: str
    fe_number: str
    date: str
    total_shipments: int
    direct_distance: float
    excess_distance: float
    base_earnings: float
    total_earnings: float
    earnings_per_shipment: float
    earnings_per_shipment_pre_rto: float
    earnings_per_shipment_post_rto: float
    rto_percentage: float


class DirectDistancePayoutModel(_DistancePayoutModel):
    distance_incentive: float


class FlatDistancePayoutModel(_DistancePayoutModel):
    flat_incentive: float


class PilotSummaryModel(_ResponseModel):
    shipments: int
    incentives_pre_rto: float
    incentives_post_rto: float
    base_earnings: float
    total_earnings_pre_rto: float
    total_earnings_post_rto: float
    earnings_per_shipment_pre_rto: float
    earnings_per_shipment_post_rto: float


class PayoutSummaryModel(_ResponseModel):
    dc_code: str
    total_shipments: int
    total_incentives_pre_rto: float
    total_incentives_post_rto: float
    total_base_earnings: float
    total_earnings_pre_rto: float
    total_earnings_post_rto: float
    avg_earnings_per_shipment_pre_rto: float
    avg_earnings_per_shipment_post_rto: float
    pilots: Dict[str, PilotSummaryModel]


CalculationModel = Union[PayoutCalculationModel, DirectDistancePayoutModel, FlatDistancePayoutModel]

_ROW_MODELS = {
    "cluster": PayoutCalculationModel,
    "direct": DirectDistancePayoutModel,
    "flat": FlatDistancePayoutModel,
}


class PayoutResponse(_ResponseModel):
    strategy: str
    summaries: List[PayoutSummaryModel]
    calculations: List[CalculationModel]

    @classmethod
    def from_result(cls, result: PayoutResult) -> "PayoutResponse":
        row_model = _ROW_MODELS[result.strategy]
        return cls(
            strategy=result.strategy,
            summaries=[PayoutSummaryModel.model_validate(summary) for summary in result.summaries],
            calculations=[row_model.model_validate(row) for row in result.calculations],
        )


class StrategyMetricsModel(_ResponseModel):
    name: str
    total_orders: int
    incentivized_orders: int
    percentage_incentivized: float
    avg_incentive_per_order_pre_rto: float
    avg_incentive_per_order_post_rto: float


class ComparisonResponse(_ResponseModel):
    cluster: PayoutResponse
    direct: PayoutResponse
    flat: PayoutResponse
    metrics: List[StrategyMetricsModel]
    dc_comparison: List[Dict[str, Any]]
    fe_comparison: List[Dict[str, Any]]


class ThresholdsResponse(_ResponseModel):
    cluster: ClusterThresholds
    direct: DirectDistanceThresholds
    flat: FlatDistanceThresholds
    max_rto_percentage: float


class DistanceMetricsModel(_ResponseModel):
    avg_distance: float
    total_routes: int
    total_distance: float
    city_average: Optional[float] = None
    dc_average: Optional[float] = None
    fe_average: Optional[float] = None
    dc_to_hex_average: Optional[float] = None
    hex_to_hex_average: Optional[float] = None
