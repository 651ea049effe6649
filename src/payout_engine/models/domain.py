"""Domain models for routes, activities and location reference data."""

from dataclasses import dataclass, field
from typing import List, Optional

DEPOT = "depot"
DELIVERY = "delivery"


@dataclass(slots=True, eq=False)
class Activity:
    """One stop on a route, either the depot or a delivery hexagon.

    Compared by identity: two stops with equal fields are still different
    stops of the route.
    """

    sequence: int
    type: str
    lat: float
    lng: float
    cluster_id: Optional[int] = None
    hexagon_index: Optional[str] = None
    distance_from_prev: Optional[float] = None
    distance_from_dc: Optional[float] = None

    @property
    def is_delivery(self) -> bool:
        return self.type == DELIVERY

    @property
    def is_return_to_depot(self) -> bool:
        return self.type == DEPOT and self.sequence > 0


@dataclass(slots=True)
class Route:
    """A trip by one field executive on one date, starting and ending at a DC."""

    dc_code: str
    fe_number: str
    city: str
    date: str
    total_distance: float
    activities: List[Activity] = field(default_factory=list)

    def sorted_activities(self) -> List[Activity]:
        return sorted(self.activities, key=lambda activity: activity.sequence)


@dataclass(slots=True)
class DcLocation:
    dc_code: str
    city: str
    lat: float
    lng: float


@dataclass(slots=True)
class HexagonCentroid:
    hexagon_id: str
    lat: float
    lng: float
    cluster_id: Optional[int] = None


@dataclass(slots=True)
class HexagonCustomerMapping:
    """Shipment count and RTO rate of one hexagon on one route and date."""

    city: str
    dc_code: str
    fe_number: str
    ofd_date: str
    hexagon_index: str
    hexagon_lat: float
    hexagon_lng: float
    delivery_count: int
    rto_percentage: float


@dataclass(slots=True)
class LocationData:
    dc_locations: List[DcLocation] = field(default_factory=list)
    hexagon_centroids: List[HexagonCentroid] = field(default_factory=list)
    hexagon_customer_mapping: List[HexagonCustomerMapping] = field(default_factory=list)
