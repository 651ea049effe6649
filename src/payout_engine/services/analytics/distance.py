"""Route distance analytics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ...models.domain import Route


@dataclass(slots=True)
class DistanceMetrics:
    avg_distance: float
    total_routes: int
    total_distance: float
    city_average: Optional[float] = None
    dc_average: Optional[float] = None
    fe_average: Optional[float] = None
    dc_to_hex_average: Optional[float] = None
    hex_to_hex_average: Optional[float] = None


def _mean_of_group_means(routes: Sequence[Route], key: Callable[[Route], str]) -> float:
    totals: Dict[str, List[float]] = {}
    for route in routes:
        bucket = totals.setdefault(key(route), [0.0, 0.0])
        bucket[0] += route.total_distance
        bucket[1] += 1
    return sum(distance / count for distance, count in totals.values()) / len(totals)


def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def calculate_averages(routes: Sequence[Route]) -> DistanceMetrics:
    """Average route length overall and as the mean of per-city, per-DC and per-FE averages."""

    if not routes:
        return DistanceMetrics(avg_distance=0.0, total_routes=0, total_distance=0.0)

    total_distance = sum(route.total_distance for route in routes)

    first_legs: List[float] = []
    later_legs: List[float] = []
    for route in routes:
        deliveries = [activity for activity in route.sorted_activities() if activity.is_delivery]
        for position, activity in enumerate(deliveries):
            if activity.distance_from_prev is None:
                continue
            (first_legs if position == 0 else later_legs).append(activity.distance_from_prev)

    return DistanceMetrics(
        avg_distance=total_distance / len(routes),
        total_routes=len(routes),
        total_distance=total_distance,
        city_average=_mean_of_group_means(routes, lambda route: route.city),
        dc_average=_mean_of_group_means(routes, lambda route: route.dc_code),
        fe_average=_mean_of_group_means(routes, lambda route: route.fe_number),
        dc_to_hex_average=_mean(first_legs),
        hex_to_hex_average=_mean(later_legs),
    )
