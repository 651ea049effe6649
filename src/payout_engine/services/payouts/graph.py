"""Cluster graph construction for a single route."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ...models.domain import Activity, Route
from .lookup import HexagonMappingIndex
from .models import ClusterGraph, ClusterGroup


def group_clusters(route: Route, activities: Sequence[Activity], index: HexagonMappingIndex) -> Dict[int, ClusterGroup]:
    groups: Dict[int, ClusterGroup] = {}
    for activity in activities:
        if not activity.is_delivery or not activity.hexagon_index or not activity.cluster_id:
            continue
        group = groups.setdefault(activity.cluster_id, ClusterGroup(cluster_id=activity.cluster_id))
        group.hexagons.append(activity)
        group.total_shipments += index.total_shipments(activity.hexagon_index, route)
        if group.first_hexagon is None or activity.sequence < group.first_hexagon.sequence:
            group.first_hexagon = activity
    return groups


def walk_distance(activities: Sequence[Activity], start: Activity, target: Activity) -> float:
    """Sum ``distance_from_prev`` stepping forward from ``start`` until ``target``.

    Each step moves to the first later delivery whose hexagon has not been
    visited yet. When no step is left the walk stops and the partial sum is
    returned.
    """

    visited: set[str] = set()
    distance = 0.0
    current: Optional[Activity] = start
    while current is not None:
        visited.add(str(current.hexagon_index))
        step = next(
            (
                activity
                for activity in activities
                if activity.is_delivery
                and activity.hexagon_index
                and activity.sequence > current.sequence
                and str(activity.hexagon_index) not in visited
            ),
            None,
        )
        if step is None:
            break
        distance += step.distance_from_prev or 0.0
        if step.hexagon_index == target.hexagon_index:
            break
        current = step
    return distance


def _link_hexagons(activities: Sequence[Activity]) -> tuple[Dict[int, Optional[str]], Dict[int, Optional[str]]]:
    deliveries = [activity for activity in activities if activity.is_delivery]
    connected: Dict[int, Optional[str]] = {}
    incoming: Dict[int, Optional[str]] = {}
    for position, activity in enumerate(deliveries):
        outgoing = next(
            (other for other in deliveries[position + 1 :] if other.cluster_id != activity.cluster_id),
            None,
        )
        previous = next(
            (other for other in reversed(deliveries[:position]) if other.cluster_id != activity.cluster_id),
            None,
        )
        connected[activity.sequence] = str(outgoing.hexagon_index) if outgoing and outgoing.hexagon_index else None
        incoming[activity.sequence] = str(previous.hexagon_index) if previous and previous.hexagon_index else None
    return connected, incoming


def build_cluster_graph(route: Route, index: HexagonMappingIndex) -> ClusterGraph:
    activities = route.sorted_activities()
    groups = group_clusters(route, activities, index)
    cluster_order: List[int] = sorted(groups)

    distances: Dict[str, float] = {}
    for current_id, next_id in zip(cluster_order, cluster_order[1:]):
        start = groups[current_id].first_hexagon
        target = groups[next_id].first_hexagon
        if start is None or target is None:
            continue
        distances[f"{current_id}-{next_id}"] = walk_distance(activities, start, target)

    connected, incoming = _link_hexagons(activities)
    return_activity = next((activity for activity in activities if activity.is_return_to_depot), None)
    return ClusterGraph(
        activities=activities,
        groups=groups,
        cluster_order=cluster_order,
        distances=distances,
        connected=connected,
        incoming=incoming,
        return_activity=return_activity,
    )
