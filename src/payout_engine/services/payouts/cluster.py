"""Cluster-based payouts.

Incentives are earned on three legs of a route:

* DC to the first hexagon of cluster 1, beyond ``dc_to_hex_threshold``;
* first hexagon of one cluster to the first hexagon of the next, beyond
  ``hex_to_hex_threshold``, credited to the cluster being entered;
* the return to the DC, spread over the route's hexagons either by each
  cluster's entry distance (``proportional``) or by visit sequence times
  shipments (``weighted``).

Every amount that is spread over a cluster is split between its hexagons by
their share of the cluster's shipments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from ...models.domain import Activity, LocationData, Route
from ...schemas.thresholds import ClusterThresholds
from .base import PayoutStrategy, dedup_key
from .graph import build_cluster_graph
from .lookup import HexagonMappingIndex
from .models import RETURN_TO_DC, ClusterGraph, PayoutCalculation, PayoutResult, PayoutRow, SummaryEntry
from .rto import CappedRtoPolicy, RtoPolicy, per_shipment


@dataclass(slots=True)
class RouteIncentives:
    """Incentive amounts of one route before they are written to rows."""

    dc_to_cluster1_distance: float = 0.0
    dc_to_cluster1_incentive: float = 0.0
    regular: Dict[str, float] = field(default_factory=dict)
    return_share: Dict[str, float] = field(default_factory=dict)
    total_return: float = 0.0


def _share(amount: float, part: float, whole: float) -> float:
    return amount / whole * part if whole else 0.0


def average_cluster_rto(routes: Sequence[Route], index: HexagonMappingIndex) -> Dict[int, float]:
    """Mean hexagon RTO per cluster id over every route.

    Keyed by cluster id alone, so cluster 2 of one route is averaged with
    cluster 2 of every other route.
    """

    totals: Dict[int, float] = {}
    counts: Dict[int, int] = {}
    for route in routes:
        for activity in route.activities:
            if not activity.is_delivery or not activity.cluster_id:
                continue
            mapping = index.first(activity.hexagon_index, route)
            if mapping is None:
                continue
            totals[activity.cluster_id] = totals.get(activity.cluster_id, 0.0) + (mapping.rto_percentage or 0.0)
            counts[activity.cluster_id] = counts.get(activity.cluster_id, 0) + 1
    return {cluster_id: totals[cluster_id] / counts[cluster_id] for cluster_id in totals}


def route_incentives(
    route: Route,
    graph: ClusterGraph,
    index: HexagonMappingIndex,
    thresholds: ClusterThresholds,
) -> RouteIncentives:
    result = RouteIncentives()

    def shipments(activity: Activity) -> int:
        return index.total_shipments(activity.hexagon_index, route)

    cluster1 = graph.groups.get(1)
    if cluster1 is not None and cluster1.first_hexagon is not None:
        result.dc_to_cluster1_distance = cluster1.first_hexagon.distance_from_prev or 0.0
        excess = max(0.0, result.dc_to_cluster1_distance - thresholds.dc_to_hex_threshold)
        result.dc_to_cluster1_incentive = excess * thresholds.dc_to_hex_incentive_per_meter

    pairs = list(zip(graph.cluster_order, graph.cluster_order[1:]))
    for current_id, next_id in pairs:
        if f"{current_id}-{next_id}" not in graph.distances:
            continue
        excess = max(0.0, graph.pair_distance(current_id, next_id) - thresholds.hex_to_hex_threshold)
        incentive = excess * thresholds.hex_to_hex_incentive_per_meter
        if incentive <= 0:
            continue
        entered = graph.groups[next_id]
        for activity in entered.hexagons:
            result.regular[str(activity.hexagon_index)] = _share(
                incentive, shipments(activity), entered.total_shipments
            )

    return_activity = graph.return_activity
    if return_activity is None or not return_activity.distance_from_prev:
        return result
    result.total_return = return_activity.distance_from_prev * thresholds.return_incentive_per_meter

    if thresholds.return_journey_strategy == "proportional":
        entry_distances: Dict[int, float] = {}
        if cluster1 is not None and cluster1.first_hexagon is not None:
            entry_distances[1] = result.dc_to_cluster1_distance
        for current_id, next_id in pairs:
            entry_distances[next_id] = graph.pair_distance(current_id, next_id)
        total_entry = sum(entry_distances.values())

        for cluster_id, group in graph.groups.items():
            cluster_return = _share(result.total_return, entry_distances.get(cluster_id, 0.0), total_entry)
            for activity in group.hexagons:
                result.return_share[str(activity.hexagon_index)] = _share(
                    cluster_return, shipments(activity), group.total_shipments
                )
    else:
        weights: Dict[str, float] = {}
        total_weight = 0.0
        for activity in graph.activities:
            if not activity.is_delivery or not activity.hexagon_index:
                continue
            weight = activity.sequence * shipments(activity)
            total_weight += weight
            weights[str(activity.hexagon_index)] = weight
        for hexagon_id, weight in weights.items():
            result.return_share[hexagon_id] = _share(result.total_return, weight, total_weight)
    return result


class ClusterPayoutStrategy(PayoutStrategy):
    """Rows use the hexagon's own RTO, capped; summaries use the cluster's average RTO, uncapped."""

    name = "cluster"

    @property
    def row_policy(self) -> RtoPolicy:
        return CappedRtoPolicy(cap=self.rto_cap)

    def calculate(
        self,
        routes: Sequence[Route],
        location_data: LocationData,
        thresholds: ClusterThresholds,
    ) -> PayoutResult:
        index = HexagonMappingIndex(location_data.hexagon_customer_mapping)
        # Every route must be scanned before any earnings are final.
        cluster_rto = average_cluster_rto(routes, index)
        known_dcs = {dc.dc_code for dc in location_data.dc_locations}

        processed: set[tuple[str, str, str]] = set()
        rows: List[PayoutRow] = []
        entries: List[SummaryEntry] = []

        for route in routes:
            if route.dc_code not in known_dcs:
                logging.debug(f"DC {route.dc_code} has no location record; computing payouts without it")
            graph = build_cluster_graph(route, index)
            incentives = route_incentives(route, graph, index, thresholds)

            for activity in graph.activities:
                if activity.is_return_to_depot:
                    rows.append(self._return_row(route, activity, thresholds))
                    continue
                if not activity.is_delivery or not activity.hexagon_index or not activity.cluster_id:
                    continue
                key = dedup_key(route, activity.hexagon_index)
                if key in processed:
                    continue
                processed.add(key)

                row = self._hexagon_row(route, activity, graph, incentives, index, cluster_rto, thresholds)
                rows.append(row)
                entries.append(
                    SummaryEntry(
                        dc_code=row.dc_code,
                        fe_number=row.fe_number,
                        shipments=row.total_shipments,
                        base_earnings=row.base_earnings,
                        incentive=row.total_incentive,
                        rto_percentage=row.cluster_rto_percentage,
                    )
                )
        return self._result(rows, entries)

    def _hexagon_row(
        self,
        route: Route,
        activity: Activity,
        graph: ClusterGraph,
        incentives: RouteIncentives,
        index: HexagonMappingIndex,
        cluster_rto: Mapping[int, float],
        thresholds: ClusterThresholds,
    ) -> PayoutCalculation:
        hexagon_id = str(activity.hexagon_index)
        cluster_id = activity.cluster_id
        cluster = graph.groups[cluster_id]
        shipments = index.total_shipments(activity.hexagon_index, route)
        rto_percentage = index.rto_percentage(activity.hexagon_index, route)

        in_cluster1 = cluster_id == 1
        dc_to_hex_incentive = (
            _share(incentives.dc_to_cluster1_incentive, shipments, cluster.total_shipments) if in_cluster1 else 0.0
        )
        regular = incentives.regular.get(hexagon_id, 0.0)
        return_share = incentives.return_share.get(hexagon_id, 0.0)
        total_incentive = dc_to_hex_incentive + regular + return_share

        base_earnings = shipments * thresholds.base_shipment_price
        adjusted_incentive = self.row_policy.adjust(total_incentive, rto_percentage)
        total_pre_rto = base_earnings + total_incentive
        total_post_rto = base_earnings + adjusted_incentive

        is_first = activity is cluster.first_hexagon
        hex_to_hex_distance = 0.0
        hex_to_hex_excess = 0.0
        if is_first and cluster_id > 1:
            hex_to_hex_distance = graph.pair_distance(cluster_id - 1, cluster_id)
            hex_to_hex_excess = max(0.0, hex_to_hex_distance - thresholds.hex_to_hex_threshold)

        dc_to_hex_distance = 0.0
        dc_to_hex_excess = 0.0
        if in_cluster1:
            dc_to_hex_distance = (cluster.first_hexagon.distance_from_prev or 0.0) if cluster.first_hexagon else 0.0
            dc_to_hex_excess = max(0.0, dc_to_hex_distance - thresholds.dc_to_hex_threshold)

        return PayoutCalculation(
            hexagon_id=hexagon_id,
            cluster_id=str(cluster_id),
            dc_code=route.dc_code,
            fe_number=route.fe_number,
            date=route.date,
            total_shipments=shipments,
            dc_to_hex_distance=dc_to_hex_distance,
            dc_to_hex_excess=dc_to_hex_excess,
            dc_to_hex_incentive=dc_to_hex_incentive,
            hex_to_hex_distance=hex_to_hex_distance,
            hex_to_hex_excess=hex_to_hex_excess,
            hex_to_hex_incentive=regular + return_share,
            return_journey_share=return_share,
            total_incentive=total_incentive,
            base_earnings=base_earnings,
            total_earnings=total_post_rto,
            incentive_per_shipment=per_shipment(total_incentive, shipments),
            earnings_per_shipment=per_shipment(total_post_rto, shipments),
            earnings_per_shipment_pre_rto=per_shipment(total_pre_rto, shipments),
            earnings_per_shipment_post_rto=per_shipment(total_post_rto, shipments),
            connected_hex_id=graph.connected.get(activity.sequence),
            is_first_hex_in_cluster=is_first,
            incoming_hex_id=graph.incoming.get(activity.sequence),
            rto_percentage=rto_percentage,
            cluster_rto_percentage=cluster_rto.get(cluster_id, 0.0),
        )

    @staticmethod
    def _return_row(route: Route, activity: Activity, thresholds: ClusterThresholds) -> PayoutCalculation:
        distance = activity.distance_from_prev or 0.0
        return PayoutCalculation(
            hexagon_id=RETURN_TO_DC,
            cluster_id="N/A",
            dc_code=route.dc_code,
            fe_number=route.fe_number,
            date=route.date,
            total_shipments=0,
            dc_to_hex_distance=distance,
            dc_to_hex_excess=0.0,
            dc_to_hex_incentive=0.0,
            hex_to_hex_distance=0.0,
            hex_to_hex_excess=0.0,
            hex_to_hex_incentive=0.0,
            return_journey_share=0.0,
            total_incentive=distance * thresholds.return_incentive_per_meter,
            base_earnings=0.0,
            total_earnings=0.0,
            incentive_per_shipment=0.0,
            earnings_per_shipment=0.0,
            earnings_per_shipment_pre_rto=0.0,
            earnings_per_shipment_post_rto=0.0,
            connected_hex_id=None,
            is_first_hex_in_cluster=False,
            incoming_hex_id=None,
            rto_percentage=0.0,
            cluster_rto_percentage=0.0,
        )
