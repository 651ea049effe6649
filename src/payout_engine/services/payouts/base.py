"""Base classes for payout strategy implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from ...config import settings
from ...models.domain import LocationData, Route
from .aggregation import summarize
from .lookup import HexagonMappingIndex
from .models import PayoutResult, PayoutRow, SummaryEntry
from .rto import RtoPolicy, UncappedRtoPolicy, per_shipment


def dedup_key(route: Route, hexagon_index: object) -> tuple[str, str, str]:
    return (route.fe_number, route.date, str(hexagon_index))


class PayoutStrategy(ABC):
    """Contract for payout strategy implementations.

    ``row_policy`` grosses up the incentive shown on each row and
    ``summary_policy`` the one rolled into DC and pilot summaries.
    """

    name: str = "payout"

    def __init__(self, rto_cap: Optional[float] = None) -> None:
        self.rto_cap = settings.max_rto_percentage if rto_cap is None else rto_cap

    @property
    @abstractmethod
    def row_policy(self) -> RtoPolicy:
        raise NotImplementedError

    @property
    def summary_policy(self) -> RtoPolicy:
        return UncappedRtoPolicy()

    @abstractmethod
    def calculate(
        self,
        routes: Sequence[Route],
        location_data: LocationData,
        thresholds: Any,
    ) -> PayoutResult:
        raise NotImplementedError

    def _result(self, rows: List[PayoutRow], entries: List[SummaryEntry]) -> PayoutResult:
        summaries = summarize(entries, self.summary_policy)
        logging.info(
            f"{self.name} payouts: {len(rows)} rows across {len(summaries)} DCs"
        )
        return PayoutResult(
            strategy=self.name,
            summaries=summaries,
            calculations=rows,
            summary_entries=entries,
            rto_policy=self.summary_policy,
        )


class DistancePayoutStrategy(PayoutStrategy):
    """Per-hexagon incentive from the straight-line distance to the DC.

    Subclasses only decide how excess distance turns into an incentive and
    which row type carries it.
    """

    row_type: type
    incentive_field: str

    @abstractmethod
    def incentive(self, excess_distance: float, thresholds: Any) -> float:
        raise NotImplementedError

    def calculate(
        self,
        routes: Sequence[Route],
        location_data: LocationData,
        thresholds: Any,
    ) -> PayoutResult:
        index = HexagonMappingIndex(location_data.hexagon_customer_mapping)
        processed: set[tuple[str, str, str]] = set()
        rows: List[PayoutRow] = []
        entries: List[SummaryEntry] = []

        for route in routes:
            for activity in route.activities:
                if not activity.is_delivery or not activity.hexagon_index or not activity.distance_from_dc:
                    continue
                key = dedup_key(route, activity.hexagon_index)
                if key in processed:
                    continue
                processed.add(key)

                mapping = index.first(activity.hexagon_index, route)
                if mapping is None:
                    logging.debug(f"No hexagon mapping for {key} on DC {route.dc_code}; using zero shipments")
                shipments = index.first_shipments(activity.hexagon_index, route)
                rto_percentage = index.rto_percentage(activity.hexagon_index, route)

                direct_distance = activity.distance_from_dc
                excess_distance = max(0.0, direct_distance - thresholds.distance_threshold)
                incentive = self.incentive(excess_distance, thresholds)
                base_earnings = shipments * thresholds.base_shipment_price
                adjusted_incentive = self.row_policy.adjust(incentive, rto_percentage)
                total_pre_rto = base_earnings + incentive
                total_post_rto = base_earnings + adjusted_incentive

                rows.append(
                    self.row_type(
                        hexagon_id=str(activity.hexagon_index),
                        dc_code=route.dc_code,
                        fe_number=route.fe_number,
                        date=route.date,
                        total_shipments=shipments,
                        direct_distance=direct_distance,
                        excess_distance=excess_distance,
                        base_earnings=base_earnings,
                        total_earnings=total_post_rto,
                        earnings_per_shipment=per_shipment(total_post_rto, shipments),
                        earnings_per_shipment_pre_rto=per_shipment(total_pre_rto, shipments),
                        earnings_per_shipment_post_rto=per_shipment(total_post_rto, shipments),
                        rto_percentage=rto_percentage,
                        **{self.incentive_field: incentive},
                    )
                )
                entries.append(
                    SummaryEntry(
                        dc_code=route.dc_code,
                        fe_number=route.fe_number,
                        shipments=shipments,
                        base_earnings=base_earnings,
                        incentive=incentive,
                        rto_percentage=rto_percentage,
                    )
                )
        return self._result(rows, entries)
