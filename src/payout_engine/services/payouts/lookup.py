"""Composite-key index over the hexagon customer mapping."""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from ...models.domain import HexagonCustomerMapping, Route

MappingKey = Tuple[str, str, str, str]


def mapping_key(hexagon_index: object, route: Route) -> MappingKey:
    return (str(hexagon_index), route.dc_code, route.fe_number, route.date)


class HexagonMappingIndex:
    """Lookup of shipments and RTO by (hexagon, dc, fe, date).

    The same hexagon can appear on several routes and dates with different
    counts, so the hexagon alone is never used as the key. Missing keys read
    as zero shipments and zero RTO.
    """

    def __init__(self, rows: Iterable[HexagonCustomerMapping]) -> None:
        self._first: Dict[MappingKey, HexagonCustomerMapping] = {}
        self._totals: Dict[MappingKey, int] = {}
        for row in rows:
            key = (str(row.hexagon_index), row.dc_code, row.fe_number, row.ofd_date)
            self._first.setdefault(key, row)
            self._totals[key] = self._totals.get(key, 0) + (row.delivery_count or 0)

    def first(self, hexagon_index: object, route: Route) -> Optional[HexagonCustomerMapping]:
        return self._first.get(mapping_key(hexagon_index, route))

    def total_shipments(self, hexagon_index: object, route: Route) -> int:
        """Sum of delivery counts over every mapping row sharing the key."""
        return self._totals.get(mapping_key(hexagon_index, route), 0)

    def first_shipments(self, hexagon_index: object, route: Route) -> int:
        row = self.first(hexagon_index, route)
        return (row.delivery_count or 0) if row else 0

    def rto_percentage(self, hexagon_index: object, route: Route) -> float:
        row = self.first(hexagon_index, route)
        return (row.rto_percentage or 0.0) if row else 0.0
