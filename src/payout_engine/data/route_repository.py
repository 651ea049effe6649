"""Data access helpers for loading normalized route and location datasets."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..config import settings
from ..models.domain import (
    Activity,
    DcLocation,
    HexagonCentroid,
    HexagonCustomerMapping,
    LocationData,
    Route,
)


def _coerce_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or value == "":
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return default


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    return int(number) if number is not None else None


def _coerce_hexagon(value: Any) -> Optional[str]:
    # Hexagon ids are 18 digit integers upstream; keep them as strings to avoid precision loss.
    if value is None or value == "":
        return None
    return str(value).strip()


def parse_activity(record: Mapping[str, Any]) -> Activity:
    return Activity(
        sequence=_coerce_int(record.get("sequence")) or 0,
        type=str(record.get("type") or "").strip().lower(),
        lat=_coerce_float(record.get("lat"), 0.0),
        lng=_coerce_float(record.get("lng"), 0.0),
        cluster_id=_coerce_int(record.get("cluster_id")),
        hexagon_index=_coerce_hexagon(record.get("hexagon_index")),
        distance_from_prev=_coerce_float(record.get("distance_from_prev")),
        distance_from_dc=_coerce_float(record.get("distance_from_dc")),
    )


def parse_route(record: Mapping[str, Any]) -> Route:
    activities = [parse_activity(item) for item in record.get("activities") or []]
    route = Route(
        dc_code=str(record.get("dc_code") or "").strip(),
        fe_number=str(record.get("fe_number") or "").strip(),
        city=str(record.get("city") or "").strip(),
        date=str(record.get("date") or record.get("ofd_date") or "").strip(),
        total_distance=_coerce_float(record.get("total_distance"), 0.0),
        activities=activities,
    )
    check_cluster_order(route)
    return route


def parse_routes(records: Iterable[Mapping[str, Any]]) -> tuple[Route, ...]:
    return tuple(parse_route(record) for record in records)


def parse_location_data(payload: Mapping[str, Any]) -> LocationData:
    """Build location reference data from its JSON representation."""

    dc_locations = [
        DcLocation(
            dc_code=str(row.get("dc_code") or "").strip(),
            city=str(row.get("city") or "").strip(),
            lat=_coerce_float(row.get("lat"), 0.0),
            lng=_coerce_float(row.get("lng"), 0.0),
        )
        for row in payload.get("dcLocations") or payload.get("dc_locations") or []
    ]
    centroids = [
        HexagonCentroid(
            hexagon_id=_coerce_hexagon(row.get("hexagon_id")) or "",
            lat=_coerce_float(row.get("lat"), 0.0),
            lng=_coerce_float(row.get("lng"), 0.0),
            cluster_id=_coerce_int(row.get("cluster_id")),
        )
        for row in payload.get("hexagonCentroids") or payload.get("hexagon_centroids") or []
    ]
    mapping_rows = payload.get("hexagonCustomerMapping") or payload.get("hexagon_customer_mapping") or []
    return LocationData(
        dc_locations=dc_locations,
        hexagon_centroids=centroids,
        hexagon_customer_mapping=[parse_mapping_row(row) for row in mapping_rows],
    )


def parse_mapping_row(row: Mapping[str, Any]) -> HexagonCustomerMapping:
    return HexagonCustomerMapping(
        city=str(row.get("city") or "").strip(),
        dc_code=str(row.get("dc_code") or "").strip(),
        fe_number=str(row.get("fe_number") or "").strip(),
        ofd_date=str(row.get("ofd_date") or "").strip(),
        hexagon_index=_coerce_hexagon(row.get("hexagon_index")) or "",
        hexagon_lat=_coerce_float(row.get("hexagon_lat"), 0.0),
        hexagon_lng=_coerce_float(row.get("hexagon_lng"), 0.0),
        delivery_count=_coerce_int(row.get("delivery_count")) or 0,
        rto_percentage=_coerce_float(row.get("rto_percentage"), 0.0),
    )


def check_cluster_order(route: Route) -> bool:
    """Return True when cluster ids are first visited in ascending order.

    The cluster calculator treats ascending cluster ids as the visiting order,
    so a route that breaks this is logged here, where the data enters.
    """

    seen: list[int] = []
    for activity in route.sorted_activities():
        if not activity.is_delivery or not activity.cluster_id:
            continue
        if activity.cluster_id not in seen:
            seen.append(activity.cluster_id)
    if seen != sorted(seen):
        logging.warning(
            f"Route {route.dc_code}/{route.fe_number}/{route.date} visits clusters out of id order: {seen}"
        )
        return False
    return True


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    with path.open(mode="r", encoding="utf-8") as handle:
        return json.load(handle)


@functools.lru_cache(maxsize=1)
def load_routes(source: Optional[Path] = None) -> tuple[Route, ...]:
    """Load routes from the configured JSON file."""

    path = source or settings.routes_file
    records = _read_json(path)
    if not isinstance(records, list):
        raise ValueError(f"Routes file '{path}' must contain a JSON array.")
    routes = parse_routes(records)
    logging.info(f"Loaded {len(routes)} routes from {path}")
    return routes


@functools.lru_cache(maxsize=1)
def load_location_data() -> LocationData:
    """Load DC, centroid and hexagon mapping files into one LocationData."""

    payload = {
        "dcLocations": _read_json(settings.dc_locations_file),
        "hexagonCustomerMapping": _read_json(settings.hexagon_mapping_file),
    }
    # Centroids are only informational; a missing file is not an error.
    if settings.hexagon_centroids_file.exists():
        payload["hexagonCentroids"] = _read_json(settings.hexagon_centroids_file)
    else:
        logging.debug(f"Hexagon centroid file not found: {settings.hexagon_centroids_file}")
    location_data = parse_location_data(payload)
    logging.info(
        f"Loaded {len(location_data.dc_locations)} DCs and "
        f"{len(location_data.hexagon_customer_mapping)} hexagon mapping rows"
    )
    return location_data


def clear_dataset_cache() -> None:
    """Drop cached datasets so the next call re-reads the files."""
    load_routes.cache_clear()
    load_location_data.cache_clear()
