import json
from pathlib import Path

import pytest

from payout_engine.config import settings
from payout_engine.data import route_repository
from payout_engine.data.route_repository import (
    check_cluster_order,
    clear_dataset_cache,
    load_location_data,
    load_routes,
    parse_route,
)

ROUTE_RECORD = {
    "dc_code": "DC1",
    "fe_number": "FE7",
    "city": "Riyadh",
    "ofd_date": "2024-04-02",
    "total_distance": "12,500",
    "activities": [
        {"sequence": 0, "type": "depot", "lat": 24.7, "lng": 46.6},
        {
            "sequence": 1,
            "type": "Delivery",
            "lat": "24.71",
            "lng": "46.62",
            "cluster_id": "1",
            "hexagon_index": 613281945712345087,
            "distance_from_prev": "6000",
            "distance_from_dc": 6000,
        },
        {"sequence": 2, "type": "depot", "distance_from_prev": ""},
    ],
}


@pytest.fixture(autouse=True)
def clear_dataset_caches():
    clear_dataset_cache()
    yield
    clear_dataset_cache()


@pytest.fixture
def dataset_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "routes.json").write_text(json.dumps([ROUTE_RECORD]), encoding="utf-8")
    (tmp_path / "dc-locations.json").write_text(
        json.dumps([{"dc_code": "DC1", "city": "Riyadh", "lat": 24.7, "lng": 46.6}]), encoding="utf-8"
    )
    (tmp_path / "hexagon-customer-mapping.json").write_text(
        json.dumps(
            [
                {
                    "city": "Riyadh",
                    "dc_code": "DC1",
                    "fe_number": "FE7",
                    "ofd_date": "2024-04-02",
                    "hexagon_index": "613281945712345087",
                    "delivery_count": "12",
                    "rto_percentage": 7.5,
                }
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(settings, "routes_file", tmp_path / "routes.json")
    monkeypatch.setattr(settings, "dc_locations_file", tmp_path / "dc-locations.json")
    monkeypatch.setattr(settings, "hexagon_mapping_file", tmp_path / "hexagon-customer-mapping.json")
    monkeypatch.setattr(settings, "hexagon_centroids_file", tmp_path / "hexagon-centroids.json")
    return tmp_path


def test_parse_route_coerces_text_values():
    route = parse_route(ROUTE_RECORD)

    assert route.date == "2024-04-02"
    assert route.total_distance == 12500
    delivery = route.activities[1]
    assert delivery.is_delivery
    assert delivery.hexagon_index == "613281945712345087"
    assert delivery.cluster_id == 1
    assert delivery.distance_from_prev == 6000
    assert route.activities[2].is_return_to_depot
    assert route.activities[2].distance_from_prev is None


def test_check_cluster_order_flags_descending_visits(caplog: pytest.LogCaptureFixture):
    record = {
        **ROUTE_RECORD,
        "activities": [
            {"sequence": 1, "type": "delivery", "cluster_id": 2, "hexagon_index": "A"},
            {"sequence": 2, "type": "delivery", "cluster_id": 1, "hexagon_index": "B"},
        ],
    }

    with caplog.at_level("WARNING"):
        route = parse_route(record)

    assert check_cluster_order(route) is False
    assert "out of id order" in caplog.text
    assert check_cluster_order(parse_route(ROUTE_RECORD)) is True


def test_load_routes_reads_configured_file(dataset_dir: Path):
    routes = load_routes()

    assert len(routes) == 1
    assert routes[0].fe_number == "FE7"
    assert load_routes() is routes


def test_load_routes_rejects_non_list_payload(dataset_dir: Path):
    (dataset_dir / "routes.json").write_text(json.dumps({"routes": []}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_routes()


def test_load_routes_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "routes_file", tmp_path / "absent.json")

    with pytest.raises(FileNotFoundError):
        load_routes()


def test_load_location_data_without_centroids(dataset_dir: Path):
    location = load_location_data()

    assert [dc.dc_code for dc in location.dc_locations] == ["DC1"]
    assert location.hexagon_centroids == []
    mapping = location.hexagon_customer_mapping[0]
    assert mapping.delivery_count == 12
    assert mapping.rto_percentage == 7.5


def test_clear_dataset_cache_rereads_files(dataset_dir: Path):
    first = load_routes()
    (dataset_dir / "routes.json").write_text(json.dumps([ROUTE_RECORD, ROUTE_RECORD]), encoding="utf-8")

    assert load_routes() is first
    route_repository.clear_dataset_cache()
    assert len(load_routes()) == 2
