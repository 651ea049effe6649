from dataclasses import asdict

import pytest

from payout_engine.models.domain import Activity, HexagonCustomerMapping, LocationData, Route
from payout_engine.schemas.thresholds import DirectDistanceThresholds, FlatDistanceThresholds
from payout_engine.services.payouts.aggregation import summarize
from payout_engine.services.payouts.direct import DirectDistancePayoutStrategy
from payout_engine.services.payouts.flat import FlatDistancePayoutStrategy
from payout_engine.services.payouts.models import SummaryEntry
from payout_engine.services.payouts.rto import CappedRtoPolicy, UncappedRtoPolicy, per_shipment


def _route(*deliveries: tuple[str, float], fe_number: str = "FE1", dc_code: str = "DC1") -> Route:
    activities = [Activity(sequence=0, type="depot", lat=0.0, lng=0.0)]
    for position, (hexagon, distance_from_dc) in enumerate(deliveries, start=1):
        activities.append(
            Activity(
                sequence=position,
                type="delivery",
                lat=0.0,
                lng=0.0,
                cluster_id=1,
                hexagon_index=hexagon,
                distance_from_prev=100.0,
                distance_from_dc=distance_from_dc,
            )
        )
    return Route(dc_code=dc_code, fe_number=fe_number, city="Jeddah", date="2024-02-01", total_distance=0.0, activities=activities)


def _location(*rows: tuple[str, int, float], fe_number: str = "FE1", dc_code: str = "DC1") -> LocationData:
    return LocationData(
        hexagon_customer_mapping=[
            HexagonCustomerMapping(
                city="Jeddah",
                dc_code=dc_code,
                fe_number=fe_number,
                ofd_date="2024-02-01",
                hexagon_index=hexagon,
                hexagon_lat=0.0,
                hexagon_lng=0.0,
                delivery_count=shipments,
                rto_percentage=rto,
            )
            for hexagon, shipments, rto in rows
        ]
    )


def test_capped_policy_grosses_up_incentive():
    assert CappedRtoPolicy(cap=30).adjust(500, 20) == pytest.approx(625)
    assert CappedRtoPolicy(cap=30).adjust(100, 50) == pytest.approx(100 / 0.7)


def test_uncapped_policy_returns_incentive_when_rto_is_total():
    assert UncappedRtoPolicy().adjust(100, 40) == pytest.approx(100 / 0.6)
    assert UncappedRtoPolicy().adjust(100, 100) == 100
    assert UncappedRtoPolicy().adjust(100, 0) == 100


def test_per_shipment_guards_zero_shipments():
    assert per_shipment(1125, 10) == pytest.approx(112.5)
    assert per_shipment(50, 0) == 0


def test_direct_incentive_scales_with_excess_distance():
    result = DirectDistancePayoutStrategy().calculate(
        [_route(("H1", 6000), ("H2", 4000))],
        _location(("H1", 4, 0.0), ("H2", 6, 0.0)),
        DirectDistanceThresholds(),
    )

    rows = {row.hexagon_id: row for row in result.calculations}
    assert rows["H1"].excess_distance == 1000
    assert rows["H1"].distance_incentive == pytest.approx(500)
    assert rows["H1"].total_earnings == pytest.approx(700)
    assert rows["H2"].excess_distance == 0
    assert rows["H2"].distance_incentive == 0
    assert rows["H2"].total_earnings == 300


def test_direct_rows_use_uncapped_rto():
    result = DirectDistancePayoutStrategy().calculate(
        [_route(("H1", 6000))],
        _location(("H1", 4, 40.0)),
        DirectDistanceThresholds(),
    )

    row = result.calculations[0]
    assert row.total_earnings == pytest.approx(200 + 500 / 0.6)
    assert row.earnings_per_shipment_pre_rto == pytest.approx(700 / 4)


def test_flat_incentive_is_a_binary_trigger():
    result = FlatDistancePayoutStrategy().calculate(
        [_route(("H1", 5001), ("H2", 4999))],
        _location(("H1", 1, 0.0), ("H2", 1, 0.0)),
        FlatDistanceThresholds(),
    )

    rows = {row.hexagon_id: row for row in result.calculations}
    assert rows["H1"].flat_incentive == 100
    assert rows["H2"].flat_incentive == 0


def test_flat_rows_cap_rto_but_summary_does_not():
    result = FlatDistancePayoutStrategy().calculate(
        [_route(("H1", 6000))],
        _location(("H1", 4, 40.0)),
        FlatDistanceThresholds(),
    )

    assert result.calculations[0].total_earnings == pytest.approx(200 + 100 / 0.7)
    assert result.summaries[0].total_incentives_post_rto == pytest.approx(100 / 0.6)


def test_flat_rto_cap_follows_strategy_argument():
    result = FlatDistancePayoutStrategy(rto_cap=10).calculate(
        [_route(("H1", 6000))],
        _location(("H1", 4, 40.0)),
        FlatDistanceThresholds(),
    )

    assert result.calculations[0].total_earnings == pytest.approx(200 + 100 / 0.9)


def test_direct_incentive_never_grows_with_threshold():
    routes = [_route(("H1", 6000), ("H2", 8000))]
    location = _location(("H1", 2, 10.0), ("H2", 3, 0.0))
    strategy = DirectDistancePayoutStrategy()

    totals = []
    for threshold in (1000, 5000, 7000, 9000):
        result = strategy.calculate(routes, location, DirectDistanceThresholds(distance_threshold=threshold))
        totals.append(sum(row.distance_incentive for row in result.calculations))

    assert totals == sorted(totals, reverse=True)
    assert totals[-1] == 0


def test_activities_without_dc_distance_are_skipped():
    route = _route(("H1", 6000), ("H2", 0))

    result = DirectDistancePayoutStrategy().calculate([route], _location(("H1", 1, 0.0)), DirectDistanceThresholds())

    assert [row.hexagon_id for row in result.calculations] == ["H1"]


def test_missing_mapping_row_reads_as_zero_shipments():
    result = FlatDistancePayoutStrategy().calculate([_route(("H9", 7000))], _location(), FlatDistanceThresholds())

    row = result.calculations[0]
    assert row.total_shipments == 0
    assert row.base_earnings == 0
    assert row.earnings_per_shipment == 0
    assert row.total_earnings >= row.base_earnings


def test_same_hexagon_is_paid_once_per_fe_and_date():
    routes = [_route(("H1", 6000)), _route(("H1", 6000))]

    result = DirectDistancePayoutStrategy().calculate(routes, _location(("H1", 2, 0.0)), DirectDistanceThresholds())

    assert len(result.calculations) == 1
    assert result.summaries[0].total_shipments == 2


def test_summaries_conserve_entry_totals():
    entries = [
        SummaryEntry(dc_code="DC1", fe_number="FE1", shipments=4, base_earnings=200, incentive=100, rto_percentage=20),
        SummaryEntry(dc_code="DC1", fe_number="FE2", shipments=6, base_earnings=300, incentive=0, rto_percentage=0),
        SummaryEntry(dc_code="DC2", fe_number="FE3", shipments=0, base_earnings=0, incentive=50, rto_percentage=0),
    ]

    summaries = {summary.dc_code: summary for summary in summarize(entries, UncappedRtoPolicy())}

    dc1 = summaries["DC1"]
    assert dc1.total_shipments == 10
    assert dc1.total_base_earnings == 500
    assert dc1.total_incentives_pre_rto == 100
    assert dc1.total_incentives_post_rto == pytest.approx(125)
    assert dc1.total_earnings_post_rto == pytest.approx(625)
    assert dc1.avg_earnings_per_shipment_post_rto == pytest.approx(62.5)
    assert set(dc1.pilots) == {"FE1", "FE2"}
    assert dc1.pilots["FE1"].earnings_per_shipment_pre_rto == pytest.approx(75)
    assert sum(pilot.shipments for pilot in dc1.pilots.values()) == dc1.total_shipments
    assert summaries["DC2"].avg_earnings_per_shipment_pre_rto == 0


def test_flat_pays_same_hexagon_once_per_fe_and_date():
    routes = [_route(("H1", 6000)), _route(("H1", 6000))]

    result = FlatDistancePayoutStrategy().calculate(routes, _location(("H1", 3, 0.0)), FlatDistanceThresholds())

    assert len(result.calculations) == 1
    assert result.summaries[0].total_incentives_pre_rto == 100


@pytest.mark.parametrize(
    "strategy, thresholds",
    [
        (DirectDistancePayoutStrategy(), DirectDistanceThresholds()),
        (FlatDistancePayoutStrategy(), FlatDistanceThresholds()),
    ],
)
def test_distance_payouts_are_idempotent(strategy, thresholds):
    routes = [_route(("H1", 6000), ("H2", 8000)), _route(("H1", 7000), fe_number="FE2")]
    location = _location(("H1", 2, 35.0), ("H2", 5, 10.0))

    first = strategy.calculate(routes, location, thresholds)
    second = strategy.calculate(routes, location, thresholds)

    assert [asdict(row) for row in first.calculations] == [asdict(row) for row in second.calculations]
    assert [asdict(summary) for summary in first.summaries] == [asdict(summary) for summary in second.summaries]
