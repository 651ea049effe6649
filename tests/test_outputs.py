import csv
import io

from openpyxl import load_workbook

from payout_engine.models.domain import Activity, HexagonCustomerMapping, LocationData, Route
from payout_engine.schemas.thresholds import DirectDistanceThresholds
from payout_engine.services.outputs import payout_result_to_csv, payout_result_to_xlsx, summary_rows
from payout_engine.services.payouts.direct import DirectDistancePayoutStrategy
from payout_engine.services.payouts.models import PayoutResult


def _direct_result() -> PayoutResult:
    route = Route(
        dc_code="DC1",
        fe_number="FE1",
        city="Riyadh",
        date="2024-05-01",
        total_distance=0.0,
        activities=[
            Activity(sequence=0, type="depot", lat=0.0, lng=0.0),
            Activity(sequence=1, type="delivery", lat=0.0, lng=0.0, cluster_id=1, hexagon_index="H1", distance_from_prev=10, distance_from_dc=6000),
            Activity(sequence=2, type="delivery", lat=0.0, lng=0.0, cluster_id=1, hexagon_index="H2", distance_from_prev=10, distance_from_dc=3000),
        ],
    )
    mapping = [
        HexagonCustomerMapping("Riyadh", "DC1", "FE1", "2024-05-01", hexagon, 0.0, 0.0, 2, 0.0)
        for hexagon in ("H1", "H2")
    ]
    return DirectDistancePayoutStrategy().calculate([route], LocationData(hexagon_customer_mapping=mapping), DirectDistanceThresholds())


def test_csv_has_one_line_per_calculation():
    text = payout_result_to_csv(_direct_result())

    rows = list(csv.DictReader(io.StringIO(text)))
    assert [row["hexagon_id"] for row in rows] == ["H1", "H2"]
    assert float(rows[0]["distance_incentive"]) == 500


def test_csv_of_empty_result_is_empty():
    assert payout_result_to_csv(PayoutResult(strategy="flat", summaries=[], calculations=[])) == ""


def test_xlsx_contains_calculation_and_summary_sheets():
    workbook = load_workbook(io.BytesIO(payout_result_to_xlsx(_direct_result())))

    assert workbook.sheetnames == ["Calculations", "Summary"]
    calculations = workbook["Calculations"]
    assert calculations["A1"].value == "hexagon_id"
    assert calculations.max_row == 3
    summary = workbook["Summary"]
    assert summary["A1"].value == "dc_code"
    assert [cell.value for cell in summary["B"]][1:] == ["ALL", "FE1"]


def test_summary_rows_flatten_pilots():
    rows = summary_rows(_direct_result().summaries)

    assert rows[0]["fe_number"] == "ALL"
    assert rows[0]["shipments"] == 4
    assert rows[1]["fe_number"] == "FE1"
    assert rows[1]["incentives_pre_rto"] == 500
