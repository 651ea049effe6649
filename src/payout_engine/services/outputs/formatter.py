"""Utilities to serialize payout results into CSV/XLSX artifacts."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict, fields
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.styles import Font

from ..payouts.models import PayoutResult, PayoutSummary

SUMMARY_COLUMNS = [
    "dc_code",
    "fe_number",
    "shipments",
    "incentives_pre_rto",
    "incentives_post_rto",
    "base_earnings",
    "total_earnings_pre_rto",
    "total_earnings_post_rto",
    "earnings_per_shipment_pre_rto",
    "earnings_per_shipment_post_rto",
]


def calculation_columns(result: PayoutResult) -> List[str]:
    if not result.calculations:
        return []
    return [item.name for item in fields(result.calculations[0])]


def summary_rows(summaries: Iterable[PayoutSummary]) -> List[dict]:
    """Flatten DC summaries into one row per DC total plus one per pilot."""

    rows: List[dict] = []
    for summary in summaries:
        rows.append(
            {
                "dc_code": summary.dc_code,
                "fe_number": "ALL",
                "shipments": summary.total_shipments,
                "incentives_pre_rto": summary.total_incentives_pre_rto,
                "incentives_post_rto": summary.total_incentives_post_rto,
                "base_earnings": summary.total_base_earnings,
                "total_earnings_pre_rto": summary.total_earnings_pre_rto,
                "total_earnings_post_rto": summary.total_earnings_post_rto,
                "earnings_per_shipment_pre_rto": summary.avg_earnings_per_shipment_pre_rto,
                "earnings_per_shipment_post_rto": summary.avg_earnings_per_shipment_post_rto,
            }
        )
        for fe_number, pilot in summary.pilots.items():
            rows.append({"dc_code": summary.dc_code, "fe_number": fe_number, **asdict(pilot)})
    return rows


def payout_result_to_csv(result: PayoutResult) -> str:
    buffer = io.StringIO()
    columns = calculation_columns(result)
    if not columns:
        return ""
    writer = csv.DictWriter(buffer, fieldnames=columns)
    writer.writeheader()
    for row in result.calculations:
        writer.writerow(asdict(row))
    return buffer.getvalue()


def payout_result_to_xlsx(result: PayoutResult) -> bytes:
    """Workbook with a "Calculations" sheet and a "Summary" sheet."""

    workbook = Workbook()
    calculations_sheet = workbook.active
    calculations_sheet.title = "Calculations"
    columns = calculation_columns(result)
    _write_sheet(calculations_sheet, columns, (asdict(row) for row in result.calculations))

    summary_sheet = workbook.create_sheet("Summary")
    _write_sheet(summary_sheet, SUMMARY_COLUMNS, summary_rows(result.summaries))

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _write_sheet(sheet, columns: List[str], rows: Iterable[dict]) -> None:
    if not columns:
        return
    sheet.append(columns)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        sheet.append([row.get(column) for column in columns])
    sheet.freeze_panes = "A2"
