"""Payout export services."""

from .formatter import payout_result_to_csv, payout_result_to_xlsx, summary_rows

__all__ = ["payout_result_to_csv", "payout_result_to_xlsx", "summary_rows"]
