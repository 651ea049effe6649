"""Cross-strategy comparison of payout results."""

from __future__ import annotations

from typing import Dict, List, Optional

from .models import ComparisonReport, PayoutResult, PayoutSummary, PilotSummary, StrategyMetrics

STRATEGY_LABELS = {
    "cluster": "Cluster-based",
    "direct": "Direct Distance",
    "flat": "Flat Distance",
}


def strategy_metrics(result: PayoutResult) -> StrategyMetrics:
    """Share of orders that earned any incentive and the average incentive per such order."""

    total_orders = 0
    incentivized_orders = 0
    incentives_pre_rto = 0.0
    incentives_post_rto = 0.0
    for entry in result.summary_entries:
        total_orders += entry.shipments
        if entry.incentive > 0:
            incentivized_orders += entry.shipments
            incentives_pre_rto += entry.incentive
            incentives_post_rto += result.rto_policy.adjust(entry.incentive, entry.rto_percentage)

    return StrategyMetrics(
        name=STRATEGY_LABELS.get(result.strategy, result.strategy),
        total_orders=total_orders,
        incentivized_orders=incentivized_orders,
        percentage_incentivized=(incentivized_orders / total_orders * 100) if total_orders else 0.0,
        avg_incentive_per_order_pre_rto=(incentives_pre_rto / incentivized_orders) if incentivized_orders else 0.0,
        avg_incentive_per_order_post_rto=(incentives_post_rto / incentivized_orders) if incentivized_orders else 0.0,
    )


def _by_dc(summaries: List[PayoutSummary]) -> Dict[str, PayoutSummary]:
    return {summary.dc_code: summary for summary in summaries}


def _value(item: Optional[object], attribute: str) -> float:
    return round(getattr(item, attribute), 2) if item is not None else 0.0


def _dc_row(dc_code: str, sources: Dict[str, Optional[PayoutSummary]]) -> dict:
    row: dict = {"dcCode": dc_code}
    for stage, suffix in (("pre_rto", "PreRto"), ("post_rto", "PostRto")):
        for prefix, summary in sources.items():
            row[f"{prefix}Incentives{suffix}"] = _value(summary, f"total_incentives_{stage}")
            row[f"{prefix}TotalEarnings{suffix}"] = _value(summary, f"total_earnings_{stage}")
            row[f"{prefix}AvgEarnings{suffix}"] = _value(summary, f"avg_earnings_per_shipment_{stage}")
    return row


def _fe_row(dc_code: str, fe_number: str, sources: Dict[str, Optional[PilotSummary]]) -> dict:
    row: dict = {"feNumber": fe_number, "dcCode": dc_code}
    for stage, suffix in (("pre_rto", "PreRto"), ("post_rto", "PostRto")):
        for prefix, pilot in sources.items():
            row[f"{prefix}Incentives{suffix}"] = _value(pilot, f"incentives_{stage}")
            row[f"{prefix}TotalEarnings{suffix}"] = _value(pilot, f"total_earnings_{stage}")
    return row


def compare_strategies(cluster: PayoutResult, direct: PayoutResult, flat: PayoutResult) -> ComparisonReport:
    """Build metrics and side-by-side DC/FE tables.

    The cluster strategy's DCs and pilots drive the tables; direct and flat
    values are looked up and read as 0 when absent.
    """

    direct_by_dc = _by_dc(direct.summaries)
    flat_by_dc = _by_dc(flat.summaries)

    dc_comparison: List[dict] = []
    fe_comparison: List[dict] = []
    for cluster_dc in cluster.summaries:
        direct_dc = direct_by_dc.get(cluster_dc.dc_code)
        flat_dc = flat_by_dc.get(cluster_dc.dc_code)
        dc_comparison.append(
            _dc_row(cluster_dc.dc_code, {"cluster": cluster_dc, "direct": direct_dc, "flat": flat_dc})
        )
        for fe_number, cluster_pilot in cluster_dc.pilots.items():
            fe_comparison.append(
                _fe_row(
                    cluster_dc.dc_code,
                    fe_number,
                    {
                        "cluster": cluster_pilot,
                        "direct": direct_dc.pilots.get(fe_number) if direct_dc else None,
                        "flat": flat_dc.pilots.get(fe_number) if flat_dc else None,
                    },
                )
            )

    return ComparisonReport(
        metrics=[strategy_metrics(cluster), strategy_metrics(direct), strategy_metrics(flat)],
        dc_comparison=dc_comparison,
        fe_comparison=fe_comparison,
    )
