"""Roll per-hexagon payout rows up into DC and pilot summaries."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .models import PayoutSummary, PilotSummary, SummaryEntry
from .rto import RtoPolicy, per_shipment


def summarize(entries: Iterable[SummaryEntry], policy: RtoPolicy) -> List[PayoutSummary]:
    """Aggregate entries by DC and FE, grossing incentives up with ``policy``."""

    summaries: Dict[str, PayoutSummary] = {}
    for entry in entries:
        incentive_post_rto = policy.adjust(entry.incentive, entry.rto_percentage)

        dc_summary = summaries.setdefault(entry.dc_code, PayoutSummary(dc_code=entry.dc_code))
        dc_summary.total_shipments += entry.shipments
        dc_summary.total_incentives_pre_rto += entry.incentive
        dc_summary.total_incentives_post_rto += incentive_post_rto
        dc_summary.total_base_earnings += entry.base_earnings
        dc_summary.total_earnings_pre_rto += entry.base_earnings + entry.incentive
        dc_summary.total_earnings_post_rto += entry.base_earnings + incentive_post_rto

        pilot = dc_summary.pilots.setdefault(entry.fe_number, PilotSummary())
        pilot.shipments += entry.shipments
        pilot.incentives_pre_rto += entry.incentive
        pilot.incentives_post_rto += incentive_post_rto
        pilot.base_earnings += entry.base_earnings
        pilot.total_earnings_pre_rto += entry.base_earnings + entry.incentive
        pilot.total_earnings_post_rto += entry.base_earnings + incentive_post_rto
        pilot.earnings_per_shipment_pre_rto = per_shipment(pilot.total_earnings_pre_rto, pilot.shipments)
        pilot.earnings_per_shipment_post_rto = per_shipment(pilot.total_earnings_post_rto, pilot.shipments)

    for dc_summary in summaries.values():
        dc_summary.avg_earnings_per_shipment_pre_rto = per_shipment(
            dc_summary.total_earnings_pre_rto, dc_summary.total_shipments
        )
        dc_summary.avg_earnings_per_shipment_post_rto = per_shipment(
            dc_summary.total_earnings_post_rto, dc_summary.total_shipments
        )
    return list(summaries.values())
