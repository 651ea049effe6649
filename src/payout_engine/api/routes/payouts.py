"""Payout calculation, comparison and export endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, HTTPException, Path, Query, Response, status
from pydantic import ValidationError

from ...config import settings
from ...schemas.payouts import (
    CompareRequest,
    ComparisonResponse,
    PayoutRequest,
    PayoutResponse,
    StrategyMetricsModel,
    ThresholdsResponse,
)
from ...services.outputs import payout_result_to_csv, payout_result_to_xlsx
from ...services.payouts import calculate_dataset_payouts, calculate_payouts, compare_payouts
from ...services.payouts.models import PayoutResult

router = APIRouter(prefix="/payouts", tags=["payouts"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _run_strategy(strategy: str, payload: PayoutRequest) -> PayoutResult:
    try:
        return calculate_payouts(
            strategy,
            payload.domain_routes(),
            payload.location_data.to_domain(),
            payload.thresholds,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/thresholds", response_model=ThresholdsResponse, status_code=status.HTTP_200_OK)
def get_default_thresholds() -> ThresholdsResponse:
    return ThresholdsResponse(
        cluster=settings.cluster_thresholds,
        direct=settings.direct_thresholds,
        flat=settings.flat_thresholds,
        max_rto_percentage=settings.max_rto_percentage,
    )


@router.post("/compare", response_model=ComparisonResponse, status_code=status.HTTP_200_OK)
def compare(payload: CompareRequest) -> ComparisonResponse:
    """Run all three strategies over the same routes and compare them."""

    cluster, direct, flat, report = compare_payouts(
        payload.domain_routes(),
        payload.location_data.to_domain(),
        cluster_thresholds=payload.cluster_thresholds.model_dump(exclude_unset=True) if payload.cluster_thresholds else None,
        direct_thresholds=payload.direct_thresholds.model_dump(exclude_unset=True) if payload.direct_thresholds else None,
        flat_thresholds=payload.flat_thresholds.model_dump(exclude_unset=True) if payload.flat_thresholds else None,
    )
    return ComparisonResponse(
        cluster=PayoutResponse.from_result(cluster),
        direct=PayoutResponse.from_result(direct),
        flat=PayoutResponse.from_result(flat),
        metrics=[StrategyMetricsModel.model_validate(item) for item in report.metrics],
        dc_comparison=report.dc_comparison,
        fe_comparison=report.fe_comparison,
    )


@router.post("/{strategy}", response_model=PayoutResponse, status_code=status.HTTP_200_OK)
def calculate(
    payload: PayoutRequest,
    strategy: str = Path(..., description="Payout strategy: cluster, direct or flat"),
) -> PayoutResponse:
    return PayoutResponse.from_result(_run_strategy(strategy, payload))


@router.get("/{strategy}/dataset", response_model=PayoutResponse, status_code=status.HTTP_200_OK)
def calculate_for_dataset(
    strategy: str = Path(..., description="Payout strategy: cluster, direct or flat"),
) -> PayoutResponse:
    """Run a strategy over the dataset files configured on the server."""

    try:
        result = calculate_dataset_payouts(strategy)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PayoutResponse.from_result(result)


@router.post("/{strategy}/export", status_code=status.HTTP_200_OK)
def export(
    payload: PayoutRequest,
    strategy: str = Path(..., description="Payout strategy: cluster, direct or flat"),
    file_format: Literal["csv", "xlsx"] = Query(default="csv", description="Export file format"),
) -> Response:
    result = _run_strategy(strategy, payload)
    file_name = f"{strategy}-payouts.{file_format}"
    if file_format == "xlsx":
        content: bytes | str = payout_result_to_xlsx(result)
        media_type = XLSX_MEDIA_TYPE
    else:
        content = payout_result_to_csv(result)
        media_type = "text/csv"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
