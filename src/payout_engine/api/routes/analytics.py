"""Route analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.payouts import DistanceMetricsModel, DistanceMetricsRequest
from ...services.analytics import calculate_averages

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/distance-metrics", response_model=DistanceMetricsModel, status_code=status.HTTP_200_OK)
def distance_metrics(payload: DistanceMetricsRequest) -> DistanceMetricsModel:
    metrics = calculate_averages([route.to_domain() for route in payload.routes])
    return DistanceMetricsModel.model_validate(metrics)
