"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/datasets", status_code=status.HTTP_200_OK)
def health_datasets() -> dict:
    """Report which configured dataset files are present on disk."""
    files = {
        "routes": settings.routes_file,
        "dcLocations": settings.dc_locations_file,
        "hexagonCentroids": settings.hexagon_centroids_file,
        "hexagonCustomerMapping": settings.hexagon_mapping_file,
    }
    return {name: {"path": str(path), "exists": path.exists()} for name, path in files.items()}
