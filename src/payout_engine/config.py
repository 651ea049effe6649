"""Application configuration and settings management."""

from pathlib import Path
from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas.thresholds import ClusterThresholds, DirectDistanceThresholds, FlatDistanceThresholds


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PAYOUT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    app_name: str = "FE Payout Engine API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    data_root: Path = Field(default=Path("data"), description="Root directory for normalized dataset files.")
    routes_file: Path = Field(
        default=Path("data/routes.json"),
        description="Routes with their sequenced activities.",
    )
    dc_locations_file: Path = Field(
        default=Path("data/dc-locations.json"),
        description="Distribution center coordinates.",
    )
    hexagon_centroids_file: Path = Field(
        default=Path("data/hexagon-centroids.json"),
        description="Hexagon centroid coordinates with cluster hints.",
    )
    hexagon_mapping_file: Path = Field(
        default=Path("data/hexagon-customer-mapping.json"),
        description="Per hexagon/route/date shipment counts and RTO rates.",
    )
    max_rto_percentage: float = Field(
        default=30.0,
        ge=0.0,
        lt=100.0,
        description="Cap applied by the capped RTO policy when grossing up incentives.",
    )
    cluster_thresholds: ClusterThresholds = Field(default_factory=ClusterThresholds)
    direct_thresholds: DirectDistanceThresholds = Field(default_factory=DirectDistanceThresholds)
    flat_thresholds: FlatDistanceThresholds = Field(default_factory=FlatDistanceThresholds)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator(
        "data_root",
        "routes_file",
        "dc_locations_file",
        "hexagon_centroids_file",
        "hexagon_mapping_file",
        mode="before",
    )
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
