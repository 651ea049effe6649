"""Incentive threshold configuration schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ClusterThresholds(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dc_to_hex_threshold: float = Field(5000, alias="dcToHexThreshold", description="Meters from DC before incentive.")
    hex_to_hex_threshold: float = Field(2000, alias="hexToHexThreshold", description="Meters between clusters before incentive.")
    dc_to_hex_incentive_per_meter: float = Field(0.5, alias="dcToHexIncentivePerMeter")
    hex_to_hex_incentive_per_meter: float = Field(0.3, alias="hexToHexIncentivePerMeter")
    base_shipment_price: float = Field(50, alias="baseShipmentPrice")
    return_incentive_per_meter: float = Field(2, alias="returnIncentivePerMeter")
    return_journey_strategy: Literal["proportional", "weighted"] = Field(
        "proportional",
        alias="returnJourneyStrategy",
        description="How the return-to-DC incentive is spread over hexagons.",
    )


class DirectDistanceThresholds(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    distance_threshold: float = Field(5000, alias="distanceThreshold")
    incentive_per_meter: float = Field(0.5, alias="incentivePerMeter")
    base_shipment_price: float = Field(50, alias="baseShipmentPrice")


class FlatDistanceThresholds(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    distance_threshold: float = Field(5000, alias="distanceThreshold")
    flat_incentive: float = Field(100, alias="flatIncentive")
    base_shipment_price: float = Field(50, alias="baseShipmentPrice")
