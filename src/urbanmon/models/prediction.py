"""Forecast prediction models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from urbanmon.models._base import OptionalTimestamp, Timestamp, UrbanBaseModel


class PredictionType(StrEnum):
    AIR = "air"
    TRAFFIC = "traffic"


class PredictionCreate(UrbanBaseModel):
    """Input for :meth:`EntityStore.add_prediction`."""

    location_id: str
    type: PredictionType
    current_value: float
    predicted_values: dict[str, float] = Field(default_factory=dict)
    """Horizon label (``"2h"``, ``"4h"``...) to predicted value."""
    confidence: int = Field(ge=0, le=100)
    created_at: OptionalTimestamp = None


class Prediction(UrbanBaseModel):
    """A stored forecast for one (location, type) pair."""

    id: int
    location_id: str
    type: PredictionType
    current_value: float
    predicted_values: dict[str, float] = Field(default_factory=dict)
    confidence: int = Field(ge=0, le=100)
    created_at: Timestamp
