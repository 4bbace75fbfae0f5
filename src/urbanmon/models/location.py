"""Monitored location model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from urbanmon.models._base import UrbanBaseModel


class Location(UrbanBaseModel):
    """A monitored city or district.

    The canonical shape is flat ``latitude``/``longitude``. Payloads using
    the nested ``coordinates: {"lat": ..., "lng": ...}`` form are flattened
    on validation.
    """

    id: str = Field(min_length=1)
    name: str
    district: str = ""
    latitude: float
    longitude: float
    state: str | None = None
    country: str | None = None
    population: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_coordinates(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        nested = values.get("coordinates")
        if not isinstance(nested, dict):
            return values
        merged = {k: v for k, v in values.items() if k != "coordinates"}
        merged.setdefault("latitude", nested.get("lat", nested.get("latitude")))
        merged.setdefault("longitude", nested.get("lng", nested.get("lon", nested.get("longitude"))))
        return merged
