"""Air-quality and traffic sample models.

Samples are append-only. The ``*Create`` inputs carry an optional
timestamp; the store stamps its clock time when it is absent.
"""

from __future__ import annotations

from pydantic import Field

from urbanmon.models._base import OptionalTimestamp, Timestamp, UrbanBaseModel


class AirQualityCreate(UrbanBaseModel):
    """Input for :meth:`EntityStore.add_air_quality_data`."""

    location_id: str
    aqi: int = Field(ge=0)
    pm25: float | None = None
    pm10: float | None = None
    no2: float | None = None
    o3: float | None = None
    co: float | None = None
    so2: float | None = None
    source: str | None = None
    timestamp: OptionalTimestamp = None


class AirQualitySample(UrbanBaseModel):
    """A stored air-quality reading for one location."""

    id: int
    location_id: str
    aqi: int
    pm25: float | None = None
    pm10: float | None = None
    no2: float | None = None
    o3: float | None = None
    co: float | None = None
    so2: float | None = None
    source: str | None = None
    timestamp: Timestamp


class TrafficCreate(UrbanBaseModel):
    """Input for :meth:`EntityStore.add_traffic_data`."""

    location_id: str
    congestion_level: int = Field(ge=0, le=100)
    vehicle_count: int | None = None
    average_speed: float | None = None
    is_hotspot: bool = False
    timestamp: OptionalTimestamp = None


class TrafficSample(UrbanBaseModel):
    """A stored traffic reading for one location."""

    id: int
    location_id: str
    congestion_level: int = Field(ge=0, le=100)
    vehicle_count: int | None = None
    average_speed: float | None = None
    is_hotspot: bool = False
    timestamp: Timestamp
