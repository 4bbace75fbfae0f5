"""Response shapes produced by :class:`~urbanmon.views.dashboard.DashboardViews`."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from urbanmon.models._base import UrbanBaseModel

ChangeType = Literal["increase", "decrease"]


class ChangeIndicator(UrbanBaseModel):
    value: str | int
    type: ChangeType


class StatBlock(UrbanBaseModel):
    value: str | int
    change: ChangeIndicator
    status: str


class StatsOverview(UrbanBaseModel):
    air_quality: StatBlock
    traffic_congestion: StatBlock
    flood_risk: StatBlock
    citizen_reports: StatBlock


class IssuePresentation(UrbanBaseModel):
    title: str
    type: str
    icon: str
    icon_bg: str
    icon_color: str


class ReportLocation(UrbanBaseModel):
    area: str
    details: str


class Reporter(UrbanBaseModel):
    name: str = "Citizen Reporter"
    role: str = "Citizen"


class StatusBadge(UrbanBaseModel):
    label: str
    color: str


class ReportCard(UrbanBaseModel):
    """A report as listed on the dashboard."""

    id: str
    issue: IssuePresentation
    location: ReportLocation
    reporter: Reporter = Field(default_factory=Reporter)
    date: str
    status: StatusBadge


class ReportPage(UrbanBaseModel):
    reports: list[ReportCard]
    total: int
    page: int
    per_page: int
    total_pages: int


class TrafficHotspot(UrbanBaseModel):
    id: str
    location: str
    description: str
    congestion_level: int
    severity: Literal["L", "M", "H"]


class AirQualityMarker(UrbanBaseModel):
    aqi: int
    status: str
    color: str


class TrafficMarker(UrbanBaseModel):
    congestion_level: int
    status: str
    color: str


class FeatureProperties(UrbanBaseModel):
    id: str
    name: str
    district: str
    air_quality: AirQualityMarker | None = None
    traffic: TrafficMarker | None = None


class PointGeometry(UrbanBaseModel):
    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]
    """``(longitude, latitude)`` as GeoJSON requires."""


class Feature(UrbanBaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: FeatureProperties


class FeatureCollection(UrbanBaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)
