"""Derived dashboard views over the entity store."""

from urbanmon.views.banding import (
    aqi_color,
    aqi_status,
    congestion_color,
    congestion_status,
    congestion_summary,
    hotspot_severity,
)
from urbanmon.views.dashboard import DashboardViews, latest_per_location, latest_sample
from urbanmon.views.models import (
    FeatureCollection,
    ReportCard,
    ReportPage,
    StatsOverview,
    TrafficHotspot,
)

__all__ = [
    "DashboardViews",
    "FeatureCollection",
    "ReportCard",
    "ReportPage",
    "StatsOverview",
    "TrafficHotspot",
    "aqi_color",
    "aqi_status",
    "congestion_color",
    "congestion_status",
    "congestion_summary",
    "hotspot_severity",
    "latest_per_location",
    "latest_sample",
]
