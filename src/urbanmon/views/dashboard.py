"""Read-only dashboard aggregates computed from the entity store."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeVar

from urbanmon._constants import (
    FLOOD_RISK_AREAS,
    FLOOD_RISK_STATUS,
    HOTSPOT_CONGESTION_THRESHOLD,
    LAST_WEEK_AQI,
    LAST_WEEK_CONGESTION,
    LAST_WEEK_FLOOD_RISK,
    YESTERDAY_REPORTS,
)
from urbanmon._normalize import round_half_up
from urbanmon.models import AirQualitySample, Report, ReportStatus, TrafficSample
from urbanmon.store import EntityStore
from urbanmon.views.banding import (
    aqi_color,
    aqi_status,
    congestion_color,
    congestion_status,
    congestion_summary,
    hotspot_description,
    hotspot_severity,
)
from urbanmon.views.formatting import format_issue, format_status, humanize_date, split_location
from urbanmon.views.models import (
    AirQualityMarker,
    ChangeIndicator,
    Feature,
    FeatureCollection,
    FeatureProperties,
    PointGeometry,
    ReportCard,
    ReportPage,
    StatBlock,
    StatsOverview,
    TrafficHotspot,
    TrafficMarker,
)

_logger = logging.getLogger(__name__)

TSample = TypeVar("TSample", AirQualitySample, TrafficSample)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def latest_sample(samples: Iterable[TSample]) -> TSample | None:
    """Most recent sample by timestamp; later ids win ties."""
    return max(samples, key=lambda s: (s.timestamp, s.id), default=None)


def latest_per_location(samples: Iterable[TSample]) -> dict[str, TSample]:
    latest: dict[str, TSample] = {}
    for sample in samples:
        current = latest.get(sample.location_id)
        if current is None or (sample.timestamp, sample.id) > (current.timestamp, current.id):
            latest[sample.location_id] = sample
    return latest


def _change(current: float, reference: float, *, fmt: Callable[[float], str | int]) -> ChangeIndicator:
    if current > reference:
        return ChangeIndicator(value=fmt(current - reference), type="increase")
    return ChangeIndicator(value=fmt(reference - current), type="decrease")


class DashboardViews:
    """Derived views over one :class:`EntityStore`.

    Nothing here mutates the store. *clock* supplies "now" for relative
    dates and the reports-today count; its timezone is the dashboard's
    local calendar.
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        clock: Callable[[], datetime] = _local_now,
        reference_location_id: str | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._reference_location_id = reference_location_id

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def get_reports(self, filter: str = "all", page: int = 1, per_page: int = 10) -> ReportPage:
        """Filter by issue type substring, newest first, one page of cards."""
        page = max(1, page)
        per_page = max(1, per_page)
        reports = self._store.get_all_reports()

        needle = (filter or "all").strip().lower()
        if needle != "all":
            reports = [report for report in reports if needle in report.issue_type.lower()]

        reports.sort(key=lambda r: (r.created_at, r.id), reverse=True)

        start = (page - 1) * per_page
        now = self._clock()
        cards = [self._report_card(report, now) for report in reports[start : start + per_page]]

        return ReportPage(
            reports=cards,
            total=len(reports),
            page=page,
            per_page=per_page,
            total_pages=math.ceil(len(reports) / per_page),
        )

    @staticmethod
    def _report_card(report: Report, now: datetime) -> ReportCard:
        return ReportCard(
            id=str(report.id),
            issue=format_issue(report.issue_type),
            location=split_location(report.location),
            date=humanize_date(report.created_at, now),
            status=format_status(report.status),
        )

    # ------------------------------------------------------------------
    # Traffic
    # ------------------------------------------------------------------

    def get_traffic_hotspots(self) -> list[TrafficHotspot]:
        """Flagged or >70% congested samples joined to their location, worst first."""
        hotspots: list[TrafficHotspot] = []
        for sample in self._store.get_traffic_data():
            if not (sample.is_hotspot or sample.congestion_level > HOTSPOT_CONGESTION_THRESHOLD):
                continue
            location = self._store.get_location(sample.location_id)
            if location is None:
                _logger.debug("Dropping hotspot %s for unknown location %s", sample.id, sample.location_id)
                continue
            severity = hotspot_severity(sample.congestion_level)
            hotspots.append(
                TrafficHotspot(
                    id=str(sample.id),
                    location=location.name,
                    description=hotspot_description(severity),
                    congestion_level=sample.congestion_level,
                    severity=severity,
                )
            )
        hotspots.sort(key=lambda h: h.congestion_level, reverse=True)
        return hotspots

    # ------------------------------------------------------------------
    # Stats overview
    # ------------------------------------------------------------------

    def get_stats_overview(self) -> StatsOverview:
        return StatsOverview(
            air_quality=self._air_quality_block(),
            traffic_congestion=self._traffic_block(),
            flood_risk=self._flood_risk_block(),
            citizen_reports=self._reports_block(),
        )

    def _air_quality_block(self) -> StatBlock:
        if self._reference_location_id:
            recent = latest_sample(self._store.get_air_quality_data(self._reference_location_id))
        else:
            recent = latest_sample(self._store.get_air_quality_data())
        aqi = recent.aqi if recent is not None else 0
        change = _change(aqi, LAST_WEEK_AQI, fmt=lambda d: f"{round_half_up(d / LAST_WEEK_AQI * 100)}%")
        return StatBlock(value=aqi, change=change, status=aqi_status(aqi))

    def _traffic_block(self) -> StatBlock:
        latest = latest_per_location(self._store.get_traffic_data()).values()
        levels = [sample.congestion_level for sample in latest]
        average = round_half_up(sum(levels) / len(levels)) if levels else 0
        change = _change(average, LAST_WEEK_CONGESTION, fmt=lambda d: f"{round_half_up(d)}%")
        return StatBlock(value=f"{average}%", change=change, status=congestion_summary(average))

    @staticmethod
    def _flood_risk_block() -> StatBlock:
        # No flood sensor feed exists; the block is a fixed placeholder.
        change = _change(FLOOD_RISK_AREAS, LAST_WEEK_FLOOD_RISK, fmt=int)
        return StatBlock(value=FLOOD_RISK_AREAS, change=change, status=FLOOD_RISK_STATUS)

    def _reports_block(self) -> StatBlock:
        now = self._clock()
        today = now.date()
        reports = self._store.get_all_reports()
        todays = sum(1 for r in reports if r.created_at.astimezone(now.tzinfo).date() == today)
        resolved = sum(1 for r in reports if r.status == ReportStatus.RESOLVED.value)
        change = _change(todays, YESTERDAY_REPORTS, fmt=int)
        return StatBlock(
            value=todays,
            change=change,
            status=f"{resolved} resolved, {len(reports) - resolved} pending",
        )

    # ------------------------------------------------------------------
    # Map
    # ------------------------------------------------------------------

    def get_map_data(self) -> FeatureCollection:
        """One GeoJSON point per location with its latest air and traffic readings."""
        air = latest_per_location(self._store.get_air_quality_data())
        traffic = latest_per_location(self._store.get_traffic_data())

        features: list[Feature] = []
        for location in self._store.get_locations():
            air_sample = air.get(location.id)
            traffic_sample = traffic.get(location.id)
            air_marker = None
            if air_sample is not None:
                air_marker = AirQualityMarker(
                    aqi=air_sample.aqi,
                    status=aqi_status(air_sample.aqi),
                    color=aqi_color(air_sample.aqi),
                )
            traffic_marker = None
            if traffic_sample is not None:
                traffic_marker = TrafficMarker(
                    congestion_level=traffic_sample.congestion_level,
                    status=congestion_status(traffic_sample.congestion_level),
                    color=congestion_color(traffic_sample.congestion_level),
                )
            features.append(
                Feature(
                    geometry=PointGeometry(coordinates=(location.longitude, location.latitude)),
                    properties=FeatureProperties(
                        id=location.id,
                        name=location.name,
                        district=location.district,
                        air_quality=air_marker,
                        traffic=traffic_marker,
                    ),
                )
            )
        return FeatureCollection(features=features)
