"""Dashboard HTTP routes.

Handlers are ``async def`` so every store mutation, and therefore every
mirror notification, happens on the event loop thread.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from urbanmon.analysis import AnalysisInput, analyze_air_quality
from urbanmon.api.deps import (
    get_air_forecaster,
    get_mirror,
    get_store,
    get_traffic_forecaster,
    get_views,
)
from urbanmon.exceptions import ReportValidationError
from urbanmon.models import parse_report_create
from urbanmon.persistence import Mirror
from urbanmon.predict import AirQualityForecaster, TrafficForecaster
from urbanmon.store import EntityStore
from urbanmon.views import DashboardViews, latest_sample

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dashboard"])

StoreDep = Annotated[EntityStore, Depends(get_store)]
ViewsDep = Annotated[DashboardViews, Depends(get_views)]

DEFAULT_LOCATION = "delhi"


# ----------------------------------------------------------------------
# Stats and map
# ----------------------------------------------------------------------


@router.get("/stats/overview")
async def stats_overview(views: ViewsDep) -> dict[str, Any]:
    return views.get_stats_overview().to_wire()


@router.get("/map/data")
async def map_data(views: ViewsDep) -> dict[str, Any]:
    return views.get_map_data().to_wire()


@router.get("/locations")
async def locations(store: StoreDep) -> list[dict[str, Any]]:
    return [location.to_wire() for location in store.get_locations()]


# ----------------------------------------------------------------------
# Air quality
# ----------------------------------------------------------------------


@router.get("/air-quality/data")
async def air_quality_data(
    store: StoreDep,
    location_id: Annotated[str | None, Query(alias="locationId")] = None,
) -> list[dict[str, Any]]:
    return [sample.to_wire() for sample in store.get_air_quality_data(location_id)]


@router.get("/air-quality/prediction")
async def air_quality_prediction(
    forecaster: Annotated[AirQualityForecaster, Depends(get_air_forecaster)],
    location_id: Annotated[str, Query(alias="locationId")] = DEFAULT_LOCATION,
) -> dict[str, Any]:
    forecast = forecaster.predict(location_id)
    if forecast is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No air quality data found for this location")
    return forecast.to_wire()


@router.post("/air-quality/analyze")
async def analyze(
    store: StoreDep,
    forecaster: Annotated[AirQualityForecaster, Depends(get_air_forecaster)],
    payload: Annotated[dict[str, Any] | None, Body()] = None,
) -> dict[str, Any]:
    location_id = (payload or {}).get("locationId")
    if not location_id:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Location ID is required")

    current = latest_sample(store.get_air_quality_data(str(location_id)))
    if current is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No air quality data found for this location")

    readings = AnalysisInput(
        pm25=current.pm25 or 0.0,
        pm10=current.pm10 or 0.0,
        no2=current.no2 or 0.0,
        co=current.co or 0.0,
        so2=current.so2 or 0.0,
        o3=current.o3 or 0.0,
    )
    forecast = forecaster.predict(str(location_id))
    analysis = analyze_air_quality(readings)
    if forecast is not None:
        analysis = analysis.model_copy(update={"predictions": forecast.to_wire()})
    return analysis.to_wire()


# ----------------------------------------------------------------------
# Traffic
# ----------------------------------------------------------------------


@router.get("/traffic/data")
async def traffic_data(
    store: StoreDep,
    location_id: Annotated[str | None, Query(alias="locationId")] = None,
) -> list[dict[str, Any]]:
    return [sample.to_wire() for sample in store.get_traffic_data(location_id)]


@router.get("/traffic/hotspots")
async def traffic_hotspots(views: ViewsDep) -> list[dict[str, Any]]:
    return [hotspot.to_wire() for hotspot in views.get_traffic_hotspots()]


@router.get("/traffic/predict")
async def traffic_prediction(
    forecaster: Annotated[TrafficForecaster, Depends(get_traffic_forecaster)],
    location_id: Annotated[str, Query(alias="locationId")] = DEFAULT_LOCATION,
) -> dict[str, Any]:
    forecast = forecaster.predict(location_id)
    if forecast is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No traffic data found for this location")
    return forecast.to_wire()


# ----------------------------------------------------------------------
# Reports
# ----------------------------------------------------------------------


@router.get("/reports")
async def list_reports(
    views: ViewsDep,
    filter: Annotated[str, Query()] = "all",
    page: Annotated[int, Query()] = 1,
    per_page: Annotated[int, Query(alias="perPage")] = 10,
) -> dict[str, Any]:
    return views.get_reports(filter, page, per_page).to_wire()


@router.post("/reports", status_code=status.HTTP_201_CREATED)
async def create_report(request: Request, store: StoreDep) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ReportValidationError("Invalid report data", errors=[{"msg": "Body is not valid JSON"}]) from exc
    report = store.create_report(parse_report_create(payload))
    _logger.info("Report %d created (%s)", report.id, report.issue_type)
    return report.to_wire()


@router.get("/reports/{report_id}")
async def get_report(report_id: int, store: StoreDep) -> dict[str, Any]:
    report = store.get_report(report_id)
    if report is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Report not found")
    return report.to_wire()


@router.patch("/reports/{report_id}")
async def update_report(
    report_id: int,
    store: StoreDep,
    payload: Annotated[dict[str, Any], Body()],
) -> dict[str, Any]:
    new_status = payload.get("status")
    if not isinstance(new_status, str) or not new_status.strip():
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Status is required")
    report = store.update_report(report_id, new_status.strip())
    if report is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Report not found")
    return report.to_wire()


# ----------------------------------------------------------------------
# Admin
# ----------------------------------------------------------------------


@router.post("/admin/save")
async def save_now(
    store: StoreDep,
    mirror: Annotated[Mirror | None, Depends(get_mirror)],
) -> JSONResponse:
    if mirror is None:
        raise HTTPException(status.HTTP_409_CONFLICT, "No durable storage is configured")
    saved = await mirror.save(store)
    code = status.HTTP_200_OK if saved else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=code, content={"saved": saved})
