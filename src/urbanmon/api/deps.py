"""Request-scoped accessors for the services kept on ``app.state``."""

from __future__ import annotations

from fastapi import Request

from urbanmon.persistence import Mirror
from urbanmon.predict import AirQualityForecaster, TrafficForecaster
from urbanmon.store import EntityStore
from urbanmon.views import DashboardViews


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def get_views(request: Request) -> DashboardViews:
    return request.app.state.views


def get_air_forecaster(request: Request) -> AirQualityForecaster:
    return request.app.state.air_forecaster


def get_traffic_forecaster(request: Request) -> TrafficForecaster:
    return request.app.state.traffic_forecaster


def get_mirror(request: Request) -> Mirror | None:
    return request.app.state.mirror
