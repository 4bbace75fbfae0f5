"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from urbanmon.api.routes import router
from urbanmon.bootstrap import open_store
from urbanmon.config import UrbanmonConfig
from urbanmon.exceptions import ReportValidationError, UrbanmonError
from urbanmon.persistence import Mirror
from urbanmon.predict import AirQualityForecaster, TrafficForecaster
from urbanmon.store import EntityStore
from urbanmon.views import DashboardViews

_logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(ReportValidationError)
    async def _invalid_report(request: Request, exc: ReportValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(UrbanmonError)
    async def _service_error(request: Request, exc: UrbanmonError) -> JSONResponse:
        _logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": str(exc)})

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        _logger.exception("%s %s crashed", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app(
    config: UrbanmonConfig | None = None,
    *,
    store: EntityStore | None = None,
    mirror: Mirror | None = None,
) -> FastAPI:
    """Build the dashboard API.

    The store is opened in the lifespan hook: the configured mirror loads
    it (or the sample data seeds it) on startup, and the mirror is stopped
    on shutdown, which for snapshot files writes a final save.

    Parameters
    ----------
    config : UrbanmonConfig or None
        Defaults to :meth:`UrbanmonConfig.from_env`.
    store : EntityStore or None
        Pre-built store, mainly for tests.
    mirror : Mirror or None
        Pre-built mirror; overrides the configured backend.
    """
    config = config or UrbanmonConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        opened, active_mirror = await open_store(config, store=store, mirror=mirror)
        app.state.store = opened
        app.state.mirror = active_mirror
        app.state.views = DashboardViews(opened, reference_location_id=config.reference_location_id)
        app.state.air_forecaster = AirQualityForecaster(opened)
        app.state.traffic_forecaster = TrafficForecaster(opened)
        _logger.info(
            "urbanmon ready (%s storage, %d locations)",
            config.storage_backend if active_mirror is not None else "memory",
            len(opened.get_locations()),
        )
        try:
            yield
        finally:
            if active_mirror is not None:
                await active_mirror.stop()
            _logger.info("urbanmon stopped")

    app = FastAPI(title="urbanmon", lifespan=lifespan)
    _register_error_handlers(app)
    app.include_router(router)
    return app
