"""urbanmon - City monitoring dashboard backend (air quality, traffic, citizen reports)."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("urbanmon")
except PackageNotFoundError:
    __version__ = "0+local"
from urbanmon.analysis import analyze_air_quality, calculate_aqi
from urbanmon.config import UrbanmonConfig
from urbanmon.exceptions import (
    PersistenceError,
    ReportValidationError,
    SheetsAuthError,
    SheetsError,
    SheetsTransportError,
    SnapshotError,
    UrbanmonConfigError,
    UrbanmonError,
)
from urbanmon.models import (
    AirQualityCreate,
    AirQualitySample,
    Location,
    Prediction,
    PredictionCreate,
    PredictionType,
    Report,
    ReportCreate,
    ReportStatus,
    TrafficCreate,
    TrafficSample,
    User,
    UserCreate,
)
from urbanmon.persistence import FileSnapshotMirror, Mirror
from urbanmon.predict import AirQualityForecaster, Forecast, TrafficForecaster
from urbanmon.store import EntityStore, StoreChange, StoreSnapshot
from urbanmon.views import DashboardViews

__all__ = [
    "AirQualityCreate",
    "AirQualityForecaster",
    "AirQualitySample",
    "DashboardViews",
    "EntityStore",
    "FileSnapshotMirror",
    "Forecast",
    "Location",
    "Mirror",
    "PersistenceError",
    "Prediction",
    "PredictionCreate",
    "PredictionType",
    "Report",
    "ReportCreate",
    "ReportStatus",
    "ReportValidationError",
    "SheetsAuthError",
    "SheetsError",
    "SheetsTransportError",
    "SnapshotError",
    "StoreChange",
    "StoreSnapshot",
    "TrafficCreate",
    "TrafficForecaster",
    "TrafficSample",
    "UrbanmonConfig",
    "UrbanmonConfigError",
    "UrbanmonError",
    "User",
    "UserCreate",
    "__version__",
    "analyze_air_quality",
    "calculate_aqi",
]
