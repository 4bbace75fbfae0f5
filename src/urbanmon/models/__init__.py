"""Data models for urbanmon entities."""

from urbanmon.models._base import OptionalTimestamp, Timestamp, UrbanBaseModel
from urbanmon.models.location import Location
from urbanmon.models.prediction import Prediction, PredictionCreate, PredictionType
from urbanmon.models.report import Report, ReportCreate, ReportStatus, parse_report_create
from urbanmon.models.samples import AirQualityCreate, AirQualitySample, TrafficCreate, TrafficSample
from urbanmon.models.user import User, UserCreate

__all__ = [
    "AirQualityCreate",
    "AirQualitySample",
    "Location",
    "OptionalTimestamp",
    "Prediction",
    "PredictionCreate",
    "PredictionType",
    "Report",
    "ReportCreate",
    "ReportStatus",
    "Timestamp",
    "TrafficCreate",
    "TrafficSample",
    "UrbanBaseModel",
    "User",
    "UserCreate",
    "parse_report_create",
]
