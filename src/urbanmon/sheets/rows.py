"""Entity <-> spreadsheet row conversion.

Each collection lives in its own sheet with a fixed header row. Cells are
written RAW and come back as text, so reading coerces every column to the
type its model expects.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from urbanmon._normalize import safe_bool, safe_float, safe_int, safe_json, safe_str
from urbanmon.models import AirQualitySample, Location, Prediction, Report, TrafficSample, User
from urbanmon.store import Collection

SHEET_NAMES: dict[Collection, str] = {
    Collection.USERS: "Users",
    Collection.AIR_QUALITY: "AirQualityData",
    Collection.TRAFFIC: "TrafficData",
    Collection.REPORTS: "Reports",
    Collection.LOCATIONS: "Locations",
    Collection.PREDICTIONS: "Predictions",
}

HEADERS: dict[Collection, tuple[str, ...]] = {
    Collection.USERS: ("id", "username", "password", "role", "createdAt"),
    Collection.AIR_QUALITY: (
        "id",
        "locationId",
        "aqi",
        "pm25",
        "pm10",
        "no2",
        "o3",
        "co",
        "so2",
        "source",
        "timestamp",
    ),
    Collection.TRAFFIC: (
        "id",
        "locationId",
        "congestionLevel",
        "vehicleCount",
        "averageSpeed",
        "isHotspot",
        "timestamp",
    ),
    Collection.REPORTS: (
        "id",
        "issueType",
        "location",
        "description",
        "photoUrl",
        "userId",
        "status",
        "createdAt",
        "updatedAt",
    ),
    Collection.LOCATIONS: ("id", "name", "latitude", "longitude", "district", "state", "country", "population"),
    Collection.PREDICTIONS: (
        "id",
        "locationId",
        "type",
        "currentValue",
        "predictions",
        "confidence",
        "timestamp",
    ),
}

MODELS: dict[Collection, type[BaseModel]] = {
    Collection.USERS: User,
    Collection.AIR_QUALITY: AirQualitySample,
    Collection.TRAFFIC: TrafficSample,
    Collection.REPORTS: Report,
    Collection.LOCATIONS: Location,
    Collection.PREDICTIONS: Prediction,
}

# Sheet column → model alias where the two differ.
_ALIASES: dict[Collection, dict[str, str]] = {
    Collection.PREDICTIONS: {"predictions": "predictedValues", "timestamp": "createdAt"},
}

_Converter = Callable[[Any], Any]

_COMMON_CONVERTERS: dict[str, _Converter] = {
    "id": safe_int,
    "userId": safe_int,
    "aqi": safe_int,
    "pm25": safe_float,
    "pm10": safe_float,
    "no2": safe_float,
    "o3": safe_float,
    "co": safe_float,
    "so2": safe_float,
    "congestionLevel": safe_int,
    "vehicleCount": safe_int,
    "averageSpeed": safe_float,
    "isHotspot": safe_bool,
    "latitude": safe_float,
    "longitude": safe_float,
    "population": safe_int,
    "currentValue": safe_float,
    "predictions": safe_json,
    "confidence": safe_int,
}

# Location ids are slugs, not counters.
_CONVERTER_OVERRIDES: dict[Collection, dict[str, _Converter]] = {
    Collection.LOCATIONS: {"id": safe_str},
}


def header_row(collection: Collection) -> list[str]:
    return list(HEADERS[collection])


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return value


def to_row(collection: Collection, entity: BaseModel) -> list[Any]:
    """Render *entity* in the column order of its sheet."""
    data = entity.model_dump(mode="json", by_alias=True)
    aliases = _ALIASES.get(collection, {})
    return [_cell(data.get(aliases.get(header, header))) for header in HEADERS[collection]]


def from_row(collection: Collection, row: Sequence[Any]) -> BaseModel:
    """Parse one data row back into its model.

    Blank cells fall back to model defaults. Short rows are padded.

    Raises
    ------
    pydantic.ValidationError
        When required columns are missing or unparseable.
    """
    aliases = _ALIASES.get(collection, {})
    overrides = _CONVERTER_OVERRIDES.get(collection, {})
    values: dict[str, Any] = {}
    for index, header in enumerate(HEADERS[collection]):
        raw = row[index] if index < len(row) else None
        convert = overrides.get(header) or _COMMON_CONVERTERS.get(header, safe_str)
        value = convert(raw)
        if value is None:
            continue
        values[aliases.get(header, header)] = value
    return MODELS[collection].model_validate(values)
