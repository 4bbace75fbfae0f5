"""Sample data for an empty store: eight Indian cities with readings."""

from __future__ import annotations

import logging

from urbanmon.models import (
    AirQualityCreate,
    Location,
    PredictionCreate,
    PredictionType,
    ReportCreate,
    TrafficCreate,
)
from urbanmon.store import EntityStore

_logger = logging.getLogger(__name__)

SAMPLE_LOCATIONS: tuple[Location, ...] = (
    Location(
        id="delhi",
        name="Delhi",
        district="NCR",
        latitude=28.6139,
        longitude=77.2090,
        state="Delhi",
        country="India",
        population=21000000,
    ),
    Location(
        id="mumbai",
        name="Mumbai",
        district="Maharashtra",
        latitude=19.0760,
        longitude=72.8777,
        state="Maharashtra",
        country="India",
        population=12400000,
    ),
    Location(
        id="bangalore",
        name="Bangalore",
        district="Karnataka",
        latitude=12.9716,
        longitude=77.5946,
        state="Karnataka",
        country="India",
        population=8400000,
    ),
    Location(
        id="chennai",
        name="Chennai",
        district="Tamil Nadu",
        latitude=13.0827,
        longitude=80.2707,
        state="Tamil Nadu",
        country="India",
        population=7100000,
    ),
    Location(
        id="kolkata",
        name="Kolkata",
        district="West Bengal",
        latitude=22.5726,
        longitude=88.3639,
        state="West Bengal",
        country="India",
        population=4500000,
    ),
    Location(
        id="hyderabad",
        name="Hyderabad",
        district="Telangana",
        latitude=17.3850,
        longitude=78.4867,
        state="Telangana",
        country="India",
        population=6800000,
    ),
    Location(
        id="pune",
        name="Pune",
        district="Maharashtra",
        latitude=18.5204,
        longitude=73.8567,
        state="Maharashtra",
        country="India",
        population=3100000,
    ),
    Location(
        id="ahmedabad",
        name="Ahmedabad",
        district="Gujarat",
        latitude=23.0225,
        longitude=72.5714,
        state="Gujarat",
        country="India",
        population=5500000,
    ),
)

# location → (aqi, pm25, pm10, no2, o3, co, so2)
_AIR_QUALITY: dict[str, tuple[int, float, float, float, float, float, float]] = {
    "delhi": (204, 160, 210, 88, 32, 12, 18),
    "mumbai": (156, 65, 122, 51, 28, 8, 14),
    "bangalore": (95, 35, 68, 32, 18, 4, 8),
    "chennai": (110, 42, 85, 39, 21, 6, 11),
    "kolkata": (184, 89, 156, 61, 29, 9, 16),
    "hyderabad": (112, 45, 87, 38, 22, 5, 10),
    "pune": (84, 32, 62, 28, 15, 3, 7),
    "ahmedabad": (168, 78, 140, 58, 27, 8, 15),
}

# location → (congestion %, vehicles, average speed km/h, hotspot)
_TRAFFIC: dict[str, tuple[int, int, float, bool]] = {
    "delhi": (92, 1850, 8, True),
    "mumbai": (88, 1720, 10, True),
    "bangalore": (82, 1450, 12, True),
    "chennai": (78, 1320, 14, True),
    "kolkata": (85, 1550, 11, True),
    "hyderabad": (75, 1280, 15, True),
    "pune": (68, 980, 18, False),
    "ahmedabad": (72, 1150, 16, True),
}

_PREDICTIONS: tuple[tuple[str, PredictionType, float, dict[str, float], int], ...] = (
    ("delhi", PredictionType.AIR, 204, {"2h": 215, "4h": 198, "6h": 175}, 91),
    ("delhi", PredictionType.TRAFFIC, 92, {"1h": 94, "2h": 85, "3h": 76}, 88),
    ("mumbai", PredictionType.AIR, 156, {"2h": 168, "4h": 142, "6h": 122}, 89),
    ("mumbai", PredictionType.TRAFFIC, 88, {"1h": 92, "2h": 82, "3h": 75}, 86),
    ("bangalore", PredictionType.AIR, 95, {"2h": 105, "4h": 88, "6h": 72}, 84),
)

_REPORTS: tuple[ReportCreate, ...] = (
    ReportCreate(
        issue_type="airPollution",
        location="North Industrial Zone, Block 4, Building 7",
        description="Factory emitting heavy black smoke throughout the day",
    ),
    ReportCreate(
        issue_type="trafficCongestion",
        location="West Highway, Mile 23, Exit 12",
        description="Major accident blocking 2 lanes",
    ),
    ReportCreate(
        issue_type="flooding",
        location="Downtown, Oak Street & 7th Avenue",
        description="Street flooding after heavy rain, water level is about 1 foot",
    ),
)


def seed_store(store: EntityStore) -> None:
    """Populate *store* with the sample cities, readings, forecasts and reports."""
    for location in SAMPLE_LOCATIONS:
        store.add_location(location)

    for location_id, (aqi, pm25, pm10, no2, o3, co, so2) in _AIR_QUALITY.items():
        store.add_air_quality_data(
            AirQualityCreate(
                location_id=location_id,
                aqi=aqi,
                pm25=pm25,
                pm10=pm10,
                no2=no2,
                o3=o3,
                co=co,
                so2=so2,
                source="sensor",
            )
        )

    for location_id, (level, vehicles, speed, hotspot) in _TRAFFIC.items():
        store.add_traffic_data(
            TrafficCreate(
                location_id=location_id,
                congestion_level=level,
                vehicle_count=vehicles,
                average_speed=speed,
                is_hotspot=hotspot,
            )
        )

    for location_id, prediction_type, current, values, confidence in _PREDICTIONS:
        store.add_prediction(
            PredictionCreate(
                location_id=location_id,
                type=prediction_type,
                current_value=current,
                predicted_values=values,
                confidence=confidence,
            )
        )

    for report in _REPORTS:
        store.create_report(report)

    _logger.info(
        "Seeded %d locations, %d reports",
        len(SAMPLE_LOCATIONS),
        len(_REPORTS),
    )
