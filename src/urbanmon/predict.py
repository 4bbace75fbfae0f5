"""Deterministic forecasting heuristics.

There is no learned model. Each :class:`Forecaster` scales the latest
reading by fixed per-horizon factors and records the result in the store
as a :class:`~urbanmon.models.Prediction`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from urbanmon._normalize import round_half_up
from urbanmon.models import PredictionCreate, PredictionType
from urbanmon.models._base import UrbanBaseModel
from urbanmon.store import EntityStore
from urbanmon.views.dashboard import latest_sample

_logger = logging.getLogger(__name__)

AIR_DECAY: dict[str, float] = {"2h": 0.95, "4h": 0.75, "6h": 0.55}
AIR_CONFIDENCE = 87

TRAFFIC_RUSH_HOUR: dict[str, float] = {"1h": 1.10, "2h": 1.05, "3h": 0.90}
TRAFFIC_OFF_PEAK: dict[str, float] = {"1h": 0.95, "2h": 0.85, "3h": 0.75}
TRAFFIC_CONFIDENCE = 82
_RUSH_HOURS = frozenset({7, 8, 9, 16, 17, 18})


class Forecast(UrbanBaseModel):
    location_id: str
    type: PredictionType
    current: float
    predictions: dict[str, float]
    confidence: int
    explanation: str


class Forecaster(Protocol):
    """Anything that can forecast one location's next few hours."""

    def predict(self, location_id: str) -> Forecast | None:
        ...


def _local_now() -> datetime:
    return datetime.now().astimezone()


def explain_air_trend(current: float, future: float) -> str:
    if future < current:
        return "Air quality is expected to improve over the next 6 hours as winds pick up and traffic eases."
    if future > current:
        return "Air quality is expected to worsen over the next 6 hours due to unfavorable weather conditions."
    return "Air quality is expected to remain stable over the next 6 hours with minimal fluctuations."


def is_rush_hour(moment: datetime) -> bool:
    """Weekday 07:00-09:59 or 16:00-18:59."""
    return moment.weekday() < 5 and moment.hour in _RUSH_HOURS


class AirQualityForecaster:
    """Percentage decay of the latest AQI over 2h/4h/6h."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def predict(self, location_id: str) -> Forecast | None:
        current = latest_sample(self._store.get_air_quality_data(location_id))
        if current is None:
            _logger.info("No air quality data for %s; nothing to forecast", location_id)
            return None

        values = {horizon: float(round_half_up(current.aqi * factor)) for horizon, factor in AIR_DECAY.items()}
        self._store.add_prediction(
            PredictionCreate(
                location_id=location_id,
                type=PredictionType.AIR,
                current_value=current.aqi,
                predicted_values=values,
                confidence=AIR_CONFIDENCE,
            )
        )
        return Forecast(
            location_id=location_id,
            type=PredictionType.AIR,
            current=current.aqi,
            predictions=values,
            confidence=AIR_CONFIDENCE,
            explanation=explain_air_trend(current.aqi, values["6h"]),
        )


class TrafficForecaster:
    """Rush-hour aware scaling of the latest congestion over 1h/2h/3h."""

    def __init__(self, store: EntityStore, *, clock: Callable[[], datetime] = _local_now) -> None:
        self._store = store
        self._clock = clock

    def predict(self, location_id: str) -> Forecast | None:
        current = latest_sample(self._store.get_traffic_data(location_id))
        if current is None:
            _logger.info("No traffic data for %s; nothing to forecast", location_id)
            return None

        rush = is_rush_hour(self._clock())
        factors = TRAFFIC_RUSH_HOUR if rush else TRAFFIC_OFF_PEAK
        values = {
            horizon: float(min(100, round_half_up(current.congestion_level * factor)))
            for horizon, factor in factors.items()
        }
        self._store.add_prediction(
            PredictionCreate(
                location_id=location_id,
                type=PredictionType.TRAFFIC,
                current_value=current.congestion_level,
                predicted_values=values,
                confidence=TRAFFIC_CONFIDENCE,
            )
        )
        explanation = "Rush hour: congestion expected to build." if rush else "Off-peak: congestion expected to ease."
        return Forecast(
            location_id=location_id,
            type=PredictionType.TRAFFIC,
            current=current.congestion_level,
            predictions=values,
            confidence=TRAFFIC_CONFIDENCE,
            explanation=explanation,
        )
