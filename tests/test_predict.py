from __future__ import annotations

from datetime import UTC, datetime

from urbanmon.models import AirQualityCreate, PredictionType, TrafficCreate
from urbanmon.predict import AirQualityForecaster, TrafficForecaster, is_rush_hour
from urbanmon.store import EntityStore

_MONDAY_RUSH = datetime(2026, 1, 5, 8, 15, tzinfo=UTC)
_MONDAY_NOON = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)
_SATURDAY_RUSH = datetime(2026, 1, 10, 8, 15, tzinfo=UTC)


def test_air_forecast_decays_latest_aqi_and_is_recorded() -> None:
    store = EntityStore()
    store.add_air_quality_data(AirQualityCreate(location_id="delhi", aqi=120, timestamp=_MONDAY_RUSH))
    store.add_air_quality_data(AirQualityCreate(location_id="delhi", aqi=200, timestamp=_MONDAY_NOON))

    forecast = AirQualityForecaster(store).predict("delhi")

    assert forecast is not None
    assert forecast.current == 200
    assert forecast.predictions == {"2h": 190, "4h": 150, "6h": 110}
    assert forecast.confidence == 87
    assert "improve" in forecast.explanation

    recorded = store.get_prediction("delhi", PredictionType.AIR)
    assert recorded is not None
    assert recorded.predicted_values == forecast.predictions
    assert forecast.to_wire()["locationId"] == "delhi"


def test_air_forecast_without_data_returns_none() -> None:
    store = EntityStore()

    assert AirQualityForecaster(store).predict("delhi") is None
    assert store.get_prediction("delhi", "air") is None


def test_air_forecast_for_zero_aqi_is_stable() -> None:
    store = EntityStore()
    store.add_air_quality_data(AirQualityCreate(location_id="pune", aqi=0))

    forecast = AirQualityForecaster(store).predict("pune")

    assert forecast is not None
    assert "stable" in forecast.explanation


def test_traffic_forecast_rush_hour() -> None:
    store = EntityStore()
    store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=60))

    forecast = TrafficForecaster(store, clock=lambda: _MONDAY_RUSH).predict("delhi")

    assert forecast is not None
    assert forecast.predictions == {"1h": 66, "2h": 63, "3h": 54}
    assert forecast.confidence == 82
    assert store.get_prediction("delhi", PredictionType.TRAFFIC) is not None


def test_traffic_forecast_off_peak() -> None:
    store = EntityStore()
    store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=60))

    forecast = TrafficForecaster(store, clock=lambda: _MONDAY_NOON).predict("delhi")

    assert forecast is not None
    assert forecast.predictions == {"1h": 57, "2h": 51, "3h": 45}


def test_traffic_forecast_caps_at_100() -> None:
    store = EntityStore()
    store.add_traffic_data(TrafficCreate(location_id="delhi", congestion_level=95))

    forecast = TrafficForecaster(store, clock=lambda: _MONDAY_RUSH).predict("delhi")

    assert forecast is not None
    assert forecast.predictions["1h"] == 100
    assert forecast.predictions["2h"] == 100


def test_traffic_forecast_without_data_returns_none() -> None:
    assert TrafficForecaster(EntityStore()).predict("delhi") is None


def test_rush_hour_is_weekdays_only() -> None:
    assert is_rush_hour(_MONDAY_RUSH)
    assert is_rush_hour(datetime(2026, 1, 5, 18, 59))
    assert not is_rush_hour(datetime(2026, 1, 5, 19, 0))
    assert not is_rush_hour(_MONDAY_NOON)
    assert not is_rush_hour(_SATURDAY_RUSH)
