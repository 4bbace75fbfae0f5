"""PM2.5 air-quality analysis.

Uses the EPA piecewise-linear breakpoint table, which yields a different
scale than the simulated sensor AQI shown on the dashboard
(:mod:`urbanmon.views.banding`). Keep the two apart.
"""

from __future__ import annotations

import math
import random
from typing import Any

from pydantic import Field

from urbanmon.models._base import UrbanBaseModel

# (concentration low, concentration high, AQI low, AQI high, label)
_PM25_BREAKPOINTS: tuple[tuple[float, float, int, int, str], ...] = (
    (0.0, 12.0, 0, 50, "Good"),
    (12.1, 35.4, 51, 100, "Moderate"),
    (35.5, 55.4, 101, 150, "Unhealthy for Sensitive Groups"),
    (55.5, 150.4, 151, 200, "Unhealthy"),
    (150.5, 250.4, 201, 300, "Very Unhealthy"),
    (250.5, 500.4, 301, 500, "Hazardous"),
)
_TOP_CONCENTRATION = 500.4

AQI_RANGES: dict[str, str] = {
    "good": "0-50: Good",
    "moderate": "51-100: Moderate",
    "unhealthySensitive": "101-150: Unhealthy for Sensitive Groups",
    "unhealthy": "151-200: Unhealthy",
    "veryUnhealthy": "201-300: Very Unhealthy",
    "hazardous": "301-500: Hazardous",
}

# (upper AQI bound inclusive, text, emoji)
_RECOMMENDATIONS: tuple[tuple[float, str, str], ...] = (
    (50, "Air quality is good. No precautions needed.", "😊"),
    (100, "Air quality is acceptable. Sensitive groups may take care.", "🙂"),
    (150, "Reduce outdoor activities for sensitive groups.", "😷"),
    (200, "Wear a mask and limit outdoor exposure.", "😷"),
    (300, "Stay indoors and use air purifiers.", "🏠"),
)
_HAZARDOUS_RECOMMENDATION = ("Avoid all outdoor activities; wear N95 masks if outside.", "⚠️")


class AqiReading(UrbanBaseModel):
    label: str
    value: int


class HealthRecommendation(UrbanBaseModel):
    text: str
    emoji: str


class HeatGrid(UrbanBaseModel):
    data: list[list[float]]
    x: list[float]
    y: list[float]
    title: str


class AnalysisInput(UrbanBaseModel):
    """Pollutant and weather readings fed into the analysis."""

    pm25: float = 0.0
    pm10: float = 0.0
    no2: float = 0.0
    co: float = 0.0
    so2: float = 0.0
    o3: float = 0.0
    temperature: float = 25.0
    humidity: float = 50.0
    wind_speed: float = 0.0
    wind_direction: float | None = None


class AirQualityAnalysis(UrbanBaseModel):
    aqi: AqiReading
    recommendation: HealthRecommendation
    map_data: HeatGrid
    ranges: dict[str, str] = Field(default_factory=lambda: dict(AQI_RANGES))
    input: AnalysisInput
    predictions: dict[str, Any] | None = None


def _truncate_one_decimal(value: float) -> float:
    # EPA reports PM2.5 truncated to 0.1 µg/m³; the epsilon absorbs float noise like 35.5*10.
    return math.floor(value * 10 + 1e-9) / 10


def calculate_aqi(pm25: float) -> AqiReading:
    """Convert a PM2.5 concentration (µg/m³) to an EPA AQI reading.

    Breakpoint bounds are inclusive. Concentrations above 500.4 saturate
    at ``Hazardous``/501; negative input reads as ``Good``/0.
    """
    if pm25 > _TOP_CONCENTRATION:
        return AqiReading(label="Hazardous", value=501)
    if pm25 < 0:
        return AqiReading(label="Good", value=0)

    conc = _truncate_one_decimal(pm25)
    for conc_low, conc_high, aqi_low, aqi_high, label in _PM25_BREAKPOINTS:
        if conc_low <= conc <= conc_high:
            aqi = (aqi_high - aqi_low) / (conc_high - conc_low) * (conc - conc_low) + aqi_low
            return AqiReading(label=label, value=int(math.floor(aqi + 0.5)))
    return AqiReading(label="Good", value=0)


def health_recommendation(aqi: float) -> HealthRecommendation:
    for upper, text, emoji in _RECOMMENDATIONS:
        if aqi <= upper:
            return HealthRecommendation(text=text, emoji=emoji)
    text, emoji = _HAZARDOUS_RECOMMENDATION
    return HealthRecommendation(text=text, emoji=emoji)


def generate_heat_grid(
    pm25: float,
    *,
    nx: int = 100,
    ny: int = 80,
    dx: float = 80.0,
    dy: float = 87.5,
    rng: random.Random | None = None,
) -> HeatGrid:
    """Synthetic PM2.5 surface around *pm25* for the map overlay.

    Each cell is ``pm25 + sin(0.1·x)·cos(0.1·y)·2.5`` plus uniform noise in
    [-1, 1], clipped to [0, 500].
    """
    rng = rng or random.Random()
    x = [i * dx for i in range(nx)]
    y = [j * dy for j in range(ny)]
    data = [
        [
            min(500.0, max(0.0, pm25 + math.sin(xi * 0.1) * math.cos(yi * 0.1) * 2.5 + rng.uniform(-1.0, 1.0)))
            for xi in range(nx)
        ]
        for yi in range(ny)
    ]
    return HeatGrid(data=data, x=x, y=y, title=f"Air Quality Map: {calculate_aqi(pm25).label}")


def analyze_air_quality(readings: AnalysisInput, *, rng: random.Random | None = None) -> AirQualityAnalysis:
    pm25 = max(0.0, readings.pm25)
    aqi = calculate_aqi(pm25)
    return AirQualityAnalysis(
        aqi=aqi,
        recommendation=health_recommendation(aqi.value),
        map_data=generate_heat_grid(pm25, rng=rng),
        input=readings,
    )
