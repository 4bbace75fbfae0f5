from __future__ import annotations

import random

import pytest

from urbanmon.analysis import (
    AQI_RANGES,
    AnalysisInput,
    analyze_air_quality,
    calculate_aqi,
    generate_heat_grid,
    health_recommendation,
)


@pytest.mark.parametrize(
    ("pm25", "label", "value"),
    [
        (0.0, "Good", 0),
        (12.0, "Good", 50),
        (12.04, "Good", 50),
        (12.1, "Moderate", 51),
        (35.4, "Moderate", 100),
        (35.5, "Unhealthy for Sensitive Groups", 101),
        (55.4, "Unhealthy for Sensitive Groups", 150),
        (160.0, "Very Unhealthy", 210),
        (500.4, "Hazardous", 500),
    ],
)
def test_calculate_aqi_breakpoints(pm25: float, label: str, value: int) -> None:
    reading = calculate_aqi(pm25)

    assert reading.label == label
    assert reading.value == value


def test_calculate_aqi_out_of_range() -> None:
    assert calculate_aqi(600).model_dump() == {"label": "Hazardous", "value": 501}
    assert calculate_aqi(-3).model_dump() == {"label": "Good", "value": 0}


def test_health_recommendation_bands() -> None:
    assert health_recommendation(50).text == "Air quality is good. No precautions needed."
    assert health_recommendation(175).text == "Wear a mask and limit outdoor exposure."
    assert health_recommendation(450).emoji == "⚠️"


def test_heat_grid_shape_and_bounds() -> None:
    grid = generate_heat_grid(499.5, rng=random.Random(7))

    assert len(grid.x) == 100
    assert len(grid.y) == 80
    assert len(grid.data) == 80
    assert all(len(row) == 100 for row in grid.data)
    assert all(0.0 <= cell <= 500.0 for row in grid.data for cell in row)
    assert grid.x[1] == pytest.approx(80.0)
    assert grid.y[1] == pytest.approx(87.5)
    assert grid.title == "Air Quality Map: Hazardous"


def test_heat_grid_is_reproducible_with_seeded_rng() -> None:
    first = generate_heat_grid(40.0, nx=5, ny=4, rng=random.Random(1))
    second = generate_heat_grid(40.0, nx=5, ny=4, rng=random.Random(1))

    assert first == second


def test_analyze_air_quality_combines_parts() -> None:
    analysis = analyze_air_quality(AnalysisInput(pm25=35.5, no2=40), rng=random.Random(0))

    assert analysis.aqi.value == 101
    assert analysis.recommendation.text == "Reduce outdoor activities for sensitive groups."
    assert analysis.ranges == AQI_RANGES
    wire = analysis.to_wire()
    assert set(wire) >= {"aqi", "recommendation", "mapData", "ranges", "input"}
    assert wire["input"]["windSpeed"] == 0.0
    assert wire["predictions"] is None
