"""Classification bands for simulated sensor values.

These operate on the dashboard's simulated AQI scale. The EPA PM2.5
conversion lives in :mod:`urbanmon.analysis` and must not be mixed in.
"""

from __future__ import annotations

from typing import Literal

from urbanmon._constants import (
    AQI_BANDS,
    CONGESTION_BANDS,
    CONGESTION_SUMMARY_BANDS,
    HOTSPOT_SEVERITY_HIGH,
    HOTSPOT_SEVERITY_MEDIUM,
)

Severity = Literal["L", "M", "H"]

_SEVERITY_DESCRIPTIONS: dict[str, str] = {
    "H": "Severe congestion",
    "M": "Heavy traffic",
    "L": "Moderate congestion",
}


def _band(value: float, table: tuple[tuple[float, str, str], ...]) -> tuple[str, str]:
    for upper, label, color in table:
        if value <= upper:
            return label, color
    _, label, color = table[-1]
    return label, color


def aqi_status(aqi: float) -> str:
    """Six-band label: Good (≤50) through Hazardous (>300)."""
    return _band(aqi, AQI_BANDS)[0]


def aqi_color(aqi: float) -> str:
    return _band(aqi, AQI_BANDS)[1]


def congestion_status(level: float) -> str:
    """Four-band label: Light (≤30), Moderate (≤60), Heavy (≤80), Severe."""
    return _band(level, CONGESTION_BANDS)[0]


def congestion_color(level: float) -> str:
    return _band(level, CONGESTION_BANDS)[1]


def congestion_summary(level: float) -> str:
    """Dashboard headline wording for an average congestion level."""
    for upper, label in CONGESTION_SUMMARY_BANDS:
        if level <= upper:
            return label
    return CONGESTION_SUMMARY_BANDS[-1][1]


def hotspot_severity(level: float) -> Severity:
    """``H`` above 80%, ``M`` above 60%, otherwise ``L``."""
    if level > HOTSPOT_SEVERITY_HIGH:
        return "H"
    if level > HOTSPOT_SEVERITY_MEDIUM:
        return "M"
    return "L"


def hotspot_description(severity: Severity) -> str:
    return _SEVERITY_DESCRIPTIONS[severity]
