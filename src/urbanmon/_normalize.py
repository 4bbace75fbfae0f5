"""Normalization helpers.

Centralizes defensive parsing of text cells and loosely typed payloads.
"""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime
from typing import Any

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n", "off", ""})


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def safe_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    normalized = str(value).strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    return default


def safe_json(value: Any) -> Any:
    """Decode a JSON text cell, returning ``None`` for blanks or garbage."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Convert a datetime, ISO-8601 string or epoch number to an aware UTC datetime.

    Epoch values may be seconds or milliseconds. Naive datetimes are read
    as UTC. Returns ``None`` for ``None`` and blank strings.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"unsupported timestamp value: {value!r}")


def format_timestamp(value: datetime | None) -> str:
    """ISO-8601 text for a timestamp cell (blank for ``None``)."""
    if value is None:
        return ""
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like a dashboard would."""
    return int(math.floor(value + 0.5))
