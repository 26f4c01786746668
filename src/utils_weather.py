# src/utils_weather.py
"""Display formatting for weather values.

Every formatter is total: missing or non-numeric input yields the
placeholder instead of raising, so the UI can render half-filled payloads.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from src.config import PLACEHOLDER, TZ

TEMPERATURE_UNIT: dict[str, str] = {
    "metric": "°C",
    "imperial": "°F",
}

WIND_UNIT: dict[str, str] = {
    "metric": "m/s",
    "imperial": "mph",
}


def _as_number(value: Any) -> float | None:
    """Return value as a finite float, or None for anything else (bool included)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def temperature_unit(units: str) -> str:
    return TEMPERATURE_UNIT.get(str(units), TEMPERATURE_UNIT["metric"])


def wind_unit(units: str) -> str:
    return WIND_UNIT.get(str(units), WIND_UNIT["metric"])


def format_temperature(value: Any, units: str) -> str:
    """21.6, 'metric' -> '22°C'."""
    number = _as_number(value)
    if number is None:
        return PLACEHOLDER
    return f"{round_half_up(number)}{temperature_unit(units)}"


def format_wind_speed(value: Any, units: str) -> str:
    number = _as_number(value)
    if number is None:
        return PLACEHOLDER
    return f"{number:.1f} {wind_unit(units)}"


def format_visibility(value: Any) -> str:
    """Meters -> kilometers with one decimal."""
    number = _as_number(value)
    if number is None:
        return PLACEHOLDER
    return f"{number / 1000:.1f} km"


def format_percent(value: Any) -> str:
    number = _as_number(value)
    if number is None:
        return f"{PLACEHOLDER}%"
    return f"{round_half_up(number)}%"


def format_pressure(value: Any) -> str:
    number = _as_number(value)
    if number is None:
        return f"{PLACEHOLDER} hPa"
    return f"{round_half_up(number)} hPa"


def utc_pinned(timestamp: float, utc_offset: float) -> datetime:
    """Shift an epoch timestamp by a raw UTC offset and pin the result to UTC.

    The returned clock time is the location's local time; formatting it never
    applies the viewer's own timezone on top.
    """
    return datetime.fromtimestamp(timestamp + utc_offset, tz=timezone.utc)


def format_sun_event(timestamp: Any, utc_offset: Any = 0) -> str:
    """Sunrise/sunset epoch seconds -> 'HH:MM' local to the location."""
    ts = _as_number(timestamp)
    if not ts:
        return PLACEHOLDER
    offset = _as_number(utc_offset) or 0.0
    try:
        return utc_pinned(ts, offset).strftime("%H:%M")
    except (OverflowError, OSError, ValueError):
        return PLACEHOLDER


def format_updated_at(instant: datetime | None) -> str | None:
    if instant is None:
        return None
    if instant.tzinfo is not None:
        instant = instant.astimezone(TZ)
    return instant.strftime("%H:%M:%S")
