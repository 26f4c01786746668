# src/api/weather_models.py
"""Typed shapes for the OpenWeather payloads and for the session state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from src.api.weather_utils import as_float, as_int, as_str, dig


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class CurrentConditions:
    """Normalized /weather response. Numeric fields are None when absent."""

    name: str
    country: str
    temperature: float | None
    feels_like: float | None
    humidity: int | None
    wind_speed: float | None
    pressure: int | None
    visibility: int | None  # meters
    cloud_cover: int | None
    sunrise: int | None  # epoch seconds
    sunset: int | None
    timezone_offset: int  # seconds east of UTC
    description: str | None
    icon: str | None


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: int | None
    temperature: float | None
    humidity: int | None
    pop: float | None  # 0..1


@dataclass(frozen=True)
class ForecastSeries:
    entries: tuple[ForecastEntry, ...]
    timezone_offset: int = 0


@dataclass(frozen=True)
class ForecastPoint:
    label: str
    temperature: float | None
    humidity: int | None
    precipitation: int  # 0..100


@dataclass(frozen=True)
class SessionState:
    """Snapshot of one dashboard session; replaced wholesale on every change."""

    city: str
    units: UnitSystem
    current: CurrentConditions | None = None
    forecast: ForecastSeries | None = None
    loading: bool = False
    error: str | None = None
    last_updated_at: datetime | None = None


def parse_current(payload: Any) -> CurrentConditions:
    """Build CurrentConditions from a raw /weather JSON document."""
    if not isinstance(payload, Mapping):
        raise ValueError(f"current conditions payload is {type(payload).__name__}, expected object")

    return CurrentConditions(
        name=as_str(payload.get("name")) or "",
        country=as_str(dig(payload, "sys", "country")) or "",
        temperature=as_float(dig(payload, "main", "temp")),
        feels_like=as_float(dig(payload, "main", "feels_like")),
        humidity=as_int(dig(payload, "main", "humidity")),
        wind_speed=as_float(dig(payload, "wind", "speed")),
        pressure=as_int(dig(payload, "main", "pressure")),
        visibility=as_int(payload.get("visibility")),
        cloud_cover=as_int(dig(payload, "clouds", "all")),
        sunrise=as_int(dig(payload, "sys", "sunrise")),
        sunset=as_int(dig(payload, "sys", "sunset")),
        timezone_offset=as_int(payload.get("timezone")) or 0,
        description=as_str(dig(payload, "weather", 0, "description")),
        icon=as_str(dig(payload, "weather", 0, "icon")),
    )


def _parse_entry(item: Any) -> ForecastEntry:
    return ForecastEntry(
        timestamp=as_int(dig(item, "dt")),
        temperature=as_float(dig(item, "main", "temp")),
        humidity=as_int(dig(item, "main", "humidity")),
        pop=as_float(dig(item, "pop")),
    )


def parse_forecast(payload: Any) -> ForecastSeries:
    """Build ForecastSeries from a raw /forecast JSON document."""
    if not isinstance(payload, Mapping):
        raise ValueError(f"forecast payload is {type(payload).__name__}, expected object")

    items = payload.get("list") or []
    if not isinstance(items, list):
        raise ValueError("forecast payload 'list' is not an array")

    return ForecastSeries(
        entries=tuple(_parse_entry(item) for item in items),
        timezone_offset=as_int(dig(payload, "city", "timezone")) or 0,
    )
