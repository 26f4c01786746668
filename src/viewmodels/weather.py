from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache

from src.api.weather_forecast import build_forecast_points, forecast_chips
from src.api.weather_models import (
    CurrentConditions,
    ForecastPoint,
    ForecastSeries,
    SessionState,
    UnitSystem,
)
from src.utils_weather import (
    format_percent,
    format_pressure,
    format_sun_event,
    format_temperature,
    format_updated_at,
    format_visibility,
    format_wind_speed,
    temperature_unit,
)


@dataclass(frozen=True)
class Metric:
    """One metric card: label, formatted value, optional small print."""

    label: str
    value: str
    helper: str | None = None


@dataclass(frozen=True)
class ChartData:
    """Two series on independent scales: temperature (left), humidity 0..100 (right)."""

    labels: tuple[str, ...]
    temperatures: tuple[float | None, ...]
    humidities: tuple[int | None, ...]
    temperature_label: str  # "Temperatura (°C)"
    humidity_label: str
    temperature_unit: str


@dataclass(frozen=True)
class WeatherView:
    """Everything the presentation layer needs; plain data only."""

    city: str
    units: UnitSystem
    location_label: str
    background_key: str | None
    temperature: str
    description: str | None
    icon: str | None
    metrics: tuple[Metric, ...]
    forecast_points: tuple[ForecastPoint, ...]
    chips: tuple[ForecastPoint, ...]
    chart: ChartData | None
    loading: bool
    error: str | None
    last_updated: str | None

    @property
    def has_weather(self) -> bool:
        return bool(self.metrics)


def build_metrics(
    current: CurrentConditions | None,
    units: UnitSystem | str,
    points: Sequence[ForecastPoint] = (),
) -> tuple[Metric, ...]:
    if current is None:
        return ()

    rain_hint = f"Próx. lluvia: {points[0].precipitation}%" if points else None

    return (
        Metric("Sensación térmica", format_temperature(current.feels_like, units)),
        Metric("Humedad relativa", format_percent(current.humidity), rain_hint),
        Metric("Viento", format_wind_speed(current.wind_speed, units)),
        Metric("Presión", format_pressure(current.pressure)),
        Metric("Visibilidad", format_visibility(current.visibility)),
        Metric("Nubosidad", format_percent(current.cloud_cover)),
        Metric("Salida del sol", format_sun_event(current.sunrise, current.timezone_offset)),
        Metric("Puesta del sol", format_sun_event(current.sunset, current.timezone_offset)),
    )


def location_label(current: CurrentConditions | None, city: str) -> str:
    if current is None:
        return city
    if not current.country:
        return current.name
    return f"{current.name}, {current.country}"


def background_key(current: CurrentConditions | None, city: str) -> str | None:
    """City name used to pick a background picture; resolved name wins over the typed one."""
    source = current.name if current is not None and current.name else city
    key = (source or "").split(",")[0].strip()
    return key or None


def build_chart_data(points: Sequence[ForecastPoint], units: UnitSystem | str) -> ChartData | None:
    if not points:
        return None

    unit = temperature_unit(str(units))
    return ChartData(
        labels=tuple(p.label for p in points),
        temperatures=tuple(p.temperature for p in points),
        humidities=tuple(p.humidity for p in points),
        temperature_label=f"Temperatura ({unit})",
        humidity_label="Humedad (%)",
        temperature_unit=unit,
    )


@dataclass(frozen=True)
class _Derived:
    location_label: str
    background_key: str | None
    temperature: str
    description: str | None
    icon: str | None
    metrics: tuple[Metric, ...]
    forecast_points: tuple[ForecastPoint, ...]
    chips: tuple[ForecastPoint, ...]
    chart: ChartData | None


@lru_cache(maxsize=16)
def _derive(
    current: CurrentConditions | None,
    forecast: ForecastSeries | None,
    units: UnitSystem,
    city: str,
) -> _Derived:
    points = build_forecast_points(forecast)
    return _Derived(
        location_label=location_label(current, city),
        background_key=background_key(current, city),
        temperature=format_temperature(current.temperature if current else None, units),
        description=current.description if current else None,
        icon=current.icon if current else None,
        metrics=build_metrics(current, units, points),
        forecast_points=points,
        chips=forecast_chips(points),
        chart=build_chart_data(points, units),
    )


def build_weather_view(state: SessionState) -> WeatherView:
    """
    Derive the presentation payload from a session snapshot.

    The data-heavy part is memoized on (current, forecast, units, city), so
    calling this on every Streamlit rerun only re-derives after a commit
    actually changed those fields.
    """
    derived = _derive(state.current, state.forecast, state.units, state.city)
    return WeatherView(
        city=state.city,
        units=state.units,
        location_label=derived.location_label,
        background_key=derived.background_key,
        temperature=derived.temperature,
        description=derived.description,
        icon=derived.icon,
        metrics=derived.metrics,
        forecast_points=derived.forecast_points,
        chips=derived.chips,
        chart=derived.chart,
        loading=state.loading,
        error=state.error,
        last_updated=format_updated_at(state.last_updated_at),
    )
