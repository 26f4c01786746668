from __future__ import annotations

from collections.abc import Sequence

from src.api.weather_models import ForecastEntry, ForecastPoint, ForecastSeries
from src.config import FORECAST_CHIPS_MAX, FORECAST_POINTS_MAX, PLACEHOLDER
from src.utils_weather import round_half_up, utc_pinned

# datetime.weekday() order, es-ES short forms
WEEKDAYS_ES: tuple[str, ...] = ("lun", "mar", "mié", "jue", "vie", "sáb", "dom")


def _point_label(timestamp: int | None, utc_offset: int) -> str:
    """'mar, 15:00' in the forecast location's own clock."""
    if timestamp is None:
        return PLACEHOLDER
    try:
        local = utc_pinned(timestamp, utc_offset)
    except (OverflowError, OSError, ValueError):
        return PLACEHOLDER
    return f"{WEEKDAYS_ES[local.weekday()]}, {local:%H:%M}"


def _precipitation_pct(pop: float | None) -> int:
    pct = round_half_up((pop or 0.0) * 100)
    return max(0, min(100, pct))


def _build_point(entry: ForecastEntry, utc_offset: int) -> ForecastPoint:
    return ForecastPoint(
        label=_point_label(entry.timestamp, utc_offset),
        temperature=entry.temperature,
        humidity=entry.humidity,
        precipitation=_precipitation_pct(entry.pop),
    )


def build_forecast_points(
    series: ForecastSeries | None,
    limit: int = FORECAST_POINTS_MAX,
) -> tuple[ForecastPoint, ...]:
    """
    Project the 3-hourly forecast onto display points.

    Keeps the first ``limit`` entries in chronological order. No series or
    an empty one means "no data yet" and yields an empty tuple.
    """
    if series is None or not series.entries:
        return ()

    return tuple(_build_point(entry, series.timezone_offset) for entry in series.entries[:limit])


def forecast_chips(points: Sequence[ForecastPoint]) -> tuple[ForecastPoint, ...]:
    """The short list shown next to the current conditions."""
    return tuple(points[:FORECAST_CHIPS_MAX])
