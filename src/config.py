# config.py
"""Configuration settings for the Mikens Meteorología dashboard."""

import os
from zoneinfo import ZoneInfo

HTTP_TIMEOUT_S: float = 8.0

DEV: bool = os.environ.get("DEV", "0") == "1"

# ------------------- UPSTREAM API -------------------

WEATHER_API_BASE: str = os.getenv("METEO_API_BASE", "https://api.openweathermap.org/data/2.5")
"""OpenWeather REST base URL (current conditions: /weather, forecast: /forecast)."""

WEATHER_ICON_URL: str = "https://openweathermap.org/img/wn/{icon}@4x.png"

WEATHER_LANG: str = os.getenv("METEO_LANG", "es")
"""Language passed to the upstream API for descriptions."""

API_KEY_NAME: str = "OPENWEATHER_API_KEY"
LEGACY_API_KEY_NAME: str = "VITE_OPENWEATHER_API_KEY"

# ------------------- SESSION -------------------

DEFAULT_CITY: str = os.getenv("METEO_DEFAULT_CITY", "Madrid")
DEFAULT_UNITS: str = "metric"

REFRESH_INTERVAL_S: float = float(os.getenv("METEO_REFRESH_S", "600"))
"""Periodic refresh interval (10 minutes)."""

PAGE_AUTOREFRESH_MS: int = 60_000
"""How often the Streamlit page reruns to pick up background refreshes."""

TZ: ZoneInfo = ZoneInfo(os.getenv("METEO_TZ", "Europe/Madrid"))
"""Display timezone for the 'last updated' clock."""

# ------------------- FORECAST -------------------

FORECAST_POINTS_MAX: int = 8
"""Raw 3-hour forecast entries kept for the chart (24 h)."""

FORECAST_CHIPS_MAX: int = 4

PLACEHOLDER: str = "--"

# ------------------- UI / PLOTLY -------------------

BACKGROUND_IMAGE_URL: str = "https://source.unsplash.com/1600x900/?{query},city,skyline"

COLOR_TEMPERATURE: str = "#2563eb"
COLOR_TEMPERATURE_FILL: str = "rgba(37, 99, 235, 0.18)"
COLOR_HUMIDITY: str = "#f97316"
COLOR_GRID: str = "rgba(148, 163, 184, 0.2)"

PLOTLY_CONFIG: dict = {
    "displayModeBar": False,
    "responsive": True,
}
