from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import requests
import streamlit as st

from src.api.http import http_get_json
from src.api.weather_errors import (
    CurrentConditionsFetchFailed,
    ForecastFetchFailed,
    NetworkOrParsingFailure,
)
from src.api.weather_models import (
    CurrentConditions,
    ForecastSeries,
    UnitSystem,
    parse_current,
    parse_forecast,
)
from src.config import (
    API_KEY_NAME,
    HTTP_TIMEOUT_S,
    LEGACY_API_KEY_NAME,
    WEATHER_API_BASE,
    WEATHER_LANG,
)

logger = logging.getLogger("meteodash")


def _get_secret(name: str) -> str | None:
    """Look a setting up in Streamlit secrets first, then in the environment."""
    try:
        if name in st.secrets:
            secret_val = st.secrets.get(name)
            if secret_val is not None and str(secret_val).strip():
                return str(secret_val).strip()

        section = st.secrets.get("openweather")
        if isinstance(section, Mapping) and name == API_KEY_NAME:
            nested = section.get("api_key")
            if nested is not None and str(nested).strip():
                return str(nested).strip()
    except Exception as e:
        # no secrets.toml at all is the normal case outside deployments
        logger.debug("secrets lookup for %s skipped: %s", name, e)

    val = os.getenv(name)
    if val is not None and val.strip():
        return val.strip()

    return None


def get_api_key() -> str | None:
    """OpenWeather key, or None when it is not configured anywhere."""
    return _get_secret(API_KEY_NAME) or _get_secret(LEGACY_API_KEY_NAME)


@dataclass
class WeatherClient:
    """Thin OpenWeather client: one GET per call, no retries, no caching."""

    api_key: str | None
    base_url: str = WEATHER_API_BASE
    lang: str = WEATHER_LANG
    timeout: float = HTTP_TIMEOUT_S

    def _params(self, city: str, units: UnitSystem | str) -> dict[str, Any]:
        return {
            "q": city,
            "units": str(units),
            "appid": self.api_key,
            "lang": self.lang,
        }

    def _get(self, endpoint: str, city: str, units: UnitSystem | str, failure: type) -> Any:
        url = f"{self.base_url.rstrip('/')}/{endpoint}"
        try:
            return http_get_json(url, params=self._params(city, units), timeout=self.timeout)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning("%s for %r failed with HTTP %s", endpoint, city, status)
            raise failure() from e
        except (requests.RequestException, ValueError) as e:
            raise NetworkOrParsingFailure() from e

    def fetch_current(self, city: str, units: UnitSystem | str) -> CurrentConditions:
        """Current conditions for ``city``; raises CurrentConditionsFetchFailed on non-2xx."""
        payload = self._get("weather", city, units, CurrentConditionsFetchFailed)
        try:
            return parse_current(payload)
        except ValueError as e:
            raise NetworkOrParsingFailure() from e

    def fetch_forecast(self, city: str, units: UnitSystem | str) -> ForecastSeries:
        """5 day / 3 hour forecast for ``city``; raises ForecastFetchFailed on non-2xx."""
        payload = self._get("forecast", city, units, ForecastFetchFailed)
        try:
            return parse_forecast(payload)
        except ValueError as e:
            raise NetworkOrParsingFailure() from e
