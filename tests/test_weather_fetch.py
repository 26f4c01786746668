# tests/test_weather_fetch.py
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

import src.api.weather_fetch as wf
from src.api.weather_errors import (
    CurrentConditionsFetchFailed,
    ForecastFetchFailed,
    NetworkOrParsingFailure,
)
from src.api.weather_models import UnitSystem


def _http_error(status: int) -> requests.HTTPError:
    resp = MagicMock()
    resp.status_code = status
    return requests.HTTPError(f"{status} error", response=resp)


def test_fetch_current_sends_query_params(monkeypatch, current_payload):
    calls: list[tuple[str, dict]] = []

    def fake_get_json(url, params=None, timeout=None):
        calls.append((url, params))
        return current_payload

    monkeypatch.setattr(wf, "http_get_json", fake_get_json)
    client = wf.WeatherClient(api_key="KEY", base_url="https://owm.test/data/2.5/", lang="es")

    cur = client.fetch_current("Bogotá", UnitSystem.IMPERIAL)

    assert cur.name == "Bogotá"
    url, params = calls[0]
    assert url == "https://owm.test/data/2.5/weather"
    assert params == {"q": "Bogotá", "units": "imperial", "appid": "KEY", "lang": "es"}


def test_fetch_forecast_uses_forecast_endpoint(monkeypatch, forecast_payload):
    urls: list[str] = []

    def fake_get_json(url, params=None, timeout=None):
        urls.append(url)
        return forecast_payload

    monkeypatch.setattr(wf, "http_get_json", fake_get_json)

    series = wf.WeatherClient(api_key="KEY", base_url="https://owm.test").fetch_forecast("Lima", "metric")

    assert urls == ["https://owm.test/forecast"]
    assert len(series.entries) == 10


def test_non_2xx_maps_to_request_specific_failure(monkeypatch):
    def boom(url, params=None, timeout=None):
        raise _http_error(404)

    monkeypatch.setattr(wf, "http_get_json", boom)
    client = wf.WeatherClient(api_key="KEY")

    with pytest.raises(CurrentConditionsFetchFailed):
        client.fetch_current("Atlantis", "metric")
    with pytest.raises(ForecastFetchFailed):
        client.fetch_forecast("Atlantis", "metric")


@pytest.mark.parametrize(
    "exc",
    [requests.ConnectionError("down"), requests.Timeout("slow"), ValueError("no json")],
)
def test_transport_and_decode_errors_are_network_failures(monkeypatch, exc):
    def boom(url, params=None, timeout=None):
        raise exc

    monkeypatch.setattr(wf, "http_get_json", boom)

    with pytest.raises(NetworkOrParsingFailure):
        wf.WeatherClient(api_key="KEY").fetch_current("Lima", "metric")


def test_unexpected_payload_shape_is_parsing_failure(monkeypatch):
    monkeypatch.setattr(wf, "http_get_json", lambda url, params=None, timeout=None: [1, 2])

    with pytest.raises(NetworkOrParsingFailure):
        wf.WeatherClient(api_key="KEY").fetch_forecast("Lima", "metric")


# ---------- credential lookup ----------


def test_get_secret_prefers_top_level(monkeypatch):
    monkeypatch.setattr(
        wf.st,
        "secrets",
        {"OPENWEATHER_API_KEY": "top", "openweather": {"api_key": "nested"}},
        raising=False,
    )
    assert wf.get_api_key() == "top"


def test_get_secret_from_section(monkeypatch):
    monkeypatch.setattr(wf.st, "secrets", {"openweather": {"api_key": " nested "}}, raising=False)
    assert wf.get_api_key() == "nested"


def test_get_secret_env_fallback(monkeypatch):
    monkeypatch.setattr(wf.st, "secrets", {}, raising=False)
    monkeypatch.delenv("VITE_OPENWEATHER_API_KEY", raising=False)
    monkeypatch.setenv("OPENWEATHER_API_KEY", "envkey")
    assert wf.get_api_key() == "envkey"


def test_get_secret_legacy_env_name(monkeypatch):
    monkeypatch.setattr(wf.st, "secrets", {}, raising=False)
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    monkeypatch.setenv("VITE_OPENWEATHER_API_KEY", "vite")
    assert wf.get_api_key() == "vite"


def test_get_api_key_missing(monkeypatch):
    monkeypatch.setattr(wf.st, "secrets", {}, raising=False)
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
    monkeypatch.setenv("VITE_OPENWEATHER_API_KEY", "   ")
    assert wf.get_api_key() is None


def test_broken_secrets_fall_back_to_env(monkeypatch):
    class Unreadable:
        def __contains__(self, key):
            raise FileNotFoundError("no secrets.toml")

    monkeypatch.setattr(wf.st, "secrets", Unreadable(), raising=False)
    monkeypatch.setenv("OPENWEATHER_API_KEY", "envkey")
    assert wf.get_api_key() == "envkey"
