"""Shared OpenWeather payloads for the weather tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def current_payload() -> dict:
    """A /weather response for Bogotá (trimmed to the fields we read)."""
    return {
        "name": "Bogotá",
        "timezone": -18000,
        "visibility": 9000,
        "main": {
            "temp": 14.6,
            "feels_like": 13.9,
            "humidity": 77,
            "pressure": 1028,
        },
        "wind": {"speed": 3.09},
        "clouds": {"all": 75},
        "sys": {"country": "CO", "sunrise": 1700045400, "sunset": 1700088900},
        "weather": [{"description": "nubes rotas", "icon": "04d"}],
    }


@pytest.fixture
def forecast_payload() -> dict:
    """A /forecast response with 10 three-hourly entries."""
    base = 1700000000
    return {
        "city": {"name": "Bogotá", "timezone": 7200},
        "list": [
            {
                "dt": base + i * 10800,
                "main": {"temp": 10.0 + i, "humidity": 60 + i},
                "pop": i / 10,
            }
            for i in range(10)
        ],
    }
