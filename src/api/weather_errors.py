# src/api/weather_errors.py
"""Failures of a single fetch cycle.

Each kind carries the message shown to the user in the error banner. None of
them is fatal to the session; the next trigger simply tries again.
"""

from __future__ import annotations

from src.config import API_KEY_NAME


class WeatherError(Exception):
    """Base class; ``message`` is the user-facing (Spanish) text."""

    default_message = "Ocurrió un error inesperado."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(WeatherError):
    default_message = (
        "Falta la clave de API de OpenWeather. "
        f"Agrega {API_KEY_NAME} a .streamlit/secrets.toml o a las variables de entorno."
    )


class InvalidLocationInput(WeatherError):
    default_message = "Ingresa una ciudad válida para continuar."


class CurrentConditionsFetchFailed(WeatherError):
    default_message = "No encontramos datos para esa ubicación."


class ForecastFetchFailed(WeatherError):
    default_message = "Ocurrió un problema al obtener el pronóstico extendido."


class NetworkOrParsingFailure(WeatherError):
    default_message = "No pudimos conectar con el servicio meteorológico. Inténtalo de nuevo."
