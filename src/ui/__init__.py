"""Expose dashboard card render functions."""

from .card_forecast_chart import card_forecast_chart
from .card_weather import card_weather

__all__ = [
    "card_forecast_chart",
    "card_weather",
]
