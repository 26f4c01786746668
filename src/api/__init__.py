# src/api/__init__.py
from .weather_fetch import WeatherClient as WeatherClient, get_api_key as get_api_key
from .weather_forecast import build_forecast_points as build_forecast_points
from .weather_models import SessionState as SessionState, UnitSystem as UnitSystem
from .weather_session import WeatherSession as WeatherSession
