# src/ui/card_weather.py
from __future__ import annotations

import html
import logging
from collections.abc import Sequence
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeout
from urllib.parse import quote

import streamlit as st

from src.api.weather_fetch import WeatherClient, get_api_key
from src.api.weather_models import ForecastPoint, UnitSystem
from src.api.weather_session import WeatherSession
from src.config import BACKGROUND_IMAGE_URL, HTTP_TIMEOUT_S, WEATHER_ICON_URL
from src.ui.card_forecast_chart import card_forecast_chart
from src.ui.common import metric_card_html, section_title, status_message
from src.utils_weather import format_temperature
from src.viewmodels.weather import WeatherView, build_weather_view

logger = logging.getLogger("meteodash")

SESSION_KEY = "weather_session"
CITY_INPUT_KEY = "weather_city_input"

# a cycle is two parallel requests, each bounded by the HTTP timeout
AWAIT_TIMEOUT_S = HTTP_TIMEOUT_S + 2.0


def get_session() -> WeatherSession:
    """The session of this browser tab; created and started on first use."""
    session = st.session_state.get(SESSION_KEY)
    if session is None or session.closed:
        session = WeatherSession(WeatherClient(api_key=get_api_key()))
        st.session_state[SESSION_KEY] = session
        _wait(session.start())
    return session


def _wait(future: Future[bool] | None) -> None:
    """Give a dispatched cycle a chance to land before this rerun renders."""
    if future is None:
        return
    try:
        future.result(timeout=AWAIT_TIMEOUT_S)
    except FuturesTimeout:
        logger.info("Weather cycle still running; showing loading state")


# --- callbacks handed to the widgets ------------------------------------------
def on_city_submit(session: WeatherSession) -> None:
    _wait(session.handle_city_submit(str(st.session_state.get(CITY_INPUT_KEY, ""))))


def on_unit_change(session: WeatherSession, units: str) -> None:
    _wait(session.handle_unit_change(units))


def on_refresh(session: WeatherSession) -> None:
    _wait(session.handle_manual_refresh())


# --- small html helpers --------------------------------------------------------
def background_image_url(key: str | None) -> str | None:
    if not key:
        return None
    return BACKGROUND_IMAGE_URL.format(query=quote(key))


def icon_url(icon: str | None) -> str | None:
    if not icon:
        return None
    return WEATHER_ICON_URL.format(icon=quote(icon))


def chips_html(chips: Sequence[ForecastPoint], units: str) -> str:
    return "".join(
        "<span class='forecast-chip'>"
        f"<strong>{html.escape(p.label)}</strong>"
        f"<span>{format_temperature(p.temperature, units)}</span>"
        f"<span>{p.precipitation}% lluvia</span>"
        "</span>"
        for p in chips
    )


def metrics_grid_html(view: WeatherView) -> str:
    cards = "".join(metric_card_html(m.label, m.value, m.helper) for m in view.metrics)
    return f"<section class='metrics-grid'>{cards}</section>"


def current_weather_html(view: WeatherView) -> str:
    description = (
        f"<p class='current-weather__description'>{html.escape(view.description)}</p>"
        if view.description
        else ""
    )
    src = icon_url(view.icon)
    icon = (
        f"<img class='current-weather__icon' src='{src}' "
        f"alt='{html.escape(view.description or '')}' loading='lazy'/>"
        if src
        else ""
    )
    return f"""
        <section class="current-weather">
          <div class="current-weather__summary">
            <div>
              <p class="current-weather__location">{html.escape(view.location_label)}</p>
              <p class="current-weather__temperature">{view.temperature}</p>
              {description}
            </div>
            <div class="current-weather__visual">{icon}</div>
          </div>
          <div class="forecast-overview">
            <h2>Pronóstico próximo</h2>
            <div class="forecast-overview__chips">{chips_html(view.chips, view.units)}</div>
          </div>
        </section>
    """


# --- sections ------------------------------------------------------------------
def _apply_background(key: str | None) -> None:
    url = background_image_url(key)
    if url is None:
        return
    st.markdown(
        f"<style>:root {{ --city-background-image: url(\"{url}\"); }}</style>",
        unsafe_allow_html=True,
    )


def _render_header(session: WeatherSession, view: WeatherView) -> None:
    left, right = st.columns([3, 1], gap="small")
    with left:
        section_title("<h1>Mikens Meteorología</h1>", mt=0, mb=0)
        st.caption(
            "Visualiza el clima en tiempo real con pronósticos actualizados cada 10 minutos."
        )
    with right:
        if view.last_updated:
            st.caption(f"Actualizado a las {view.last_updated}")
        st.button(
            "Actualizando…" if view.loading else "Actualizar ahora",
            key="weather_refresh",
            on_click=on_refresh,
            args=(session,),
            disabled=view.loading,
        )


def _render_controls(session: WeatherSession, view: WeatherView) -> None:
    if CITY_INPUT_KEY not in st.session_state:
        st.session_state[CITY_INPUT_KEY] = view.city

    search_col, units_col = st.columns([3, 1], gap="small")
    with search_col:
        with st.form("weather_city_form", border=False):
            st.text_input("Ciudad", key=CITY_INPUT_KEY, placeholder="Ej. Bogotá, MX")
            st.form_submit_button(
                "Buscar",
                on_click=on_city_submit,
                args=(session,),
                disabled=view.loading,
            )
    with units_col:
        c_col, f_col = st.columns(2, gap="small")
        for col, units, glyph in (
            (c_col, UnitSystem.METRIC, "°C"),
            (f_col, UnitSystem.IMPERIAL, "°F"),
        ):
            with col:
                st.button(
                    glyph,
                    key=f"weather_units_{units}",
                    on_click=on_unit_change,
                    args=(session, units),
                    disabled=view.units == units or view.loading,
                    type="primary" if view.units == units else "secondary",
                )


def card_weather() -> None:
    """Render the whole weather dashboard for the current browser session."""
    try:
        session = get_session()
        view = build_weather_view(session.state)

        _apply_background(view.background_key)
        _render_header(session, view)
        _render_controls(session, view)

        if view.error:
            status_message(view.error, error=True)

        if view.has_weather:
            st.markdown(current_weather_html(view), unsafe_allow_html=True)
            st.markdown(metrics_grid_html(view), unsafe_allow_html=True)
        elif view.loading:
            status_message("Cargando datos meteorológicos…")

        card_forecast_chart(view.chart, loading=view.loading)

    except Exception as e:
        logger.exception("Weather card failed")
        status_message(f"Error: {e}", error=True)
