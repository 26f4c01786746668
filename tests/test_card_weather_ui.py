from __future__ import annotations

import importlib
from concurrent.futures import Future

import pytest

from src.api.weather_models import ForecastPoint, SessionState, UnitSystem, parse_current, parse_forecast

card_weather_module = importlib.import_module("src.ui.card_weather")


class DummySt:
    """Minimal Streamlit stand-in for the card_weather tests."""

    def __init__(self):
        self.session_state: dict[str, object] = {}
        self.markdowns: list[str] = []

    def markdown(self, body, unsafe_allow_html=False):
        self.markdowns.append(body)


def _done(value):
    fut = Future()
    fut.set_result(value)
    return fut


class FakeSession:
    def __init__(self, state):
        self.state = state
        self.closed = False
        self.started = 0
        self.submitted: list[str] = []
        self.units: list[str] = []
        self.refreshes = 0

    def start(self):
        self.started += 1
        return _done(True)

    def handle_city_submit(self, raw):
        self.submitted.append(raw)
        return _done(True)

    def handle_unit_change(self, units):
        self.units.append(units)
        return _done(True)

    def handle_manual_refresh(self):
        self.refreshes += 1
        return _done(True)


@pytest.fixture
def dummy_st(monkeypatch):
    d = DummySt()
    monkeypatch.setattr(card_weather_module, "st", d)
    return d


@pytest.fixture
def full_state(current_payload, forecast_payload):
    return SessionState(
        city="Bogotá",
        units=UnitSystem.METRIC,
        current=parse_current(current_payload),
        forecast=parse_forecast(forecast_payload),
    )


# ---------- session per browser tab ----------


def test_get_session_creates_starts_and_reuses(monkeypatch, dummy_st):
    created = []

    def fake_session(client):
        created.append(client)
        return FakeSession(SessionState(city="Madrid", units=UnitSystem.METRIC))

    monkeypatch.setattr(card_weather_module, "WeatherSession", fake_session)
    monkeypatch.setattr(card_weather_module, "get_api_key", lambda: "KEY")

    first = card_weather_module.get_session()
    second = card_weather_module.get_session()

    assert first is second
    assert len(created) == 1
    assert created[0].api_key == "KEY"
    assert first.started == 1
    assert dummy_st.session_state["weather_session"] is first


def test_get_session_replaces_closed_session(monkeypatch, dummy_st):
    old = FakeSession(SessionState(city="Madrid", units=UnitSystem.METRIC))
    old.closed = True
    dummy_st.session_state["weather_session"] = old
    monkeypatch.setattr(
        card_weather_module,
        "WeatherSession",
        lambda client: FakeSession(SessionState(city="Madrid", units=UnitSystem.METRIC)),
    )
    monkeypatch.setattr(card_weather_module, "get_api_key", lambda: None)

    assert card_weather_module.get_session() is not old


def test_wait_tolerates_slow_cycle(monkeypatch):
    monkeypatch.setattr(card_weather_module, "AWAIT_TIMEOUT_S", 0.01)
    card_weather_module._wait(Future())
    card_weather_module._wait(None)


# ---------- widget callbacks ----------


def test_callbacks_forward_to_session(dummy_st):
    session = FakeSession(SessionState(city="Madrid", units=UnitSystem.METRIC))
    dummy_st.session_state["weather_city_input"] = "  Lima "

    card_weather_module.on_city_submit(session)
    card_weather_module.on_unit_change(session, UnitSystem.IMPERIAL)
    card_weather_module.on_refresh(session)

    assert session.submitted == ["  Lima "]
    assert session.units == [UnitSystem.IMPERIAL]
    assert session.refreshes == 1


# ---------- html helpers ----------


def test_background_and_icon_urls():
    assert "S%C3%A3o%20Paulo" in card_weather_module.background_image_url("São Paulo")
    assert card_weather_module.background_image_url(None) is None
    assert card_weather_module.icon_url("04d").endswith("/04d@4x.png")
    assert card_weather_module.icon_url("") is None


def test_chips_html_escapes_and_formats():
    chips = (ForecastPoint(label="<b>mié</b>, 00:13", temperature=21.6, humidity=50, precipitation=30),)

    out = card_weather_module.chips_html(chips, "metric")

    assert "&lt;b&gt;mié&lt;/b&gt;" in out
    assert "22°C" in out
    assert "30% lluvia" in out


def test_current_weather_and_metrics_html(full_state):
    view = card_weather_module.build_weather_view(full_state)

    current = card_weather_module.current_weather_html(view)
    grid = card_weather_module.metrics_grid_html(view)

    assert "Bogotá, CO" in current
    assert "15°C" in current
    assert "nubes rotas" in current
    assert current.count("forecast-chip'") == 4
    assert grid.count("class='metric-card'") == 8
    assert "Próx. lluvia: 0%" in grid


# ---------- the card ----------


@pytest.fixture
def stub_sections(monkeypatch):
    calls: dict[str, list] = {"chart": [], "status": [], "header": 0, "controls": 0}

    def header(session, view):
        calls["header"] += 1

    def controls(session, view):
        calls["controls"] += 1

    monkeypatch.setattr(card_weather_module, "_apply_background", lambda key: None)
    monkeypatch.setattr(card_weather_module, "_render_header", header)
    monkeypatch.setattr(card_weather_module, "_render_controls", controls)
    monkeypatch.setattr(
        card_weather_module,
        "card_forecast_chart",
        lambda chart, loading=False: calls["chart"].append((chart, loading)),
    )
    monkeypatch.setattr(
        card_weather_module,
        "status_message",
        lambda text, error=False: calls["status"].append((text, error)),
    )
    return calls


def test_card_weather_happy_path(monkeypatch, dummy_st, stub_sections, full_state):
    monkeypatch.setattr(card_weather_module, "get_session", lambda: FakeSession(full_state))

    card_weather_module.card_weather()

    assert stub_sections["header"] == 1
    assert stub_sections["controls"] == 1
    assert stub_sections["status"] == []
    assert len(dummy_st.markdowns) == 2
    assert "current-weather" in dummy_st.markdowns[0]
    assert "metrics-grid" in dummy_st.markdowns[1]
    chart, loading = stub_sections["chart"][0]
    assert chart is not None and loading is False


def test_card_weather_error_banner_without_data(monkeypatch, dummy_st, stub_sections):
    state = SessionState(city="Atlantis", units=UnitSystem.METRIC, error="No encontramos datos para esa ubicación.")
    monkeypatch.setattr(card_weather_module, "get_session", lambda: FakeSession(state))

    card_weather_module.card_weather()

    assert stub_sections["status"] == [("No encontramos datos para esa ubicación.", True)]
    assert dummy_st.markdowns == []
    assert stub_sections["chart"] == [(None, False)]


def test_card_weather_loading_placeholder(monkeypatch, dummy_st, stub_sections):
    state = SessionState(city="Madrid", units=UnitSystem.METRIC, loading=True)
    monkeypatch.setattr(card_weather_module, "get_session", lambda: FakeSession(state))

    card_weather_module.card_weather()

    assert stub_sections["status"] == [("Cargando datos meteorológicos…", False)]
    assert stub_sections["chart"] == [(None, True)]


def test_card_weather_unexpected_error(monkeypatch, dummy_st, stub_sections):
    def boom():
        raise RuntimeError("kaboom")

    monkeypatch.setattr(card_weather_module, "get_session", boom)

    card_weather_module.card_weather()

    assert stub_sections["status"] == [("Error: kaboom", True)]
