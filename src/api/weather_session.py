"""
Weather session controller.

Owns the fetch lifecycle of one dashboard session: committed city and
units, the paired current/forecast requests, error capture, the timestamp of
the last good refresh and the periodic refresh timer.

Every trigger (city submit, unit change, manual refresh, timer tick) gets a
new generation token. A cycle may commit only while its token is still the
latest one issued, so a slow, older cycle can never overwrite the result of a
newer one.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Any

from src.api.weather_errors import (
    InvalidLocationInput,
    MissingCredential,
    NetworkOrParsingFailure,
    WeatherError,
)
from src.api.weather_fetch import WeatherClient
from src.api.weather_models import SessionState, UnitSystem
from src.config import DEFAULT_CITY, DEFAULT_UNITS, REFRESH_INTERVAL_S, TZ

logger = logging.getLogger("meteodash")

Listener = Callable[[SessionState], None]


def _done(value: bool) -> Future[bool]:
    fut: Future[bool] = Future()
    fut.set_result(value)
    return fut


def _weak_trigger(session: WeatherSession) -> Callable[[], Any]:
    """Timer callback that does not keep an abandoned session alive."""
    ref = weakref.ref(session)

    def tick() -> None:
        target = ref()
        if target is not None:
            target.trigger()

    return tick


def _shutdown(timer: RefreshTimer, *pools: ThreadPoolExecutor) -> None:
    timer.cancel()
    for pool in pools:
        pool.shutdown(wait=False, cancel_futures=True)


class RefreshTimer:
    """Cancellable periodic callback on a daemon thread."""

    def __init__(self, interval_s: float, callback: Callable[[], Any]) -> None:
        self.interval_s = interval_s
        self._callback = callback
        self._stop = threading.Event()
        self._reset = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="weather-refresh", daemon=True)
        self._thread.start()

    def reset(self) -> None:
        """Restart the countdown without firing."""
        if self.running:
            self._reset.set()

    def cancel(self, timeout: float | None = 1.0) -> None:
        self._stop.set()
        self._reset.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stop.is_set():
            woken = self._reset.wait(self.interval_s)
            if self._stop.is_set():
                return
            if woken:
                self._reset.clear()
                continue
            try:
                self._callback()
            except Exception:
                logger.exception("Periodic weather refresh could not be dispatched")


class WeatherSession:
    """
    Single-session state machine: idle -> loading -> settled-ok / settled-error.

    ``fetch_weather`` runs one cycle and blocks until it settles; the
    ``handle_*`` methods and the timer dispatch cycles to a worker pool and
    return immediately with a Future. Listeners registered with ``subscribe``
    are called (under the session lock, so keep them short) with the new
    snapshot after every change.
    """

    def __init__(
        self,
        client: WeatherClient,
        *,
        city: str = DEFAULT_CITY,
        units: UnitSystem | str = DEFAULT_UNITS,
        refresh_interval_s: float = REFRESH_INTERVAL_S,
        clock: Callable[[], datetime] | None = None,
        max_workers: int = 4,
    ) -> None:
        self._client = client
        self._clock = clock or (lambda: datetime.now(TZ))
        self._lock = threading.RLock()
        self._state = SessionState(city=city.strip() or DEFAULT_CITY, units=UnitSystem(units))
        self._generation = 0
        self._started = False
        self._closed = False
        self._listeners: list[Listener] = []
        self._cycles = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="weather-cycle")
        # separate pool: a cycle blocks on its two requests
        self._requests = ThreadPoolExecutor(max_workers=2 * max_workers, thread_name_prefix="weather-http")
        self._timer = RefreshTimer(refresh_interval_s, _weak_trigger(self))
        # a Streamlit session can vanish without close(); GC then stops the threads
        self._finalizer = weakref.finalize(self, _shutdown, self._timer, self._cycles, self._requests)

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, **changes: Any) -> SessionState:
        # caller holds self._lock
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Weather session listener failed")
        return self._state

    def _reject(self, err: WeatherError) -> None:
        """Precondition failure: report it, touch nothing else, issue no cycle."""
        logger.warning("Weather fetch rejected: %s", type(err).__name__)
        with self._lock:
            self._commit(error=err.message)

    def _begin_cycle(self) -> int | None:
        with self._lock:
            if self._closed:
                return None
            self._generation += 1
            self._commit(loading=True, error=None)
            return self._generation

    def _settle(self, token: int, **changes: Any) -> bool:
        with self._lock:
            if self._closed or token != self._generation:
                logger.info("Dropping result of superseded weather cycle #%d", token)
                return False
            self._commit(loading=False, **changes)
            return True

    # ------------------------------------------------------------- the cycle

    def _resolve(self, city: str | None, units: UnitSystem | str | None) -> tuple[str, UnitSystem]:
        # caller holds self._lock
        return (
            self._state.city if city is None else city,
            self._state.units if units is None else UnitSystem(units),
        )

    def _check_preconditions(self, city: str) -> str | None:
        """Trimmed query, or None after reporting why no cycle may start."""
        if not self._client.api_key:
            self._reject(MissingCredential())
            return None
        query = city.strip()
        if not query:
            self._reject(InvalidLocationInput())
            return None
        return query

    def _run_cycle(self, token: int, query: str, units: UnitSystem) -> bool:
        """Fetch both documents for an already issued token and settle."""
        with self._lock:
            if self._closed or token != self._generation:
                logger.info("Skipping weather cycle #%d, superseded before it started", token)
                return False
        logger.info("Weather cycle #%d: q=%r units=%s", token, query, units)

        try:
            current_job = self._requests.submit(self._client.fetch_current, query, units)
            forecast_job = self._requests.submit(self._client.fetch_forecast, query, units)
            # current-conditions failure is reported first, as the banner shows one message
            current = current_job.result()
            forecast = forecast_job.result()
        except WeatherError as e:
            logger.warning("Weather cycle #%d failed: %s", token, type(e).__name__)
            self._settle(token, current=None, forecast=None, error=e.message)
            return False
        except Exception:
            if not self.closed:
                logger.exception("Weather cycle #%d crashed", token)
            self._settle(token, current=None, forecast=None, error=NetworkOrParsingFailure().message)
            return False

        committed = self._settle(
            token,
            current=current,
            forecast=forecast,
            error=None,
            last_updated_at=self._clock(),
        )
        if committed:
            logger.info("Weather cycle #%d OK (%s, %d forecast entries)", token, current.name, len(forecast.entries))
        return committed

    def fetch_weather(self, city: str | None = None, units: UnitSystem | str | None = None) -> bool:
        """
        Run one fetch cycle for ``city``/``units`` (default: the committed values).

        Returns True only if this cycle fetched both documents and its result
        was committed.
        """
        with self._lock:
            if self._closed:
                return False
            city, units = self._resolve(city, units)

        query = self._check_preconditions(city)
        if query is None:
            return False

        token = self._begin_cycle()
        if token is None:
            return False
        return self._run_cycle(token, query, units)

    def trigger(self, city: str | None = None, units: UnitSystem | str | None = None) -> Future[bool]:
        """
        Dispatch a cycle without waiting for it.

        Values are resolved and the generation token is issued here, in call
        order, so a worker that starts late can never outrank a later trigger.
        """
        with self._lock:
            if self._closed:
                return _done(False)
            city, units = self._resolve(city, units)
            query = self._check_preconditions(city)
            if query is None:
                return _done(False)
            token = self._begin_cycle()
            if token is None:
                return _done(False)
        try:
            return self._cycles.submit(self._run_cycle, token, query, units)
        except RuntimeError:
            # pool shut down by a concurrent close()
            return _done(False)

    # ------------------------------------------------------- user triggers

    def handle_city_submit(self, raw_input: str) -> Future[bool] | None:
        """Commit a new city and fetch it; blank input only sets the error."""
        query = (raw_input or "").strip()
        if not query:
            self._reject(InvalidLocationInput())
            return None
        with self._lock:
            state = self._commit(city=query)
        self._timer.reset()
        return self.trigger(query, state.units)

    def handle_unit_change(self, new_units: UnitSystem | str) -> Future[bool]:
        units = UnitSystem(new_units)
        with self._lock:
            state = self._commit(units=units)
        self._timer.reset()
        return self.trigger(state.city, units)

    def handle_manual_refresh(self) -> Future[bool]:
        return self.trigger()

    # ------------------------------------------------------------ lifecycle

    def start(self) -> Future[bool]:
        """Fetch immediately and start the periodic refresh."""
        future = self.trigger()
        with self._lock:
            if self._closed or self._started:
                return future
            self._started = True
        self._timer.start()
        return future

    def close(self) -> None:
        """End the session: stop the timer and ignore whatever is still in flight."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._commit(loading=False)
        self._finalizer()
        logger.info("Weather session closed")

    def __enter__(self) -> WeatherSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
