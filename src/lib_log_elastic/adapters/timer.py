"""Thread-based periodic timer driving cache flushes.

Purpose
-------
Run the flush callback at a fixed interval on a background daemon thread so
logging calls never wait for the backend.

Contents
--------
* :class:`PeriodicTimer` - background implementation of :class:`TimerPort`.

System Role
-----------
Created by :meth:`lib_log_elastic.ElasticSearchLogger.open` and stopped by
``close``; each open/close cycle owns a fresh timer. A failing tick is logged
and reported to the diagnostic hook, and the timer keeps ticking.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from lib_log_elastic.application.ports.timer import TimerPort


LOGGER = logging.getLogger(__name__)


class PeriodicTimer(TimerPort):
    """Invoke ``tick`` every ``interval`` seconds on a daemon thread.

    Examples
    --------
    >>> import threading
    >>> fired = threading.Event()
    >>> timer = PeriodicTimer(interval=60.0, tick=fired.set)
    >>> timer.start()
    >>> timer.trigger()
    >>> fired.wait(1.0)
    True
    >>> timer.stop()
    >>> timer.is_active
    False
    """

    def __init__(
        self,
        *,
        interval: float,
        tick: Callable[[], Any],
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
        name: str = "lib_log_elastic-flush",
    ) -> None:
        """Create the timer.

        Parameters
        ----------
        interval:
            Seconds between ticks.
        tick:
            Callable invoked on every tick. Exceptions are logged, never raised.
        stop_timeout:
            Seconds :meth:`stop` waits for a running tick. ``None`` waits
            indefinitely; a tick still running afterwards finishes on its own.
        diagnostic:
            Optional hook receiving ``(name, payload)`` for tick failures and
            stop timeouts.
        name:
            Thread name, visible in thread dumps.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._tick = tick
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._name = name
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._failures = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_active(self) -> bool:
        """Return ``True`` while ticks are scheduled."""
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    @property
    def failures(self) -> int:
        """Number of ticks that raised."""
        return self._failures

    def start(self) -> None:
        """Start the background thread if it is not already running."""
        if self.is_active:
            return
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, *, timeout: float | None = None) -> None:
        """Cancel future ticks and wait briefly for a running tick.

        Parameters
        ----------
        timeout:
            Per-call override for the wait deadline. ``None`` falls back to the
            ``stop_timeout`` given at construction.
        """
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        self._wake_event.set()
        self._thread = None

        if thread is threading.current_thread():
            return

        effective_timeout = timeout if timeout is not None else self._stop_timeout
        started = time.monotonic()
        thread.join(effective_timeout)
        if thread.is_alive():
            LOGGER.warning(
                "Flush timer tick still running after %.1fs; leaving it to finish",
                time.monotonic() - started,
            )
            self._emit_diagnostic("timer_stop_timeout", {"timeout": effective_timeout})

    def trigger(self) -> None:
        """Wake the timer thread so it ticks now instead of at the next interval."""
        if self.is_active:
            self._wake_event.set()

    def _run(self) -> None:
        """Internal loop waiting for the interval or an explicit trigger."""
        while True:
            self._wake_event.wait(self._interval)
            if self._stop_event.is_set():
                break
            self._wake_event.clear()
            self._run_tick()

    def _run_tick(self) -> None:
        """Execute one tick, logging failures without ending the loop."""
        try:
            self._tick()
        except Exception as exc:  # noqa: BLE001
            self._failures += 1
            LOGGER.error("Flush timer tick raised an exception; continuing", exc_info=exc)
            self._emit_diagnostic(
                "flush_tick_error",
                {"exception": repr(exc), "code": getattr(exc, "code", None), "failures": self._failures},
            )

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Timer diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["PeriodicTimer"]
