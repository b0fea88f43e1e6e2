"""Holder for the process-wide logger installed by :func:`lib_log_elastic.init`."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from lib_log_elastic.config import LoggerSettings
from lib_log_elastic.elastic_logger import ElasticSearchLogger

_NOT_INITIALISED = "lib_log_elastic.init() must be called before using the logging API"


@dataclass(slots=True, frozen=True)
class LoggingRuntime:
    """The shared logger and the settings it was built from."""

    logger: ElasticSearchLogger
    settings: LoggerSettings


_lock = RLock()
_active: LoggingRuntime | None = None


def set_runtime(runtime: LoggingRuntime) -> None:
    """Install ``runtime``; a different runtime that is still installed is never replaced."""

    global _active
    with _lock:
        if _active is not None and _active is not runtime:
            raise RuntimeError("A logging runtime is already installed; call lib_log_elastic.shutdown() first")
        _active = runtime


def clear_runtime() -> LoggingRuntime | None:
    """Uninstall the active runtime and return it."""

    global _active
    with _lock:
        previous, _active = _active, None
    return previous


def current_runtime() -> LoggingRuntime:
    runtime = _active
    if runtime is None:
        raise RuntimeError(_NOT_INITIALISED)
    return runtime


def is_initialised() -> bool:
    return _active is not None


__all__ = [
    "LoggingRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
