"""Runtime façade managing one process-wide Elasticsearch logger.

Purpose
-------
Expose a small entry point (``init``, ``get``, ``dump``, ``shutdown``) for
hosts that want a single shared logger instead of wiring
:class:`ElasticSearchLogger` themselves.

Contents
--------
* ``init`` - build, open and install the shared logger.
* ``get`` / ``inspect_runtime`` - accessors.
* ``dump`` - manual flush.
* ``shutdown`` - close and uninstall.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from lib_log_elastic.application.ports.connection import DiscoveryPort
from lib_log_elastic.application.ports.time import ClockPort, IdProvider
from lib_log_elastic.domain.levels import LogLevel
from lib_log_elastic.elastic_logger import DiagnosticHook, ElasticSearchLogger, StorageFactory, TimerFactory

from ._state import LoggingRuntime, clear_runtime, current_runtime, is_initialised, set_runtime

#: Keyword shortcuts accepted by :func:`init` and the configuration keys they set.
_OPTION_ALIASES: Mapping[str, str] = {
    "host": "connection.host",
    "port": "connection.port",
    "uri": "connection.uri",
    "protocol": "connection.protocol",
    "discovery_key": "connection.discovery_key",
}


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Read-only view of the shared logger."""

    level: LogLevel
    source: str | None
    uri: str | None
    index: str | None
    is_open: bool
    pending: int


def init(
    config: Mapping[str, Any] | None = None,
    *,
    storage_factory: StorageFactory | None = None,
    discovery: DiscoveryPort | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
    timer_factory: TimerFactory | None = None,
    diagnostic: DiagnosticHook | None = None,
    **options: Any,
) -> ElasticSearchLogger:
    """Build, open and install the process-wide logger.

    Parameters
    ----------
    config:
        Dotted-key configuration mapping.
    **options:
        Keyword configuration merged over ``config``; ``host``, ``port``,
        ``uri``, ``protocol`` and ``discovery_key`` map to their
        ``connection.*`` keys, anything else is used verbatim.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a logger is already
    installed. When opening fails nothing is installed and the error
    propagates.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_elastic.init() cannot be called twice without shutdown(); call lib_log_elastic.shutdown() first",
        )

    merged: dict[str, Any] = dict(config or {})
    for key, value in options.items():
        if value is not None:
            merged[_OPTION_ALIASES.get(key, key)] = value

    es_logger = ElasticSearchLogger(
        merged,
        storage_factory=storage_factory,
        discovery=discovery,
        clock=clock,
        id_provider=id_provider,
        timer_factory=timer_factory,
        diagnostic=diagnostic,
    )
    es_logger.open()
    try:
        set_runtime(LoggingRuntime(logger=es_logger, settings=es_logger.settings))
    except RuntimeError:
        es_logger.close()
        raise
    return es_logger


def get() -> ElasticSearchLogger:
    """Return the shared logger; raises :class:`RuntimeError` before :func:`init`."""

    return current_runtime().logger


def dump() -> int:
    """Flush the shared logger now and return the number of documents written."""

    return current_runtime().logger.dump()


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the shared logger."""

    es_logger = current_runtime().logger
    target = es_logger.connection
    return RuntimeSnapshot(
        level=es_logger.level,
        source=es_logger.source,
        uri=target.uri if target is not None else None,
        index=es_logger.current_index,
        is_open=es_logger.is_open(),
        pending=es_logger.pending,
    )


def shutdown() -> None:
    """Close the shared logger and uninstall it.

    The logger is uninstalled even when the final flush fails; that failure
    is raised afterwards.
    """

    runtime = current_runtime()
    try:
        runtime.logger.close()
    finally:
        clear_runtime()


__all__ = [
    "LoggingRuntime",
    "RuntimeSnapshot",
    "dump",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "shutdown",
]
