"""Logger component that caches records and ships them to Elasticsearch.

Purpose
-------
Compose the cache, the index manager, the batch writer and the periodic timer
into one component with an explicit open/close lifecycle.

Contents
--------
* :class:`LifecycleState` - Closed -> Opening -> Open -> Closing -> Closed.
* :class:`ElasticSearchLogger` - public component.

System Role
-----------
Composition root for a single logger. The runtime façade and the factory both
build instances of this class; hosts may also instantiate it directly.

Threading
---------
Logging calls only append to the cache. Lifecycle transitions are serialised
by an ``RLock``. :meth:`ElasticSearchLogger.dump` takes no lock so the timer
thread can flush while ``close`` waits for it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from enum import Enum
from threading import RLock
from typing import Any

from lib_log_elastic.adapters.clock import SystemClock, UuidProvider
from lib_log_elastic.adapters.connection import ConfigConnectionResolver
from lib_log_elastic.adapters.elasticsearch import ElasticsearchStorageAdapter
from lib_log_elastic.adapters.timer import PeriodicTimer
from lib_log_elastic.application.ports.connection import ConnectionResolverPort, DiscoveryPort
from lib_log_elastic.application.ports.console import ConsolePort
from lib_log_elastic.application.ports.storage import StorageClientPort
from lib_log_elastic.application.ports.time import ClockPort, IdProvider
from lib_log_elastic.application.ports.timer import TimerPort
from lib_log_elastic.application.use_cases.batch_writer import create_write_batch
from lib_log_elastic.application.use_cases.flush import create_flush
from lib_log_elastic.application.use_cases.index_manager import IndexManager
from lib_log_elastic.application.use_cases.shutdown import create_shutdown
from lib_log_elastic.config import LoggerSettings, build_settings
from lib_log_elastic.domain.connection import ConnectionTarget
from lib_log_elastic.domain.errors import ConfigurationError
from lib_log_elastic.domain.levels import LogLevel
from lib_log_elastic.domain.log_cache import LogCache
from lib_log_elastic.domain.records import ErrorDescription, LogRecord

logger = logging.getLogger(__name__)

StorageFactory = Callable[[ConnectionTarget, LoggerSettings], StorageClientPort]
TimerFactory = Callable[..., TimerPort]
DiagnosticHook = Callable[[str, dict[str, Any]], None]


class LifecycleState(Enum):
    """Lifecycle stages of :class:`ElasticSearchLogger`."""

    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    CLOSING = "closing"


def _default_timer_factory(
    *,
    interval: float,
    tick: Callable[[], Any],
    diagnostic: DiagnosticHook | None,
) -> TimerPort:
    return PeriodicTimer(interval=interval, tick=tick, diagnostic=diagnostic)


class ElasticSearchLogger:
    """Cache log records in memory and flush them to Elasticsearch.

    Parameters
    ----------
    config:
        Flat dotted-key configuration, see :func:`lib_log_elastic.config.build_settings`.
    settings:
        Pre-built settings; ``config`` is merged on top when both are given.
    storage_factory:
        Builds the storage session when opening. Defaults to
        :meth:`ElasticsearchStorageAdapter.from_target`.
    connection_resolver:
        Overrides the configuration-based resolver.
    discovery:
        Optional discovery service consulted for ``connection.discovery_key``.
    clock / id_provider:
        Time and document-id sources.
    timer_factory:
        Builds the periodic timer; called with ``interval`` (seconds), ``tick``
        and ``diagnostic`` keyword arguments.
    diagnostic:
        Optional ``(name, payload)`` hook for flush tick failures.
    console:
        Optional console that echoes every captured record.
    environ:
        Environment consulted for ``LOG_ELASTIC_*`` overrides.

    Examples
    --------
    >>> from lib_log_elastic.adapters.memory import InMemoryStorageAdapter
    >>> storage = InMemoryStorageAdapter()
    >>> es_logger = ElasticSearchLogger(
    ...     {"connection.host": "localhost", "options.interval": 60000},
    ...     storage_factory=lambda target, settings: storage,
    ...     environ={},
    ... )
    >>> es_logger.open()
    >>> es_logger.info("c1", "hello %s", "world")
    >>> es_logger.dump()
    1
    >>> storage.documents("log")[0]["message"]
    'hello world'
    >>> es_logger.close()
    >>> es_logger.is_open()
    False
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        settings: LoggerSettings | None = None,
        storage_factory: StorageFactory | None = None,
        connection_resolver: ConnectionResolverPort | None = None,
        discovery: DiscoveryPort | None = None,
        clock: ClockPort | None = None,
        id_provider: IdProvider | None = None,
        timer_factory: TimerFactory | None = None,
        diagnostic: DiagnosticHook | None = None,
        console: ConsolePort | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ = environ
        self._settings = build_settings(config, base=settings, environ=environ)
        self._storage_factory: StorageFactory = storage_factory or ElasticsearchStorageAdapter.from_target
        self._connection_resolver = connection_resolver
        self._discovery = discovery
        self._clock: ClockPort = clock or SystemClock()
        self._id_provider: IdProvider = id_provider or UuidProvider()
        self._timer_factory: TimerFactory = timer_factory or _default_timer_factory
        self._diagnostic = diagnostic
        self._console = console

        self._cache = LogCache(max_size=self._settings.max_cache_size)
        self._lock = RLock()
        self._state = LifecycleState.CLOSED
        self._target: ConnectionTarget | None = None
        self._storage: StorageClientPort | None = None
        self._index_manager: IndexManager | None = None
        self._timer: TimerPort | None = None
        self._flush: Callable[[], int] | None = None

    # ------------------------------------------------------------------
    # configuration

    def configure(self, config: Mapping[str, Any]) -> None:
        """Merge ``config`` into the current settings.

        Level and source apply immediately; connection and index options take
        effect on the next :meth:`open`.
        """

        with self._lock:
            self._settings = build_settings(config, base=self._settings, environ=self._environ)
            self._cache.resize(self._settings.max_cache_size)
            if self._state is not LifecycleState.CLOSED:
                logger.debug("Logger reconfigured while open; connection options apply after reopening")

    @property
    def settings(self) -> LoggerSettings:
        return self._settings

    @property
    def level(self) -> LogLevel:
        return self._settings.level

    def set_level(self, level: LogLevel | str | int) -> None:
        """Change the capture threshold; environment overrides do not apply here."""

        with self._lock:
            self._settings = replace(self._settings, level=LogLevel.coerce(level))

    @property
    def source(self) -> str | None:
        return self._settings.source

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def connection(self) -> ConnectionTarget | None:
        """Endpoint in use while open."""

        return self._target

    @property
    def current_index(self) -> str | None:
        """Last index confirmed to exist, or ``None`` while closed."""

        manager = self._index_manager
        return manager.confirmed_index if manager is not None else None

    @property
    def pending(self) -> int:
        """Number of records waiting for the next flush."""

        return len(self._cache)

    # ------------------------------------------------------------------
    # capture

    def log(
        self,
        level: LogLevel | str | int,
        correlation_id: str | None,
        error: BaseException | None,
        message: str,
        *args: Any,
    ) -> None:
        """Capture one record when ``level`` passes the configured threshold.

        ``args`` are applied to ``message`` with ``%`` formatting.
        """

        resolved = LogLevel.coerce(level)
        if not self._settings.level.allows(resolved):
            return
        text = message % args if args else message
        record = LogRecord(
            time=self._clock.now(),
            level=resolved,
            source=self._settings.source,
            correlation_id=correlation_id,
            message=text,
            error=ErrorDescription.from_exception(error) if error is not None else None,
        )
        if self._console is not None:
            self._console.emit(record, colorize=True)
        if self._cache.append(record):
            timer = self._timer
            if timer is not None:
                timer.trigger()

    def fatal(self, correlation_id: str | None, error: BaseException | None, message: str, *args: Any) -> None:
        self.log(LogLevel.FATAL, correlation_id, error, message, *args)

    def error(self, correlation_id: str | None, error: BaseException | None, message: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, correlation_id, error, message, *args)

    def warn(self, correlation_id: str | None, message: str, *args: Any) -> None:
        self.log(LogLevel.WARN, correlation_id, None, message, *args)

    def info(self, correlation_id: str | None, message: str, *args: Any) -> None:
        self.log(LogLevel.INFO, correlation_id, None, message, *args)

    def debug(self, correlation_id: str | None, message: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, correlation_id, None, message, *args)

    def trace(self, correlation_id: str | None, message: str, *args: Any) -> None:
        self.log(LogLevel.TRACE, correlation_id, None, message, *args)

    def clear(self) -> None:
        """Drop every cached record without writing it."""

        self._cache.clear()

    # ------------------------------------------------------------------
    # lifecycle

    def is_open(self) -> bool:
        """Return ``True`` while the flush timer is active."""

        timer = self._timer
        return timer is not None and timer.is_active

    def open(self, correlation_id: str | None = None) -> None:
        """Connect, prepare the current index and start the flush timer.

        Raises
        ------
        ConfigurationError
            ``NO_CONNECTION`` when no endpoint is configured, or a resolver
            error such as ``WRONG_PROTOCOL``.
        IndexCreationError
            When the current index cannot be prepared. The session is closed
            and the logger stays closed.
        """

        with self._lock:
            if self._state is not LifecycleState.CLOSED:
                logger.debug("open() ignored; logger is %s", self._state.value)
                return
            self._state = LifecycleState.OPENING
            try:
                self._open_locked(correlation_id)
            except Exception:
                self._state = LifecycleState.CLOSED
                raise
            self._state = LifecycleState.OPEN

    def _open_locked(self, correlation_id: str | None) -> None:
        settings = self._settings
        resolver = self._connection_resolver or ConfigConnectionResolver(settings.connection, self._discovery)
        target = resolver.resolve(correlation_id)
        if target is None:
            raise ConfigurationError(correlation_id, "NO_CONNECTION", "Connection is not configured")

        storage = self._storage_factory(target, settings)
        index_manager = IndexManager(
            storage=storage,
            descriptor=settings.index_descriptor(),
            clock=self._clock,
            index_message=settings.index_message,
        )
        try:
            index_manager.ensure_index_ready(index_manager.resolve_current_index_name(), force=True)
        except Exception:
            self._close_storage_after_failed_open(storage)
            raise

        write_batch = create_write_batch(
            index_manager=index_manager,
            storage=storage,
            id_provider=self._id_provider,
            is_open=self._accepts_writes,
        )
        self._target = target
        self._storage = storage
        self._index_manager = index_manager
        self._flush = create_flush(cache=self._cache, write_batch=write_batch)
        self._timer = self._timer_factory(
            interval=settings.interval_seconds,
            tick=self.dump,
            diagnostic=self._diagnostic,
        )
        self._timer.start()
        logger.info(
            "Opened Elasticsearch logger at %s (index %s)",
            target.uri,
            index_manager.confirmed_index,
        )

    @staticmethod
    def _close_storage_after_failed_open(storage: StorageClientPort) -> None:
        try:
            storage.close()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Closing the storage session after a failed open raised", exc_info=exc)

    def close(self, correlation_id: str | None = None) -> None:
        """Flush once, stop the timer and release the storage session.

        A failure of the final flush is raised after the teardown finished;
        the logger is closed either way.
        """

        with self._lock:
            if self._state is not LifecycleState.OPEN:
                logger.debug("close() ignored; logger is %s", self._state.value)
                return
            self._state = LifecycleState.CLOSING
            shutdown = create_shutdown(
                final_flush=self._flush or (lambda: 0),
                timer=self._timer,
                storage=self._storage,
                clear_state=self._clear_state,
            )
            try:
                shutdown()
            finally:
                logger.info("Closed Elasticsearch logger (correlation id %s)", correlation_id)

    def dump(self) -> int:
        """Write the cached records now.

        Returns the number of documents written; ``0`` while closed, in which
        case records stay cached. On failure the records return to the cache
        and the error propagates.
        """

        flush = self._flush
        if flush is None:
            return 0
        return flush()

    def _accepts_writes(self) -> bool:
        return self._state in (LifecycleState.OPEN, LifecycleState.CLOSING)

    def _clear_state(self) -> None:
        manager = self._index_manager
        if manager is not None:
            manager.reset()
        self._flush = None
        self._timer = None
        self._storage = None
        self._index_manager = None
        self._target = None
        self._state = LifecycleState.CLOSED

    def __enter__(self) -> "ElasticSearchLogger":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["ElasticSearchLogger", "LifecycleState"]
