"""Shared fixtures: a settable clock, a recording storage backend and a manual timer."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from lib_log_elastic import runtime
from lib_log_elastic.application.ports.storage import BulkDocument, BulkResponse
from lib_log_elastic.domain.levels import LogLevel
from lib_log_elastic.domain.records import LogRecord
from lib_log_elastic.elastic_logger import ElasticSearchLogger


class SettableClock:
    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


class RecordingStorage:
    """Storage fake remembering every call; failures are injected via attributes."""

    def __init__(self) -> None:
        self.indices: dict[str, Mapping[str, Any]] = {}
        self.exists_calls: list[str] = []
        self.create_calls: list[str] = []
        self.bulk_calls: list[tuple[str, str, tuple[BulkDocument, ...]]] = []
        self.close_calls = 0
        self.exists_error: Exception | None = None
        self.create_error: Exception | None = None
        self.bulk_error: Exception | None = None
        self.bulk_failures: tuple[Mapping[str, Any], ...] = ()

    def index_exists(self, name: str) -> bool:
        self.exists_calls.append(name)
        if self.exists_error is not None:
            raise self.exists_error
        return name in self.indices

    def create_index(self, name: str, body: Mapping[str, Any]) -> None:
        self.create_calls.append(name)
        if self.create_error is not None:
            raise self.create_error
        self.indices[name] = body

    def bulk_write(self, index: str, doc_type: str, documents: Sequence[BulkDocument]) -> BulkResponse:
        self.bulk_calls.append((index, doc_type, tuple(documents)))
        if self.bulk_error is not None:
            raise self.bulk_error
        return BulkResponse(succeeded=len(documents) - len(self.bulk_failures), failures=self.bulk_failures)

    def close(self) -> None:
        self.close_calls += 1

    def written_messages(self) -> list[str]:
        return [doc.source["message"] for _, _, docs in self.bulk_calls for doc in docs]


class ManualTimer:
    """Timer fake whose ticks are fired by the test."""

    def __init__(self, *, interval: float, tick: Callable[[], Any]) -> None:
        self.interval = interval
        self.tick = tick
        self.active = False
        self.start_calls = 0
        self.stop_calls = 0
        self.trigger_calls = 0

    @property
    def is_active(self) -> bool:
        return self.active

    def start(self) -> None:
        self.start_calls += 1
        self.active = True

    def stop(self) -> None:
        self.stop_calls += 1
        self.active = False

    def trigger(self) -> None:
        self.trigger_calls += 1

    def fire(self) -> Any:
        return self.tick()


class LoggerHarness:
    """Build loggers wired to the recording storage, a settable clock and manual timers."""

    def __init__(self, storage: RecordingStorage, clock: SettableClock) -> None:
        self.storage = storage
        self.clock = clock
        self.timers: list[ManualTimer] = []
        self._ids = itertools.count(1)

    @property
    def timer(self) -> ManualTimer:
        return self.timers[-1]

    def _timer_factory(self, *, interval: float, tick: Callable[[], Any], diagnostic: Any) -> ManualTimer:
        timer = ManualTimer(interval=interval, tick=tick)
        self.timers.append(timer)
        return timer

    def build(self, config: Mapping[str, Any] | None = None, **kwargs: Any) -> ElasticSearchLogger:
        merged: dict[str, Any] = {"connection.host": "localhost"}
        merged.update(config or {})
        kwargs.setdefault("storage_factory", lambda target, settings: self.storage)
        return ElasticSearchLogger(
            merged,
            clock=self.clock,
            id_provider=lambda: f"doc-{next(self._ids)}",
            timer_factory=self._timer_factory,
            environ={},
            **kwargs,
        )


@pytest.fixture
def clock() -> SettableClock:
    return SettableClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def make_record() -> Callable[..., LogRecord]:
    def factory(message: str = "message", level: LogLevel = LogLevel.INFO, **changes: Any) -> LogRecord:
        values: dict[str, Any] = {
            "time": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            "level": level,
            "source": "tests",
            "correlation_id": "corr",
            "message": message,
        }
        values.update(changes)
        return LogRecord(**values)

    return factory


@pytest.fixture
def harness(storage: RecordingStorage, clock: SettableClock) -> LoggerHarness:
    return LoggerHarness(storage, clock)


@pytest.fixture(autouse=True)
def _clear_runtime() -> Iterator[None]:
    """Leave no process-wide logger behind between tests."""

    yield
    if runtime.is_initialised():
        try:
            runtime.shutdown()
        except Exception:  # noqa: BLE001 - teardown must not mask the test result
            pass
