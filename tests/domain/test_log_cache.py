from __future__ import annotations

import threading
from typing import Callable

import pytest

from lib_log_elastic.domain.log_cache import LogCache
from lib_log_elastic.domain.records import LogRecord


def test_append_reports_when_capacity_is_reached(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=2)

    assert cache.append(make_record("a")) is False
    assert cache.append(make_record("b")) is True


def test_oldest_records_are_evicted_past_capacity(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=3)
    for text in "abcde":
        cache.append(make_record(text))

    assert [record.message for record in cache] == ["c", "d", "e"]


def test_drain_returns_everything_and_clears(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=5)
    cache.extend([make_record("a"), make_record("b")])

    drained = cache.drain()

    assert [record.message for record in drained] == ["a", "b"]
    assert len(cache) == 0
    assert cache.drain() == []


def test_restore_puts_failed_batch_ahead_of_newer_records(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=10)
    cache.extend([make_record("a"), make_record("b")])
    batch = cache.drain()
    cache.append(make_record("c"))

    cache.restore(batch)

    assert [record.message for record in cache.snapshot()] == ["a", "b", "c"]


def test_restore_drops_oldest_when_over_capacity(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=3)
    cache.extend([make_record("a"), make_record("b")])
    batch = cache.drain()
    cache.extend([make_record("c"), make_record("d")])

    cache.restore(batch)

    assert [record.message for record in cache] == ["b", "c", "d"]


def test_resize_keeps_newest_records(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=5)
    cache.extend(make_record(text) for text in "abcd")

    cache.resize(2)

    assert cache.max_size == 2
    assert [record.message for record in cache] == ["c", "d"]


def test_invalid_capacity_is_rejected() -> None:
    with pytest.raises(ValueError):
        LogCache(max_size=0)


def test_concurrent_drains_never_share_records(make_record: Callable[..., LogRecord]) -> None:
    cache = LogCache(max_size=10_000)
    cache.extend(make_record(str(index)) for index in range(2_000))
    seen: list[list[LogRecord]] = []
    lock = threading.Lock()

    def drain() -> None:
        batch = cache.drain()
        with lock:
            seen.append(batch)

    threads = [threading.Thread(target=drain) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    messages = [record.message for batch in seen for record in batch]
    assert sorted(messages, key=int) == [str(index) for index in range(2_000)]
