"""Full pipeline with the real periodic timer and an in-memory store."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from lib_log_elastic import ElasticSearchLogger
from lib_log_elastic.adapters.memory import InMemoryStorageAdapter


def wait_until(predicate, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_records_are_shipped_by_the_timer_to_the_daily_index() -> None:
    storage = InMemoryStorageAdapter()
    es_logger = ElasticSearchLogger(
        {
            "connection.host": "localhost",
            "options.interval": 100,
            "options.daily": True,
            "options.date_format": "yyyyMMdd",
            "level": "TRACE",
        },
        storage_factory=lambda target, settings: storage,
        environ={},
    )
    es_logger.open()
    expected_index = f"log-{datetime.now(timezone.utc):%Y%m%d}"

    es_logger.fatal("e2e", None, "record %d", 0)
    es_logger.error("e2e", RuntimeError("boom"), "record %d", 1)
    es_logger.warn("e2e", "record %d", 2)
    es_logger.info("e2e", "record %d", 3)
    es_logger.debug("e2e", "record %d", 4)

    try:
        assert wait_until(lambda: len(storage.documents()) == 5)
    finally:
        es_logger.close()

    assert storage.bulk_calls == 1
    assert [doc["message"] for doc in storage.documents(expected_index)] == [f"record {n}" for n in range(5)]
    assert [doc["level"] for doc in storage.documents(expected_index)] == ["FATAL", "ERROR", "WARN", "INFO", "DEBUG"]
    assert storage.documents(expected_index)[1]["error"]["message"] == "boom"
    assert expected_index in storage.indices

    es_logger.info("e2e", "after close")
    time.sleep(0.25)
    assert storage.bulk_calls == 1
    assert es_logger.pending == 1
