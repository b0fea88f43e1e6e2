from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from lib_log_elastic.domain.errors import ConfigurationError, StorageWriteError
from lib_log_elastic.domain.levels import LogLevel
from lib_log_elastic.domain.records import ErrorDescription, LogRecord


def test_record_normalises_time_to_utc(make_record: Callable[..., LogRecord]) -> None:
    local = datetime(2024, 1, 2, 1, 30, tzinfo=timezone(timedelta(hours=2)))

    record = make_record(time=local)

    assert record.time == datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)
    assert record.time.tzinfo is timezone.utc


def test_record_rejects_naive_time(make_record: Callable[..., LogRecord]) -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        make_record(time=datetime(2024, 1, 1))


def test_record_rejects_level_none(make_record: Callable[..., LogRecord]) -> None:
    with pytest.raises(ValueError, match="NONE"):
        make_record(level=LogLevel.NONE)


def test_to_document_matches_persisted_layout(make_record: Callable[..., LogRecord]) -> None:
    document = make_record("hello", level=LogLevel.WARN).to_document()

    assert document == {
        "time": "2024-01-01T12:00:00+00:00",
        "source": "tests",
        "level": "WARN",
        "correlation_id": "corr",
        "message": "hello",
    }


def test_document_survives_reconstruction(make_record: Callable[..., LogRecord]) -> None:
    original = make_record(error=ErrorDescription(type="ValueError", message="bad", details={"k": "v"}))

    restored = LogRecord.from_document(original.to_document())

    assert restored == original


def test_error_description_from_plain_exception_uses_unknown_category() -> None:
    try:
        try:
            raise KeyError("inner")
        except KeyError as inner:
            raise RuntimeError("outer") from inner
    except RuntimeError as exc:
        description = ErrorDescription.from_exception(exc)

    assert description.type == "RuntimeError"
    assert description.category == "Unknown"
    assert description.code == "UNKNOWN"
    assert description.status == 500
    assert description.message == "outer"
    assert description.cause == "'inner'"
    assert description.stack_trace is not None and "RuntimeError: outer" in description.stack_trace


def test_error_description_from_application_error_keeps_metadata() -> None:
    error = StorageWriteError("corr-1", "SAVE_ERROR", "cannot save", details={"index": "log"})

    description = ErrorDescription.from_exception(error)

    assert description.type == "StorageWriteError"
    assert description.code == "SAVE_ERROR"
    assert description.category == "Internal"
    assert description.correlation_id == "corr-1"
    assert description.details == {"index": "log"}
    assert description.stack_trace is None


def test_error_description_to_dict_omits_empty_fields() -> None:
    payload: dict[str, Any] = ErrorDescription.from_exception(ConfigurationError(None, "NO_CONNECTION", "missing")).to_dict()

    assert payload == {
        "type": "ConfigurationError",
        "category": "Misconfiguration",
        "status": 500,
        "code": "NO_CONNECTION",
        "message": "missing",
    }


def test_record_with_error_serialises_nested_object(make_record: Callable[..., LogRecord]) -> None:
    record = make_record(error=ErrorDescription.from_exception(ValueError("boom")))

    document = record.to_document()

    assert document["error"]["type"] == "ValueError"
    assert document["error"]["message"] == "boom"


def test_error_description_ignores_implicit_exception_context() -> None:
    try:
        try:
            raise KeyError("inner")
        except KeyError:
            raise RuntimeError("while handling")
    except RuntimeError as exc:
        description = ErrorDescription.from_exception(exc)

    assert description.cause is None
