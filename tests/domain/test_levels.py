from __future__ import annotations

import pytest

from lib_log_elastic.domain.levels import LogLevel


@pytest.mark.parametrize(
    "name, expected",
    [
        ("fatal", LogLevel.FATAL),
        ("ERROR", LogLevel.ERROR),
        ("Warn", LogLevel.WARN),
        ("warning", LogLevel.WARN),
        ("info", LogLevel.INFO),
        ("DEBUG", LogLevel.DEBUG),
        ("trace", LogLevel.TRACE),
        ("critical", LogLevel.FATAL),
        ("none", LogLevel.NONE),
        ("5", LogLevel.DEBUG),
    ],
)
def test_from_name_accepts_case_insensitive_matches(name: str, expected: LogLevel) -> None:
    assert LogLevel.from_name(name) is expected


def test_from_name_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        LogLevel.from_name("verbose")


def test_from_numeric_rejects_out_of_range_values() -> None:
    with pytest.raises(ValueError, match="Unsupported log level numeric"):
        LogLevel.from_numeric(7)


@pytest.mark.parametrize(
    "threshold, level, allowed",
    [
        (LogLevel.INFO, LogLevel.FATAL, True),
        (LogLevel.INFO, LogLevel.INFO, True),
        (LogLevel.INFO, LogLevel.DEBUG, False),
        (LogLevel.TRACE, LogLevel.TRACE, True),
        (LogLevel.FATAL, LogLevel.ERROR, False),
        (LogLevel.NONE, LogLevel.FATAL, False),
    ],
)
def test_allows_compares_against_threshold(threshold: LogLevel, level: LogLevel, allowed: bool) -> None:
    assert threshold.allows(level) is allowed


def test_coerce_accepts_members_names_and_numbers() -> None:
    assert LogLevel.coerce(LogLevel.WARN) is LogLevel.WARN
    assert LogLevel.coerce("error") is LogLevel.ERROR
    assert LogLevel.coerce(6) is LogLevel.TRACE


def test_severity_is_the_uppercase_name() -> None:
    assert LogLevel.WARN.severity == "WARN"
