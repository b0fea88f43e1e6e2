"""Log level abstraction used by the capture filter and the persisted documents.

Purpose
-------
Offer a domain-specific representation of log severities ordered from the most
to the least severe, so that a single comparison decides whether a record is
retained for shipping.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.

System Role
-----------
Used by :class:`lib_log_elastic.ElasticSearchLogger` to filter records and by
:class:`lib_log_elastic.domain.records.LogRecord` to render the ``level``
keyword stored in Elasticsearch.
"""

from __future__ import annotations

from enum import Enum


class LogLevel(Enum):
    """Enumerated severities; lower values are more severe."""

    NONE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6

    @property
    def severity(self) -> str:
        """Return the upper-case name written to the ``level`` field."""

        return self.name

    def allows(self, level: "LogLevel") -> bool:
        """Return ``True`` when a record at ``level`` passes this threshold.

        Examples
        --------
        >>> LogLevel.INFO.allows(LogLevel.ERROR)
        True
        >>> LogLevel.INFO.allows(LogLevel.DEBUG)
        False
        >>> LogLevel.NONE.allows(LogLevel.FATAL)
        False
        """

        if self is LogLevel.NONE or level is LogLevel.NONE:
            return False
        return level.value <= self.value

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized.isdigit():
            return cls.from_numeric(int(normalized))
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` corresponding to ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc

    @classmethod
    def coerce(cls, value: "str | int | LogLevel") -> "LogLevel":
        """Accept a member, a name, or a numeric value."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls.from_numeric(value)
        return cls.from_name(str(value))


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
    "NOTHING": "NONE",
}
# Accepted spellings borrowed from stdlib logging and other logging APIs.


__all__ = ["LogLevel"]
