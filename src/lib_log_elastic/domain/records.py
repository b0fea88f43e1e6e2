"""Domain records describing captured log messages.

Purpose
-------
Provide immutable, serialisable representations of log messages and the
structured errors attached to them.

Contents
--------
* :class:`ErrorDescription` - serialisable snapshot of an exception.
* :class:`LogRecord` - one captured log message.
* Utility function ``_ensure_aware`` for timestamp validation.

System Role
-----------
Sits in the domain layer. The batch writer turns each :class:`LogRecord` into
an Elasticsearch document through :meth:`LogRecord.to_document`, so the field
layout here must match :data:`lib_log_elastic.domain.schema.LOG_INDEX_SCHEMA`.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import ApplicationError, ErrorCategory
from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class ErrorDescription:
    """Structured error persisted in the nested ``error`` object.

    Attributes
    ----------
    type:
        Exception class name.
    category:
        Coarse classification (``Unknown``, ``Misconfiguration`` ...).
    status:
        HTTP-like numeric status.
    code:
        Stable machine readable code.
    message:
        Human readable message.
    details:
        Free-form key/value pairs.
    correlation_id:
        Transaction id the error was raised under, if known.
    cause:
        Rendered message of the chained cause.
    stack_trace:
        Formatted traceback.
    """

    type: str | None = None
    category: str | None = None
    status: int | None = None
    code: str | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    correlation_id: str | None = None
    cause: str | None = None
    stack_trace: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", dict(self.details))

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDescription":
        """Describe ``exc``; application errors contribute their own metadata.

        Examples
        --------
        >>> description = ErrorDescription.from_exception(ValueError("bad"))
        >>> description.type, description.category, description.code, description.status
        ('ValueError', 'Unknown', 'UNKNOWN', 500)
        """

        cause = exc.__cause__
        stack = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        if isinstance(exc, ApplicationError):
            return cls(
                type=type(exc).__name__,
                category=exc.category,
                status=exc.status,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                correlation_id=exc.correlation_id,
                cause=str(cause) if cause is not None else None,
                stack_trace=stack,
            )
        return cls(
            type=type(exc).__name__,
            category=ErrorCategory.UNKNOWN,
            status=500,
            code="UNKNOWN",
            message=str(exc) or type(exc).__name__,
            cause=str(cause) if cause is not None else None,
            stack_trace=stack,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the nested document layout, omitting empty fields."""

        data = {
            "type": self.type,
            "category": self.category,
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "details": dict(self.details) if self.details else None,
            "correlation_id": self.correlation_id,
            "cause": self.cause,
            "stack_trace": self.stack_trace,
        }
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ErrorDescription":
        return cls(
            type=payload.get("type"),
            category=payload.get("category"),
            status=payload.get("status"),
            code=payload.get("code"),
            message=payload.get("message"),
            details=payload.get("details") or {},
            correlation_id=payload.get("correlation_id"),
            cause=payload.get("cause"),
            stack_trace=payload.get("stack_trace"),
        )


@dataclass(slots=True, frozen=True)
class LogRecord:
    """Immutable log message waiting in the cache for the next flush.

    Attributes
    ----------
    time:
        Time of the message in timezone-aware UTC.
    level:
        :class:`LogLevel` severity.
    source:
        Source (context) name configured on the logger.
    correlation_id:
        Transaction id used to trace execution through a call chain.
    message:
        Rendered message text.
    error:
        Optional :class:`ErrorDescription`.
    """

    time: datetime
    level: LogLevel
    source: str | None
    correlation_id: str | None
    message: str
    error: ErrorDescription | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", _ensure_aware(self.time))
        if self.level is LogLevel.NONE:
            raise ValueError("records cannot carry LogLevel.NONE")

    def to_document(self) -> dict[str, Any]:
        """Serialize the record to the persisted Elasticsearch document."""

        document: dict[str, Any] = {
            "time": self.time.isoformat(),
            "source": self.source,
            "level": self.level.severity,
            "correlation_id": self.correlation_id,
            "message": self.message,
        }
        if self.error is not None:
            document["error"] = self.error.to_dict()
        return document

    @classmethod
    def from_document(cls, payload: dict[str, Any]) -> "LogRecord":
        """Reconstruct a record from :meth:`to_document` output."""

        error = payload.get("error")
        return cls(
            time=datetime.fromisoformat(payload["time"]),
            level=LogLevel.from_name(payload["level"]),
            source=payload.get("source"),
            correlation_id=payload.get("correlation_id"),
            message=payload.get("message", ""),
            error=ErrorDescription.from_dict(error) if error else None,
        )


__all__ = ["ErrorDescription", "LogRecord"]
