"""Error taxonomy raised by the log shipping pipeline.

Every failure surfaced by the logger derives from :class:`ApplicationError`
so callers can branch on ``category``/``code`` without importing adapter
specific exception types. The attributes mirror the structured ``error``
object persisted alongside log records (see
:class:`lib_log_elastic.domain.records.ErrorDescription`).
"""

from __future__ import annotations

from typing import Any, Mapping


class ErrorCategory:
    """Well-known category labels."""

    UNKNOWN = "Unknown"
    INTERNAL = "Internal"
    MISCONFIGURATION = "Misconfiguration"
    UNAVAILABLE = "Unavailable"


class ApplicationError(Exception):
    """Base error carrying structured metadata."""

    default_category = ErrorCategory.UNKNOWN
    default_code = "UNKNOWN"
    default_status = 500

    def __init__(
        self,
        correlation_id: str | None = None,
        code: str | None = None,
        message: str | None = None,
        *,
        category: str | None = None,
        status: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self.correlation_id = correlation_id
        self.code = code or self.default_code
        self.category = category or self.default_category
        self.status = status if status is not None else self.default_status
        self.details = dict(details or {})
        super().__init__(message or self.code)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.code


class ConfigurationError(ApplicationError):
    """The component cannot be opened with the current configuration."""

    default_category = ErrorCategory.MISCONFIGURATION
    default_code = "MISCONFIGURATION"


class BackendUnavailableError(ApplicationError):
    """The storage backend could not be reached at the transport level."""

    default_category = ErrorCategory.UNAVAILABLE
    default_code = "BACKEND_UNAVAILABLE"
    default_status = 503


class IndexCreationError(ApplicationError):
    """The target index could not be confirmed or created."""

    default_category = ErrorCategory.INTERNAL
    default_code = "INDEX_ERROR"


class StorageWriteError(ApplicationError):
    """A bulk write of log records did not complete."""

    default_category = ErrorCategory.INTERNAL
    default_code = "SAVE_ERROR"


class WriteUnavailableError(StorageWriteError):
    """The bulk request never reached a live node."""

    default_category = ErrorCategory.UNAVAILABLE
    default_status = 503


class DocumentsRejectedError(StorageWriteError):
    """The backend answered but rejected some or all documents."""


__all__ = [
    "ApplicationError",
    "BackendUnavailableError",
    "ConfigurationError",
    "DocumentsRejectedError",
    "ErrorCategory",
    "IndexCreationError",
    "StorageWriteError",
    "WriteUnavailableError",
]
