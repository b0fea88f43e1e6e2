"""Domain entities and value objects used by the log shipping pipeline."""

from __future__ import annotations

from .connection import ConnectionTarget
from .errors import (
    ApplicationError,
    BackendUnavailableError,
    ConfigurationError,
    DocumentsRejectedError,
    IndexCreationError,
    StorageWriteError,
    WriteUnavailableError,
)
from .index_naming import DatePattern, IndexDescriptor, IndexRotation
from .levels import LogLevel
from .log_cache import LogCache
from .records import ErrorDescription, LogRecord
from .schema import DOCUMENT_TYPE, LOG_INDEX_SCHEMA, FieldMapping, IndexSchema

__all__ = [
    "ApplicationError",
    "BackendUnavailableError",
    "ConfigurationError",
    "ConnectionTarget",
    "DOCUMENT_TYPE",
    "DatePattern",
    "DocumentsRejectedError",
    "ErrorDescription",
    "FieldMapping",
    "IndexCreationError",
    "IndexDescriptor",
    "IndexRotation",
    "IndexSchema",
    "LOG_INDEX_SCHEMA",
    "LogCache",
    "LogLevel",
    "LogRecord",
    "StorageWriteError",
    "WriteUnavailableError",
]
