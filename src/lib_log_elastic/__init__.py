"""Buffered Elasticsearch log shipping.

Records are cached in memory and written in bulk to a (optionally daily
rotated) index by a background timer. Hosts either own an
:class:`ElasticSearchLogger` directly or use the process-wide façade
(:func:`init`, :func:`get`, :func:`dump`, :func:`shutdown`).
"""

from __future__ import annotations

from .config import LoggerSettings, build_settings
from .domain import (
    ApplicationError,
    BackendUnavailableError,
    ConfigurationError,
    DocumentsRejectedError,
    IndexCreationError,
    LogLevel,
    LogRecord,
    StorageWriteError,
    WriteUnavailableError,
)
from .elastic_logger import ElasticSearchLogger, LifecycleState
from .factory import DefaultElasticSearchFactory, Descriptor
from .runtime import dump, get, init, inspect_runtime, shutdown


def summary_info() -> str:
    """Return the metadata banner printed by ``lib_log_elastic info``.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """
    from . import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "ApplicationError",
    "BackendUnavailableError",
    "ConfigurationError",
    "DefaultElasticSearchFactory",
    "Descriptor",
    "DocumentsRejectedError",
    "ElasticSearchLogger",
    "IndexCreationError",
    "LifecycleState",
    "LogLevel",
    "LogRecord",
    "LoggerSettings",
    "StorageWriteError",
    "WriteUnavailableError",
    "build_settings",
    "dump",
    "get",
    "init",
    "inspect_runtime",
    "shutdown",
    "summary_info",
]
