"""Console port describing terminal emission contracts.

Purpose
-------
Define the abstraction for adapters that echo log records to interactive
consoles, letting the CLI depend on a narrow protocol.

Contents
--------
* :class:`ConsolePort` - runtime-checkable protocol with a single ``emit``
  method supporting optional colour control.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_elastic.domain.records import LogRecord


@runtime_checkable
class ConsolePort(Protocol):
    """Render a log record to an interactive console."""

    def emit(self, record: LogRecord, *, colorize: bool) -> None:
        """Render ``record`` with optional colour control."""


__all__ = ["ConsolePort"]
