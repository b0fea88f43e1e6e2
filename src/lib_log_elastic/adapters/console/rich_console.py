"""Rich-powered console adapter implementing :class:`ConsolePort`.

Purpose
-------
Echo captured log records to a terminal, used by the CLI demo so operators see
what is about to be shipped.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleAdapter` - adapter used by ``lib_log_elastic logdemo``.
"""

from __future__ import annotations

from typing import Mapping, MutableMapping

from rich.console import Console

from lib_log_elastic.application.ports.console import ConsolePort
from lib_log_elastic.domain.levels import LogLevel
from lib_log_elastic.domain.records import LogRecord


_STYLE_MAP: Mapping[LogLevel, str] = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "dim",
    LogLevel.INFO: "cyan",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "bold red",
}


class RichConsoleAdapter(ConsolePort):
    """Render log records with Rich styles keyed by level."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: MutableMapping[LogLevel | str, str] | None = None,
    ) -> None:
        self._console = console if console is not None else Console(force_terminal=force_color, no_color=no_color)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            merged[LogLevel.coerce(key)] = value
        self._style_map = merged

    def emit(self, record: LogRecord, *, colorize: bool) -> None:
        """Print ``record`` with optional colour.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> from io import StringIO
        >>> record = LogRecord(datetime(2024, 1, 1, tzinfo=timezone.utc), LogLevel.INFO, "svc", "c1", "msg")
        >>> console = Console(file=StringIO(), record=True)
        >>> RichConsoleAdapter(console=console).emit(record, colorize=False)
        >>> "msg" in console.export_text()
        True
        """
        style = self._style_map.get(record.level, "") if colorize and not self._no_color else ""
        self._console.print(self.format_line(record), style=style, highlight=False, markup=False)

    @staticmethod
    def format_line(record: LogRecord) -> str:
        """Return a single console line for ``record``.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> record = LogRecord(datetime(2024, 1, 1, tzinfo=timezone.utc), LogLevel.WARN, None, None, "careful")
        >>> RichConsoleAdapter.format_line(record)
        '2024-01-01T00:00:00+00:00     WARN - careful'
        """
        parts = [record.time.isoformat(), f"{record.level.severity:>8}"]
        if record.source:
            parts.append(f"[{record.source}]")
        if record.correlation_id:
            parts.append(f"({record.correlation_id})")
        line = " ".join(parts) + f" - {record.message}"
        if record.error is not None:
            line += f" | {record.error.type}: {record.error.message}"
        return line


__all__ = ["RichConsoleAdapter"]
