"""System-backed implementations of the time and identifier ports."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from lib_log_elastic.application.ports.time import ClockPort, IdProvider


class SystemClock(ClockPort):
    """Return timezone-aware UTC timestamps from the wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidProvider(IdProvider):
    """Generate random hexadecimal document identifiers.

    Examples
    --------
    >>> len(UuidProvider()())
    32
    """

    def __call__(self) -> str:
        return uuid4().hex


__all__ = ["SystemClock", "UuidProvider"]
