"""Bounded cache holding log records until the next flush.

Purpose
-------
Decouple producers (logging calls) from the consumer (the flush path). The
only operations that cross the boundary are :meth:`LogCache.drain`, which
snapshots and clears atomically, and :meth:`LogCache.restore`, which hands a
failed batch back.

Contents
--------
* :class:`LogCache` with append/drain/restore and iteration helpers.

System Role
-----------
Owned by :class:`lib_log_elastic.ElasticSearchLogger`. Overlapping flushes each
drain their own snapshot, so no record is written twice by two concurrent
flush calls.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Iterable, Iterator

from .records import LogRecord


class LogCache:
    """Thread-safe, fixed-capacity FIFO of :class:`LogRecord` objects.

    When the capacity is exceeded the oldest records are evicted.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_elastic.domain.levels import LogLevel
    >>> cache = LogCache(max_size=2)
    >>> ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> for text in ("a", "b", "c"):
    ...     _ = cache.append(LogRecord(ts, LogLevel.INFO, None, None, text))
    >>> [record.message for record in cache.drain()]
    ['b', 'c']
    >>> len(cache)
    0
    """

    def __init__(self, *, max_size: int) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._max_size = max_size
        self._lock = threading.Lock()
        self._buffer: Deque[LogRecord] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        """Return the configured capacity."""

        return self._max_size

    def resize(self, max_size: int) -> None:
        """Change the capacity, keeping the newest records."""
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        with self._lock:
            self._max_size = max_size
            self._buffer = deque(self._buffer, maxlen=max_size)

    def append(self, record: LogRecord) -> bool:
        """Append ``record``; return ``True`` once the cache is full."""

        with self._lock:
            self._buffer.append(record)
            return len(self._buffer) >= self._max_size

    def extend(self, records: Iterable[LogRecord]) -> None:
        """Append a sequence of records preserving chronological order."""
        with self._lock:
            self._buffer.extend(records)

    def drain(self) -> list[LogRecord]:
        """Return every pending record and clear the cache in one step."""

        with self._lock:
            records = list(self._buffer)
            self._buffer.clear()
        return records

    def restore(self, records: Iterable[LogRecord]) -> None:
        """Put a failed batch back ahead of records appended meanwhile.

        Records beyond capacity are dropped from the oldest end, so newer
        messages win when the backend stays unavailable.
        """

        with self._lock:
            merged = list(records)
            merged.extend(self._buffer)
            self._buffer = deque(merged, maxlen=self._max_size)

    def snapshot(self) -> list[LogRecord]:
        """Return a copy of the current cache state."""

        with self._lock:
            return list(self._buffer)

    def __iter__(self) -> Iterator[LogRecord]:
        """Iterate over a snapshot from oldest to newest."""
        return iter(self.snapshot())

    def __len__(self) -> int:
        """Return the number of records currently pending."""
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        """Remove all pending records."""
        with self._lock:
            self._buffer.clear()


__all__ = ["LogCache"]
