"""Use case moving cached records into storage.

Purpose
-------
Provide the application-layer glue between the log cache and the batch writer.

System Role
-----------
Invoked by the periodic timer, by :meth:`lib_log_elastic.ElasticSearchLogger.dump`
and by the final flush in ``close``. Every call drains its own snapshot from the
cache, so overlapping calls never submit the same record twice.
"""

from __future__ import annotations

from typing import Callable

from lib_log_elastic.domain.log_cache import LogCache

from .batch_writer import WriteBatch


def create_flush(*, cache: LogCache, write_batch: WriteBatch) -> Callable[[], int]:
    """Return a callable capturing the current dependencies.

    Examples
    --------
    >>> written = []
    >>> cache = LogCache(max_size=5)
    >>> flush = create_flush(cache=cache, write_batch=lambda records: written.append(list(records)) or len(records))
    >>> flush()
    0
    >>> written
    []
    """

    def flush() -> int:
        """Write the pending records; restore them to the cache on failure.

        Side Effects
        ------------
        Drains the cache before writing. When the write raises, the drained
        records are put back ahead of anything appended meanwhile and the
        error propagates.
        """

        records = cache.drain()
        if not records:
            return 0
        try:
            return write_batch(records)
        except Exception:
            cache.restore(records)
            raise

    return flush


__all__ = ["create_flush"]
