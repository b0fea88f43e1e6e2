"""Use cases orchestrating index preparation, batch writes, flushes and shutdown."""

from __future__ import annotations

from .batch_writer import WriteBatch, build_bulk_batch, create_write_batch
from .flush import create_flush
from .index_manager import IndexManager
from .shutdown import create_shutdown

__all__ = [
    "IndexManager",
    "WriteBatch",
    "build_bulk_batch",
    "create_flush",
    "create_shutdown",
    "create_write_batch",
]
