"""Use case writing a batch of cached records with one bulk request.

Purpose
-------
Turn an ordered sequence of :class:`LogRecord` objects into bulk documents
tagged with the active index and submit them in a single call.

System Role
-----------
Invoked by the flush use case for every non-empty cache snapshot and once by
:meth:`lib_log_elastic.ElasticSearchLogger.close`. The writer does not track
which records survived: a batch either fully succeeds or raises, and the
caller decides what happens to the records.

Alignment Notes
---------------
Unreachable backends and rejected documents surface as distinct
:class:`StorageWriteError` subclasses because their retry prospects differ.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from lib_log_elastic.application.ports.storage import BulkDocument, StorageClientPort
from lib_log_elastic.application.ports.time import IdProvider
from lib_log_elastic.domain.errors import (
    BackendUnavailableError,
    DocumentsRejectedError,
    StorageWriteError,
    WriteUnavailableError,
)
from lib_log_elastic.domain.records import LogRecord
from lib_log_elastic.domain.schema import DOCUMENT_TYPE

from .index_manager import IndexManager

logger = logging.getLogger(__name__)

WRITER_CORRELATION_ID = "elasticsearch_logger"
SAVE_ERROR_MESSAGE = "Can't save log messages to Elasticsearch server!"
_MAX_REPORTED_FAILURES = 5

WriteBatch = Callable[[Sequence[LogRecord]], int]


def build_bulk_batch(
    records: Sequence[LogRecord],
    *,
    index: str,
    id_provider: IdProvider,
    doc_type: str = DOCUMENT_TYPE,
) -> tuple[BulkDocument, ...]:
    """Return the documents for ``records`` in their original order.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_elastic.domain.levels import LogLevel
    >>> record = LogRecord(datetime(2024, 1, 1, tzinfo=timezone.utc), LogLevel.INFO, "svc", None, "hi")
    >>> batch = build_bulk_batch([record], index="log", id_provider=lambda: "id-1")
    >>> batch[0].doc_id, batch[0].index, batch[0].source["message"]
    ('id-1', 'log', 'hi')
    """

    return tuple(
        BulkDocument(doc_id=id_provider(), index=index, doc_type=doc_type, source=record.to_document())
        for record in records
    )


def create_write_batch(
    *,
    index_manager: IndexManager,
    storage: StorageClientPort,
    id_provider: IdProvider,
    is_open: Callable[[], bool],
) -> WriteBatch:
    """Return a callable persisting record batches.

    Parameters
    ----------
    index_manager:
        Resolves and prepares the index for each batch.
    storage:
        Backend session receiving the bulk request.
    id_provider:
        Generates a fresh document id per record and attempt.
    is_open:
        Reports whether the owning logger is open.

    Returns
    -------
    Callable[[Sequence[LogRecord]], int]
        Function returning the number of documents written.
    """

    def write_batch(records: Sequence[LogRecord]) -> int:
        """Persist ``records`` or raise a :class:`StorageWriteError`."""

        if not records and not is_open():
            return 0
        if not is_open():
            raise StorageWriteError(
                WRITER_CORRELATION_ID,
                "NOT_OPENED",
                "Logger is not open; records stay cached",
                details={"records": len(records)},
            )

        index = index_manager.resolve_current_index_name()
        index_manager.ensure_index_ready(index, force=False)

        if not records:
            return 0

        batch = build_bulk_batch(records, index=index, id_provider=id_provider)
        try:
            response = storage.bulk_write(index, DOCUMENT_TYPE, batch)
        except BackendUnavailableError as exc:
            raise WriteUnavailableError(
                WRITER_CORRELATION_ID,
                "SAVE_ERROR",
                SAVE_ERROR_MESSAGE,
                details={"index": index, "documents": len(batch), "reason": exc.message},
            ) from exc

        if not response.complete:
            raise DocumentsRejectedError(
                WRITER_CORRELATION_ID,
                "SAVE_ERROR",
                SAVE_ERROR_MESSAGE,
                details={
                    "index": index,
                    "documents": len(batch),
                    "rejected": len(response.failures),
                    "errors": [dict(item) for item in response.failures[:_MAX_REPORTED_FAILURES]],
                },
            )

        logger.debug("Wrote %d log documents to %s", len(batch), index)
        return len(batch)

    return write_batch


__all__ = ["WriteBatch", "build_bulk_batch", "create_write_batch"]
