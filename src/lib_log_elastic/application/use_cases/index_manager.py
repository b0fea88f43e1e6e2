"""Index lifecycle management for the log shipping pipeline.

Purpose
-------
Resolve the index that receives the current flush and make sure it exists with
the log mapping before any document is written.

Contents
--------
* :class:`IndexManager` - resolution plus lazy, idempotent index creation.

System Role
-----------
Called by the batch writer on every flush and eagerly once by
:meth:`lib_log_elastic.ElasticSearchLogger.open`. The confirmed index name is
shared between overlapping flushes without a lock; creating the same index
twice is harmless because the storage adapter treats "already exists" as
success.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from lib_log_elastic.application.ports.storage import StorageClientPort
from lib_log_elastic.application.ports.time import ClockPort
from lib_log_elastic.domain.errors import ApplicationError, IndexCreationError
from lib_log_elastic.domain.index_naming import IndexDescriptor
from lib_log_elastic.domain.schema import LOG_INDEX_SCHEMA, IndexSchema

logger = logging.getLogger(__name__)


class IndexManager:
    """Resolve and prepare the active index.

    Parameters
    ----------
    storage:
        Backend session used for existence checks and creation.
    descriptor:
        Base name plus optional rotation.
    clock:
        Source of the current instant; resolution converts it to UTC.
    schema:
        Mapping description applied to new indices.
    index_message:
        Whether the ``message`` field is indexed for full-text search.
    """

    def __init__(
        self,
        *,
        storage: StorageClientPort,
        descriptor: IndexDescriptor,
        clock: ClockPort,
        schema: IndexSchema = LOG_INDEX_SCHEMA,
        index_message: bool = False,
    ) -> None:
        self._storage = storage
        self._descriptor = descriptor
        self._clock = clock
        self._schema = schema
        self._body: Mapping[str, Any] = schema.to_body(index_message=index_message)
        self._confirmed: str | None = None

    @property
    def descriptor(self) -> IndexDescriptor:
        return self._descriptor

    @property
    def schema(self) -> IndexSchema:
        return self._schema

    @property
    def confirmed_index(self) -> str | None:
        """Return the last index confirmed to exist, if any."""

        return self._confirmed

    def resolve_current_index_name(self) -> str:
        """Return the index name for the current UTC instant."""

        return self._descriptor.resolve(self._clock.now())

    def ensure_index_ready(self, index_name: str, *, force: bool = False) -> None:
        """Create ``index_name`` when missing.

        Skips the backend entirely when ``force`` is false and ``index_name``
        was already confirmed. Failures raise :class:`IndexCreationError` and
        leave the confirmed name untouched so the next flush retries.
        """

        if not force and index_name == self._confirmed:
            return

        try:
            exists = self._storage.index_exists(index_name)
            if not exists:
                logger.info("Creating log index %s", index_name)
                self._storage.create_index(index_name, self._body)
        except IndexCreationError:
            raise
        except ApplicationError as exc:
            raise IndexCreationError(
                exc.correlation_id,
                "INDEX_ERROR",
                f"Cannot prepare index {index_name!r}: {exc.message}",
                details={"index": index_name},
            ) from exc

        self._confirmed = index_name

    def reset(self) -> None:
        """Forget the confirmed index so the next check reaches the backend."""

        self._confirmed = None


__all__ = ["IndexManager"]
