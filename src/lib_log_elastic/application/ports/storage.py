"""Storage port defining the backend contract used by the flush pipeline.

Purpose
-------
Describe the three backend operations the core depends on (existence check,
index creation, bulk write) so the application layer never imports the
Elasticsearch client directly.

Contents
--------
* :class:`BulkDocument` - one document of a bulk batch.
* :class:`BulkResponse` - outcome of a bulk call.
* :class:`StorageClientPort` - runtime-checkable protocol.

System Role
-----------
Implemented by :class:`lib_log_elastic.adapters.elasticsearch.ElasticsearchStorageAdapter`
for production and :class:`lib_log_elastic.adapters.memory.InMemoryStorageAdapter`
for dry runs. Adapters raise
:class:`lib_log_elastic.domain.errors.BackendUnavailableError` for transport
failures; any other backend refusal is reported through the return value
(bulk) or :class:`lib_log_elastic.domain.errors.IndexCreationError`
(index operations).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class BulkDocument:
    """Document addressed to ``index`` with a generated identifier."""

    doc_id: str
    index: str
    doc_type: str
    source: Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class BulkResponse:
    """Batch-level outcome of a bulk call.

    Examples
    --------
    >>> BulkResponse(succeeded=3).complete
    True
    >>> BulkResponse(succeeded=2, failures=({"reason": "mapper_parsing_exception"},)).complete
    False
    """

    succeeded: int
    failures: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return not self.failures


@runtime_checkable
class StorageClientPort(Protocol):
    """Persist documents into named indices of a search backend."""

    def index_exists(self, name: str) -> bool:
        """Return ``True`` when index ``name`` exists."""

    def create_index(self, name: str, body: Mapping[str, Any]) -> None:
        """Create index ``name``; an already existing index is not an error."""

    def bulk_write(self, index: str, doc_type: str, documents: Sequence[BulkDocument]) -> BulkResponse:
        """Submit ``documents`` in one bulk request."""

    def close(self) -> None:
        """Release the client session."""


__all__ = ["BulkDocument", "BulkResponse", "StorageClientPort"]
