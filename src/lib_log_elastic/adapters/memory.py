"""In-memory storage adapter used for dry runs and tests.

Purpose
-------
Satisfy :class:`StorageClientPort` without a backend so the full flush
pipeline can run locally, for example behind ``lib_log_elastic logdemo --dry-run``.

Contents
--------
* :class:`InMemoryStorageAdapter` - keeps indices and documents in dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from threading import Lock
from typing import Any

from lib_log_elastic.application.ports.storage import BulkDocument, BulkResponse, StorageClientPort


class InMemoryStorageAdapter(StorageClientPort):
    """Store created indices and written documents in process memory.

    Examples
    --------
    >>> storage = InMemoryStorageAdapter()
    >>> storage.index_exists("log")
    False
    >>> storage.create_index("log", {"mappings": {}})
    >>> storage.bulk_write("log", "log_message", [BulkDocument("1", "log", "log_message", {"message": "hi"})]).succeeded
    1
    >>> storage.documents("log")[0]["message"]
    'hi'
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._indices: dict[str, Mapping[str, Any]] = {}
        self._documents: dict[str, list[BulkDocument]] = {}
        self.bulk_calls = 0
        self.closed = False

    def index_exists(self, name: str) -> bool:
        with self._lock:
            return name in self._indices

    def create_index(self, name: str, body: Mapping[str, Any]) -> None:
        with self._lock:
            self._indices.setdefault(name, body)
            self._documents.setdefault(name, [])

    def bulk_write(self, index: str, doc_type: str, documents: Sequence[BulkDocument]) -> BulkResponse:
        with self._lock:
            self.bulk_calls += 1
            for document in documents:
                self._documents.setdefault(document.index, []).append(document)
        return BulkResponse(succeeded=len(documents))

    def close(self) -> None:
        self.closed = True

    @property
    def indices(self) -> dict[str, Mapping[str, Any]]:
        with self._lock:
            return dict(self._indices)

    def documents(self, index: str | None = None) -> list[dict[str, Any]]:
        """Return the sources written to ``index`` (or every index) in write order."""

        with self._lock:
            if index is not None:
                return [dict(doc.source) for doc in self._documents.get(index, [])]
            return [dict(doc.source) for docs in self._documents.values() for doc in docs]


__all__ = ["InMemoryStorageAdapter"]
