"""Elasticsearch adapter implementing :class:`StorageClientPort`.

Purpose
-------
Wrap the official ``elasticsearch`` client so the application layer only sees
the narrow storage port and the domain error taxonomy.

Contents
--------
* :class:`ElasticsearchStorageAdapter` - index checks, creation and bulk writes.

System Role
-----------
Created once per ``open`` from the resolved :class:`ConnectionTarget`.
Transport failures (no live node, timeouts) become
:class:`BackendUnavailableError`; refusals on index operations become
:class:`IndexCreationError`; per-document bulk rejections come back in the
:class:`BulkResponse` so the batch writer can judge completeness.

Alignment Notes
---------------
Elasticsearch 7+ has no mapping types, so ``doc_type`` never reaches the wire;
the schema records it under ``_meta.document_type`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from elasticsearch import ApiError, Elasticsearch, TransportError
from elasticsearch import helpers

from lib_log_elastic.application.ports.storage import BulkDocument, BulkResponse, StorageClientPort
from lib_log_elastic.domain.connection import ConnectionTarget
from lib_log_elastic.domain.errors import BackendUnavailableError, IndexCreationError

if TYPE_CHECKING:
    from lib_log_elastic.config import LoggerSettings

logger = logging.getLogger(__name__)

ALREADY_EXISTS_ERROR = "resource_already_exists_exception"

BulkCallable = Callable[..., tuple[int, Any]]


def _error_type(exc: ApiError) -> str | None:
    """Return the ``error.type`` reported in an API error body, if any."""

    body = exc.body
    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping):
            kind = error.get("type")
            return str(kind) if kind is not None else None
    return None


def _summarise_failure(item: Any) -> dict[str, Any]:
    """Flatten one bulk error item into ``id``/``status``/``type``/``reason``."""

    if not isinstance(item, Mapping):
        return {"reason": str(item)}
    details: Mapping[str, Any] = item
    if len(item) == 1:
        only = next(iter(item.values()))
        if isinstance(only, Mapping):
            details = only
    error = details.get("error")
    summary: dict[str, Any] = {"id": details.get("_id"), "status": details.get("status")}
    if isinstance(error, Mapping):
        summary["type"] = error.get("type")
        summary["reason"] = error.get("reason")
    elif error is not None:
        summary["reason"] = str(error)
    return summary


class ElasticsearchStorageAdapter(StorageClientPort):
    """Persist log documents through an :class:`elasticsearch.Elasticsearch` client.

    Parameters
    ----------
    client:
        Configured client. Tests inject a fake exposing ``indices.exists``,
        ``indices.create`` and ``close``.
    bulk:
        Bulk helper; defaults to :func:`elasticsearch.helpers.bulk`.
    target:
        Endpoint the client talks to, kept for log messages.
    """

    def __init__(
        self,
        client: Any,
        *,
        bulk: BulkCallable | None = None,
        target: ConnectionTarget | None = None,
    ) -> None:
        self._client = client
        self._bulk = bulk or helpers.bulk
        self._target = target

    @classmethod
    def from_target(cls, target: ConnectionTarget, settings: "LoggerSettings") -> "ElasticsearchStorageAdapter":
        """Build a client for ``target`` using the transport options in ``settings``."""

        client = Elasticsearch(
            hosts=[target.uri],
            request_timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
            retry_on_timeout=True,
            max_dead_node_backoff=settings.reconnect_seconds,
        )
        return cls(client, target=target)

    @property
    def client(self) -> Any:
        return self._client

    @property
    def target(self) -> ConnectionTarget | None:
        return self._target

    def index_exists(self, name: str) -> bool:
        try:
            return bool(self._client.indices.exists(index=name))
        except ApiError as exc:
            raise IndexCreationError(
                None,
                "INDEX_ERROR",
                f"Cannot check index {name!r}: {exc.message}",
                status=exc.meta.status,
                details={"index": name},
            ) from exc
        except TransportError as exc:
            raise self._unavailable(exc) from exc

    def create_index(self, name: str, body: Mapping[str, Any]) -> None:
        try:
            self._client.indices.create(
                index=name,
                settings=body.get("settings"),
                mappings=body.get("mappings"),
            )
        except ApiError as exc:
            if _error_type(exc) == ALREADY_EXISTS_ERROR:
                logger.debug("Index %s was created concurrently", name)
                return
            raise IndexCreationError(
                None,
                "INDEX_ERROR",
                f"Cannot create index {name!r}: {exc.message}",
                status=exc.meta.status,
                details={"index": name, "type": _error_type(exc)},
            ) from exc
        except TransportError as exc:
            raise self._unavailable(exc) from exc

    def bulk_write(self, index: str, doc_type: str, documents: Sequence[BulkDocument]) -> BulkResponse:
        if not documents:
            return BulkResponse(succeeded=0)
        try:
            succeeded, errors = self._bulk(self._client, self._actions(documents), raise_on_error=False)
        except ApiError as exc:
            return BulkResponse(
                succeeded=0,
                failures=({"status": exc.meta.status, "type": _error_type(exc), "reason": exc.message},),
            )
        except TransportError as exc:
            raise self._unavailable(exc) from exc
        failures = tuple(_summarise_failure(item) for item in errors or ())
        return BulkResponse(succeeded=int(succeeded), failures=failures)

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _actions(documents: Iterable[BulkDocument]) -> list[dict[str, Any]]:
        return [
            {
                "_op_type": "index",
                "_index": document.index,
                "_id": document.doc_id,
                "_source": dict(document.source),
            }
            for document in documents
        ]

    def _unavailable(self, exc: TransportError) -> BackendUnavailableError:
        where = self._target.uri if self._target is not None else "elasticsearch"
        return BackendUnavailableError(
            None,
            "BACKEND_UNAVAILABLE",
            f"Elasticsearch at {where} is unreachable: {exc.message}",
            details={"uri": where},
        )


__all__ = ["ALREADY_EXISTS_ERROR", "ElasticsearchStorageAdapter"]
