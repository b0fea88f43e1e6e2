"""Typed description of the log index mapping.

Purpose
-------
Describe the Elasticsearch mapping for log documents once, as immutable data,
instead of rebuilding a nested dictionary literal on every index creation.

Contents
--------
* :class:`FieldMapping` - one mapped property, optionally nested.
* :class:`IndexSchema` - versioned collection of fields plus index settings.
* :data:`LOG_INDEX_SCHEMA` - the schema applied to every log index.

System Role
-----------
Consumed by the index manager when it creates a missing index. The
``message`` field is indexed only when the logger enables ``index_message``;
that toggle is applied while rendering, so the schema itself stays constant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DOCUMENT_TYPE = "log_message"
SCHEMA_VERSION = 1


@dataclass(slots=True, frozen=True)
class FieldMapping:
    """Mapped property. ``indexed=None`` leaves the ``index`` flag unset."""

    name: str
    type: str
    indexed: bool | None = None
    properties: tuple["FieldMapping", ...] = ()

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"type": self.type}
        if self.indexed is not None:
            body["index"] = self.indexed
        if self.properties:
            body["properties"] = {prop.name: prop.to_dict() for prop in self.properties}
        return body


@dataclass(slots=True, frozen=True)
class IndexSchema:
    """Versioned index layout for one document type."""

    version: int
    document_type: str
    shards: int
    fields: tuple[FieldMapping, ...]
    message_field: str = "message"

    def to_body(self, *, index_message: bool = False) -> dict[str, Any]:
        """Render the create-index request body.

        Examples
        --------
        >>> body = LOG_INDEX_SCHEMA.to_body(index_message=True)
        >>> body["settings"]
        {'number_of_shards': 1}
        >>> body["mappings"]["properties"]["message"]
        {'type': 'text', 'index': True}
        >>> body["mappings"]["_meta"]["document_type"]
        'log_message'
        """

        properties: dict[str, Any] = {}
        for item in self.fields:
            rendered = item.to_dict()
            if item.name == self.message_field:
                rendered["index"] = index_message
            properties[item.name] = rendered
        return {
            "settings": {"number_of_shards": self.shards},
            "mappings": {
                "_meta": {"schema_version": self.version, "document_type": self.document_type},
                "properties": properties,
            },
        }


LOG_INDEX_SCHEMA = IndexSchema(
    version=SCHEMA_VERSION,
    document_type=DOCUMENT_TYPE,
    shards=1,
    fields=(
        FieldMapping("time", "date", indexed=True),
        FieldMapping("source", "keyword", indexed=True),
        FieldMapping("level", "keyword", indexed=True),
        FieldMapping("correlation_id", "text", indexed=True),
        FieldMapping(
            "error",
            "object",
            properties=(
                FieldMapping("type", "keyword", indexed=True),
                FieldMapping("category", "keyword", indexed=True),
                FieldMapping("status", "integer", indexed=False),
                FieldMapping("code", "keyword", indexed=True),
                FieldMapping("message", "text", indexed=False),
                FieldMapping("details", "object"),
                FieldMapping("correlation_id", "text", indexed=False),
                FieldMapping("cause", "text", indexed=False),
                FieldMapping("stack_trace", "text", indexed=False),
            ),
        ),
        FieldMapping("message", "text", indexed=False),
    ),
)
"""Mapping applied to every log index; built once at import time."""


__all__ = ["DOCUMENT_TYPE", "FieldMapping", "IndexSchema", "LOG_INDEX_SCHEMA", "SCHEMA_VERSION"]
