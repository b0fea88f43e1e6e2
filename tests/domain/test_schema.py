from __future__ import annotations

from lib_log_elastic.domain.schema import DOCUMENT_TYPE, LOG_INDEX_SCHEMA, SCHEMA_VERSION


def test_body_contains_single_shard_and_meta() -> None:
    body = LOG_INDEX_SCHEMA.to_body()

    assert body["settings"] == {"number_of_shards": 1}
    assert body["mappings"]["_meta"] == {"schema_version": SCHEMA_VERSION, "document_type": DOCUMENT_TYPE}


def test_top_level_fields_and_types() -> None:
    properties = LOG_INDEX_SCHEMA.to_body()["mappings"]["properties"]

    assert properties["time"] == {"type": "date", "index": True}
    assert properties["source"] == {"type": "keyword", "index": True}
    assert properties["level"] == {"type": "keyword", "index": True}
    assert properties["correlation_id"] == {"type": "text", "index": True}
    assert set(properties) == {"time", "source", "level", "correlation_id", "error", "message"}


def test_error_object_fields() -> None:
    error = LOG_INDEX_SCHEMA.to_body()["mappings"]["properties"]["error"]

    assert error["type"] == "object"
    nested = error["properties"]
    assert nested["status"] == {"type": "integer", "index": False}
    assert nested["code"] == {"type": "keyword", "index": True}
    assert nested["details"] == {"type": "object"}
    assert nested["stack_trace"] == {"type": "text", "index": False}


def test_message_indexing_follows_the_toggle() -> None:
    off = LOG_INDEX_SCHEMA.to_body(index_message=False)["mappings"]["properties"]["message"]
    on = LOG_INDEX_SCHEMA.to_body(index_message=True)["mappings"]["properties"]["message"]

    assert off == {"type": "text", "index": False}
    assert on == {"type": "text", "index": True}


def test_rendering_does_not_mutate_the_schema() -> None:
    LOG_INDEX_SCHEMA.to_body(index_message=True)

    message = LOG_INDEX_SCHEMA.to_body()["mappings"]["properties"]["message"]
    assert message["index"] is False
