from __future__ import annotations

from lib_log_elastic.adapters.memory import InMemoryStorageAdapter
from lib_log_elastic.application.ports.storage import BulkDocument


def test_create_is_idempotent_and_keeps_first_body() -> None:
    storage = InMemoryStorageAdapter()

    storage.create_index("log", {"v": 1})
    storage.create_index("log", {"v": 2})

    assert storage.indices == {"log": {"v": 1}}


def test_documents_are_kept_in_write_order_per_index() -> None:
    storage = InMemoryStorageAdapter()
    batch = [BulkDocument(str(i), "log-a" if i % 2 else "log-b", "log_message", {"message": str(i)}) for i in range(4)]

    response = storage.bulk_write("log-a", "log_message", batch)

    assert response.complete is True
    assert [doc["message"] for doc in storage.documents("log-a")] == ["1", "3"]
    assert [doc["message"] for doc in storage.documents()] == ["1", "3", "0", "2"]
    assert storage.bulk_calls == 1


def test_close_marks_the_adapter_closed() -> None:
    storage = InMemoryStorageAdapter()
    storage.close()

    assert storage.closed is True
