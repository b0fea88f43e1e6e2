from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from lib_log_elastic.application.use_cases.index_manager import IndexManager
from lib_log_elastic.domain.errors import BackendUnavailableError, IndexCreationError
from lib_log_elastic.domain.index_naming import IndexDescriptor, IndexRotation


def build_manager(storage: Any, clock: Any, *, daily: bool = True, index_message: bool = False) -> IndexManager:
    rotation = IndexRotation.daily("yyyyMMdd") if daily else None
    return IndexManager(
        storage=storage,
        descriptor=IndexDescriptor("log", rotation),
        clock=clock,
        index_message=index_message,
    )


def test_resolves_name_from_the_injected_clock(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock)

    assert manager.resolve_current_index_name() == "log-20240101"
    clock.moment = datetime(2024, 1, 2, 0, 0, 1, tzinfo=timezone.utc)
    assert manager.resolve_current_index_name() == "log-20240102"


def test_without_rotation_resolves_base_name(storage: Any, clock: Any) -> None:
    assert build_manager(storage, clock, daily=False).resolve_current_index_name() == "log"


def test_creates_missing_index_once_per_name(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock)

    for _ in range(5):
        manager.ensure_index_ready("log-20240101")

    assert storage.create_calls == ["log-20240101"]
    assert storage.exists_calls == ["log-20240101"]
    assert manager.confirmed_index == "log-20240101"


def test_changed_name_is_confirmed_again(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock)

    manager.ensure_index_ready("log-20240101")
    manager.ensure_index_ready("log-20240102")

    assert storage.create_calls == ["log-20240101", "log-20240102"]
    assert manager.confirmed_index == "log-20240102"


def test_existing_index_is_not_recreated(storage: Any, clock: Any) -> None:
    storage.indices["log-20240101"] = {}
    manager = build_manager(storage, clock)

    manager.ensure_index_ready("log-20240101")

    assert storage.create_calls == []
    assert manager.confirmed_index == "log-20240101"


def test_force_rechecks_a_confirmed_name(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock)
    manager.ensure_index_ready("log-20240101")

    manager.ensure_index_ready("log-20240101", force=True)

    assert storage.exists_calls == ["log-20240101", "log-20240101"]
    assert storage.create_calls == ["log-20240101"]


def test_created_index_uses_the_schema_body(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock, index_message=True)

    manager.ensure_index_ready("log-20240101")

    body = storage.indices["log-20240101"]
    assert body["settings"] == {"number_of_shards": 1}
    assert body["mappings"]["properties"]["message"]["index"] is True


def test_backend_failure_becomes_index_creation_error(storage: Any, clock: Any) -> None:
    storage.exists_error = BackendUnavailableError(None, "BACKEND_UNAVAILABLE", "no node")
    manager = build_manager(storage, clock)

    with pytest.raises(IndexCreationError) as captured:
        manager.ensure_index_ready("log-20240101")

    assert isinstance(captured.value.__cause__, BackendUnavailableError)
    assert captured.value.details == {"index": "log-20240101"}
    assert manager.confirmed_index is None


def test_failed_creation_is_retried_on_next_call(storage: Any, clock: Any) -> None:
    storage.create_error = IndexCreationError(None, "INDEX_ERROR", "refused")
    manager = build_manager(storage, clock)

    with pytest.raises(IndexCreationError, match="refused"):
        manager.ensure_index_ready("log-20240101")

    storage.create_error = None
    manager.ensure_index_ready("log-20240101")

    assert storage.create_calls == ["log-20240101", "log-20240101"]
    assert manager.confirmed_index == "log-20240101"


def test_reset_forgets_the_confirmed_name(storage: Any, clock: Any) -> None:
    manager = build_manager(storage, clock)
    manager.ensure_index_ready("log-20240101")

    manager.reset()

    assert manager.confirmed_index is None
