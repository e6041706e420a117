"""Tests for InMemoryRecordStore."""

from __future__ import annotations

import pytest

from edgebinder_weaviate.adapters import InMemoryRecordStore
from edgebinder_weaviate.exceptions import BackendError
from edgebinder_weaviate.ports import IRecordStore


def test_satisfies_protocol(store) -> None:
    assert isinstance(store, IRecordStore)


def test_create_get_and_fetch_all(store) -> None:
    store.create("C", "id-1", {"bindingId": "b1"})
    assert store.get("C", "id-1") == {"id": "id-1", "properties": {"bindingId": "b1"}}
    assert store.fetch_all("C") == [{"id": "id-1", "properties": {"bindingId": "b1"}}]
    assert store.fetch_all("Other") == []
    assert store.get("C", "missing") is None


def test_duplicate_create_is_client_error(store) -> None:
    store.create("C", "id-1", {})
    with pytest.raises(BackendError) as exc_info:
        store.create("C", "id-1", {})
    assert exc_info.value.retryable is False
    assert exc_info.value.error_code == "DUPLICATE"


def test_update_merges_properties(store) -> None:
    store.create("C", "id-1", {"a": 1, "b": 2})
    store.update("C", "id-1", {"b": 3})
    assert store.get("C", "id-1")["properties"] == {"a": 1, "b": 3}


def test_update_unknown_record_is_client_error(store) -> None:
    with pytest.raises(BackendError) as exc_info:
        store.update("C", "id-1", {})
    assert exc_info.value.error_code == "NOT_FOUND"


def test_delete(store) -> None:
    store.create("C", "id-1", {})
    assert store.delete("C", "id-1") is True
    assert store.delete("C", "id-1") is False


def test_returned_records_are_copies(store) -> None:
    store.create("C", "id-1", {"a": 1})
    store.get("C", "id-1")["properties"]["a"] = 99
    assert store.get("C", "id-1")["properties"] == {"a": 1}


def test_clear_and_len() -> None:
    store = InMemoryRecordStore()
    store.create("C", "id-1", {})
    store.create("D", "id-2", {})
    assert len(store) == 2
    store.clear()
    assert len(store) == 0
