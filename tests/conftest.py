"""Shared fixtures for edgebinder_weaviate tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from edgebinder_weaviate import (
    Binding,
    EntityReference,
    FilterEngine,
    InMemoryRecordStore,
    WeaviateAdapter,
)
from edgebinder_weaviate.mapping import BindingMapper, derive_identifier
from edgebinder_weaviate.query.operators_memory import build_default_registry

COLLECTION = "EdgeBindings"
CREATED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Widget:
    """Minimal object implementing the Entity protocol."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        self._type = entity_type
        self._id = entity_id

    def get_id(self) -> str:
        return self._id

    def get_type(self) -> str:
        return self._type


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def mapper() -> BindingMapper:
    return BindingMapper()


@pytest.fixture
def engine(store: InMemoryRecordStore, mapper: BindingMapper) -> FilterEngine:
    return FilterEngine(store, collection=COLLECTION, mapper=mapper)


@pytest.fixture
def adapter(store: InMemoryRecordStore) -> WeaviateAdapter:
    return WeaviateAdapter(store)


@pytest.fixture
def make_binding() -> Callable[..., Binding]:
    def _make(
        binding_id: str,
        *,
        source: tuple[str, str] = ("User", "u1"),
        target: tuple[str, str] = ("Project", "p1"),
        binding_type: str = "owns",
        metadata: dict[str, Any] | None = None,
        created_at: datetime = CREATED,
    ) -> Binding:
        return Binding(
            id=binding_id,
            from_type=source[0],
            from_id=source[1],
            to_type=target[0],
            to_id=target[1],
            type=binding_type,
            metadata=metadata or {},
            created_at=created_at,
            updated_at=created_at,
        )

    return _make


@pytest.fixture
def seed(
    store: InMemoryRecordStore, mapper: BindingMapper
) -> Callable[..., list[Binding]]:
    """Write bindings straight into the store, bypassing the adapter."""

    def _seed(*bindings: Binding) -> list[Binding]:
        for binding in bindings:
            store.create(
                COLLECTION,
                derive_identifier(binding.id),
                mapper.to_properties(binding),
            )
        return list(bindings)

    return _seed


@pytest.fixture
def user() -> EntityReference:
    return EntityReference(type="User", id="u1")


@pytest.fixture
def widget() -> Widget:
    return Widget("Project", "p1")
