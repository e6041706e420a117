"""InMemoryRecordStore: dict-backed fake for unit tests and local use."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import BackendError
from ..ports.record_store import IRecordStore


class InMemoryRecordStore(IRecordStore):
    """In-memory implementation of ``IRecordStore``.

    Keeps one dict per collection, keyed by record uuid. Records are
    returned in the wrapped ``{"id": ..., "properties": ...}`` shape, as
    copies, so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def fetch_all(self, collection: str) -> list[Mapping[str, Any]]:
        records = self._collections.get(collection, {})
        return [self._wrap(uuid, props) for uuid, props in records.items()]

    def get(self, collection: str, uuid: str) -> Mapping[str, Any] | None:
        props = self._collections.get(collection, {}).get(uuid)
        if props is None:
            return None
        return self._wrap(uuid, props)

    def create(
        self, collection: str, uuid: str, properties: Mapping[str, Any]
    ) -> None:
        records = self._collections.setdefault(collection, {})
        if uuid in records:
            raise BackendError.client_error(
                "create",
                f"Record {uuid} already exists in {collection}",
                error_code="DUPLICATE",
            )
        records[uuid] = dict(properties)

    def update(
        self, collection: str, uuid: str, properties: Mapping[str, Any]
    ) -> None:
        records = self._collections.get(collection, {})
        if uuid not in records:
            raise BackendError.client_error(
                "update",
                f"Record {uuid} not found in {collection}",
                error_code="NOT_FOUND",
            )
        records[uuid].update(properties)

    def delete(self, collection: str, uuid: str) -> bool:
        return self._collections.get(collection, {}).pop(uuid, None) is not None

    @staticmethod
    def _wrap(uuid: str, props: Mapping[str, Any]) -> dict[str, Any]:
        return {"id": uuid, "properties": dict(props)}

    # ── Test helpers ─────────────────────────────────────────────

    def put_raw(
        self, collection: str, uuid: str, properties: Mapping[str, Any]
    ) -> None:
        """Store a record as-is, bypassing duplicate checks (for malformed data)."""
        self._collections.setdefault(collection, {})[uuid] = dict(properties)

    def clear(self) -> None:
        self._collections.clear()

    def __len__(self) -> int:
        return sum(len(records) for records in self._collections.values())
