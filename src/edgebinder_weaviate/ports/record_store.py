"""IRecordStore: the backing-store collaborator protocol."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

from ..exceptions import BackendError, EdgeBinderError

logger = logging.getLogger("edgebinder_weaviate.store")


@runtime_checkable
class IRecordStore(Protocol):
    """
    Synchronous access to a collection of backend-native records.

    Records are property mappings (see ``BindingMapper.to_properties``),
    optionally wrapped as ``{"id": uuid, "properties": {...}}``. Records
    are addressed by the opaque identifier derived from the binding id.
    Timeouts and retries are the implementation's concern.
    """

    def fetch_all(self, collection: str) -> list[Mapping[str, Any]]: ...

    def get(self, collection: str, uuid: str) -> Mapping[str, Any] | None: ...

    def create(
        self, collection: str, uuid: str, properties: Mapping[str, Any]
    ) -> None: ...

    def update(
        self, collection: str, uuid: str, properties: Mapping[str, Any]
    ) -> None:
        """Merge ``properties`` into the existing record."""
        ...

    def delete(self, collection: str, uuid: str) -> bool:
        """Remove a record; ``False`` when it did not exist."""
        ...


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """
    Raise collaborator failures inside the block as ``BackendError``.

    Library errors pass through unchanged; ``OSError`` becomes a retryable
    connection error and anything else a retryable server error.
    """
    try:
        yield
    except EdgeBinderError:
        raise
    except OSError as e:
        logger.warning("Record store %s failed: %s", operation, e)
        raise BackendError.connection_error(operation, str(e)) from e
    except Exception as e:
        logger.warning("Record store %s failed: %s", operation, e)
        raise BackendError.server_error(
            operation, f"{type(e).__name__}: {e}"
        ) from e
