"""Binding aggregate and entity references."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import EntityExtractionError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class Entity(Protocol):
    """Capability every entity taking part in a binding must provide."""

    def get_id(self) -> str: ...

    def get_type(self) -> str: ...


class EntityReference(BaseModel):
    """Immutable ``(type, id)`` pair identifying one end of a binding."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(min_length=1)
    id: str = Field(min_length=1)

    def get_id(self) -> str:
        return self.id

    def get_type(self) -> str:
        return self.type

    @classmethod
    def of(cls, entity: object) -> EntityReference:
        """Build a reference from any object implementing :class:`Entity`.

        Raises:
            EntityExtractionError: If the object does not implement the
                protocol or returns an empty/non-string id or type.
        """
        if isinstance(entity, EntityReference):
            return entity
        if not isinstance(entity, Entity):
            raise EntityExtractionError(
                f"Cannot extract entity reference from {type(entity).__name__}: "
                "entity must implement get_id() and get_type().",
                entity,
            )
        entity_id = entity.get_id()
        entity_type = entity.get_type()
        if not isinstance(entity_id, str) or not entity_id:
            raise EntityExtractionError(
                f"Entity {type(entity).__name__} returned an invalid id: {entity_id!r}",
                entity,
            )
        if not isinstance(entity_type, str) or not entity_type:
            raise EntityExtractionError(
                f"Entity {type(entity).__name__} returned an invalid type: "
                f"{entity_type!r}",
                entity,
            )
        return cls(type=entity_type, id=entity_id)


class Binding(BaseModel):
    """A typed relationship between two entities, carrying metadata.

    Bindings are immutable; metadata changes produce a new instance via
    :meth:`with_metadata`, which keeps ``id`` and ``created_at`` and never
    moves ``updated_at`` backwards.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str = Field(min_length=1)
    from_type: str
    from_id: str
    to_type: str
    to_id: str
    type: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def create(
        cls,
        binding_id: str,
        source: Entity,
        target: Entity,
        binding_type: str,
        metadata: dict[str, Any] | None = None,
    ) -> Binding:
        """Create a new binding between two entities, stamping both timestamps."""
        src = EntityReference.of(source)
        dst = EntityReference.of(target)
        now = utcnow()
        return cls(
            id=binding_id,
            from_type=src.type,
            from_id=src.id,
            to_type=dst.type,
            to_id=dst.id,
            type=binding_type,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    @property
    def source(self) -> EntityReference:
        return EntityReference(type=self.from_type, id=self.from_id)

    @property
    def target(self) -> EntityReference:
        return EntityReference(type=self.to_type, id=self.to_id)

    def with_metadata(
        self, metadata: dict[str, Any], *, at: datetime | None = None
    ) -> Binding:
        """Return a copy carrying ``metadata`` with an advanced ``updated_at``."""
        stamp = at or utcnow()
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        return self.model_copy(
            update={
                "metadata": dict(metadata),
                "updated_at": max(stamp, self.updated_at),
            }
        )

    def involves(self, entity_type: str, entity_id: str) -> bool:
        """True if either end of the binding is the given entity."""
        return (self.from_type == entity_type and self.from_id == entity_id) or (
            self.to_type == entity_type and self.to_id == entity_id
        )
