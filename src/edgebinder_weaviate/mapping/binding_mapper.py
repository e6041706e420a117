"""BindingMapper: Binding <-> backend-native record properties."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..domain.binding import Binding
from ..exceptions import DeserializationError
from .metadata import MetadataCodec, format_timestamp, parse_timestamp

logger = logging.getLogger("edgebinder_weaviate.mapping")

BINDING_ID = "bindingId"
FROM_ENTITY_TYPE = "fromEntityType"
FROM_ENTITY_ID = "fromEntityId"
TO_ENTITY_TYPE = "toEntityType"
TO_ENTITY_ID = "toEntityId"
BINDING_TYPE = "bindingType"
METADATA = "metadata"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

RECORD_PROPERTIES = (
    BINDING_ID,
    FROM_ENTITY_TYPE,
    FROM_ENTITY_ID,
    TO_ENTITY_TYPE,
    TO_ENTITY_ID,
    BINDING_TYPE,
    METADATA,
    CREATED_AT,
    UPDATED_AT,
)


class BindingMapper:
    """
    Backend record <-> :class:`Binding` mapper.

    Metadata goes through :class:`MetadataCodec`; timestamps are written as
    ISO-8601 text with an explicit offset. Records may arrive wrapped
    (``{"id": ..., "properties": {...}}``) or as a bare property dict.
    """

    def __init__(
        self,
        codec: MetadataCodec | None = None,
        *,
        skip_malformed: bool = True,
    ) -> None:
        self.codec = codec or MetadataCodec()
        self.skip_malformed = skip_malformed

    def to_properties(self, binding: Binding) -> dict[str, Any]:
        return {
            BINDING_ID: binding.id,
            FROM_ENTITY_TYPE: binding.from_type,
            FROM_ENTITY_ID: binding.from_id,
            TO_ENTITY_TYPE: binding.to_type,
            TO_ENTITY_ID: binding.to_id,
            BINDING_TYPE: binding.type,
            METADATA: self.codec.serialize(binding.metadata),
            CREATED_AT: format_timestamp(binding.created_at),
            UPDATED_AT: format_timestamp(binding.updated_at),
        }

    def from_record(self, record: Mapping[str, Any]) -> Binding:
        """Convert one backend record to a binding.

        Raises:
            DeserializationError: If required properties are missing or
                malformed, or the metadata text cannot be decoded.
        """
        props = (
            record.get("properties", record) if isinstance(record, Mapping) else None
        )
        if not isinstance(props, Mapping):
            raise DeserializationError(
                f"Record must be a mapping, got {type(record).__name__}",
                operation="map_record",
            )
        missing = [
            name for name in RECORD_PROPERTIES if name != METADATA and name not in props
        ]
        if missing:
            raise DeserializationError(
                f"Record is missing properties: {', '.join(missing)}",
                operation="map_record",
            )
        try:
            return Binding(
                id=props[BINDING_ID],
                from_type=props[FROM_ENTITY_TYPE],
                from_id=props[FROM_ENTITY_ID],
                to_type=props[TO_ENTITY_TYPE],
                to_id=props[TO_ENTITY_ID],
                type=props[BINDING_TYPE],
                metadata=self.codec.deserialize(props.get(METADATA)),
                created_at=self._timestamp(props[CREATED_AT]),
                updated_at=self._timestamp(props[UPDATED_AT]),
            )
        except (PydanticValidationError, ValueError, TypeError) as e:
            raise DeserializationError(
                f"Malformed record {props.get(BINDING_ID)!r}: {e}",
                operation="map_record",
            ) from e

    def from_records(self, records: Iterable[Mapping[str, Any]]) -> list[Binding]:
        """Convert many records; malformed ones are skipped when ``skip_malformed``."""
        bindings: list[Binding] = []
        for record in records:
            try:
                bindings.append(self.from_record(record))
            except DeserializationError as e:
                if not self.skip_malformed:
                    raise
                logger.warning("Skipping malformed record: %s", e.reason)
        return bindings

    @staticmethod
    def _timestamp(value: Any) -> Any:
        if isinstance(value, str):
            return parse_timestamp(value)
        return value
