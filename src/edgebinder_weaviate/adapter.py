"""
WeaviateAdapter: binding persistence over a Weaviate-shaped record store.

Records are addressed by the opaque identifier derived from the binding id,
so ``store``/``find``/``delete`` never need a lookup by property. Queries
fetch the whole collection and evaluate in process (see
:class:`~edgebinder_weaviate.query.filter_engine.FilterEngine`).

Usage::

    adapter = WeaviateAdapter(InMemoryRecordStore())
    adapter.store(Binding.create("b1", user, project, "owns", {"lvl": 1}))

    owned = adapter.query().from_(user).type("owns").where("lvl", ">", 0).get()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import AdapterConfig
from .domain.binding import Binding, EntityReference
from .exceptions import BackendError, BindingNotFoundError
from .mapping.binding_mapper import METADATA, UPDATED_AT, BindingMapper
from .mapping.identity import IdentityMapper
from .mapping.metadata import MetadataCodec, format_timestamp
from .ports.record_store import IRecordStore, translate_store_errors
from .query.builder import BindingQueryBuilder
from .query.criteria import EntityCriteria, QueryCriteria, WhereCriteria
from .query.filter_engine import FilterEngine
from .query.operators import QueryOperator
from .query.result import QueryResult

logger = logging.getLogger("edgebinder_weaviate.adapter")


class WeaviateAdapter:
    """Synchronous binding persistence facade."""

    def __init__(
        self,
        store: IRecordStore,
        config: AdapterConfig | None = None,
        *,
        mapper: BindingMapper | None = None,
        identity: IdentityMapper | None = None,
    ) -> None:
        self.config = config or AdapterConfig()
        self.codec = MetadataCodec(
            temporal_encoding=self.config.metadata.temporal_encoding,
            max_size_bytes=self.config.metadata.max_size_bytes,
            max_depth=self.config.metadata.max_depth,
        )
        self.record_store = store
        self.mapper = mapper or BindingMapper(
            self.codec, skip_malformed=self.config.skip_malformed_records
        )
        self.identity = identity or IdentityMapper()
        self.engine = FilterEngine(
            store,
            collection=self.config.collection_name,
            mapper=self.mapper,
        )

    @property
    def collection(self) -> str:
        return self.config.collection_name

    # -- single bindings -----------------------------------------------------

    def store(self, binding: Binding) -> None:
        """Persist a new binding.

        Raises:
            InvalidMetadataError: If the metadata violates a limit.
            BackendError: If the record store rejects or fails the write.
        """
        self.validate_and_normalize_metadata(binding.metadata)
        properties = self.mapper.to_properties(binding)
        with translate_store_errors("store"):
            self.record_store.create(
                self.collection, self.identity.derive(binding.id), properties
            )
        logger.debug("Stored binding %s in %s", binding.id, self.collection)

    def find(self, binding_id: str) -> Binding | None:
        with translate_store_errors("find"):
            record = self.record_store.get(
                self.collection, self.identity.derive(binding_id)
            )
        if record is None:
            return None
        return self.mapper.from_record(record)

    def delete(self, binding_id: str) -> None:
        """Delete a binding by id.

        Raises:
            BackendError: A client error if the binding does not exist.
        """
        with translate_store_errors("delete"):
            deleted = self.record_store.delete(
                self.collection, self.identity.derive(binding_id)
            )
        if not deleted:
            raise BackendError.client_error(
                "delete", f"Failed to delete binding: {binding_id}"
            )
        logger.debug("Deleted binding %s from %s", binding_id, self.collection)

    def update_metadata(
        self, binding_id: str, metadata: Mapping[str, Any]
    ) -> Binding:
        """Replace a binding's metadata and return the updated binding.

        Raises:
            InvalidMetadataError: If the metadata violates a limit.
            BindingNotFoundError: If no binding has this id.
        """
        normalized = self.validate_and_normalize_metadata(metadata)
        existing = self.find(binding_id)
        if existing is None:
            raise BindingNotFoundError(binding_id)
        updated = existing.with_metadata(normalized)
        with translate_store_errors("update_metadata"):
            self.record_store.update(
                self.collection,
                self.identity.derive(binding_id),
                {
                    METADATA: self.codec.serialize(updated.metadata),
                    UPDATED_AT: format_timestamp(updated.updated_at),
                },
            )
        return updated

    # -- entity lookups ------------------------------------------------------

    def find_by_entity(self, entity_type: str, entity_id: str) -> list[Binding]:
        """All bindings with the entity at either end."""
        criteria = QueryCriteria(
            or_where=(
                (
                    WhereCriteria("fromType", QueryOperator.EQ, entity_type),
                    WhereCriteria("fromId", QueryOperator.EQ, entity_id),
                ),
                (
                    WhereCriteria("toType", QueryOperator.EQ, entity_type),
                    WhereCriteria("toId", QueryOperator.EQ, entity_id),
                ),
            )
        )
        return self.engine.filter(criteria)

    def find_between_entities(
        self,
        from_entity: object,
        to_entity: object,
        binding_type: str | None = None,
    ) -> list[Binding]:
        """Bindings from ``from_entity`` to ``to_entity``, optionally of one type."""
        source = EntityReference.of(from_entity)
        target = EntityReference.of(to_entity)
        criteria = QueryCriteria(
            from_entity=EntityCriteria(source.type, source.id),
            to_entity=EntityCriteria(target.type, target.id),
            binding_type=binding_type,
        )
        return self.engine.filter(criteria)

    def delete_by_entity(self, entity_type: str, entity_id: str) -> int:
        """Delete every binding involving the entity; returns how many went."""
        deleted = 0
        for binding in self.find_by_entity(entity_type, entity_id):
            with translate_store_errors("delete_by_entity"):
                if self.record_store.delete(
                    self.collection, self.identity.derive(binding.id)
                ):
                    deleted += 1
        logger.info(
            "Deleted %d bindings involving %s:%s", deleted, entity_type, entity_id
        )
        return deleted

    # -- queries -------------------------------------------------------------

    def query(self) -> BindingQueryBuilder:
        return BindingQueryBuilder(self)

    def execute_query(
        self, query: BindingQueryBuilder | QueryCriteria | Mapping[str, Any]
    ) -> QueryResult:
        return QueryResult(self.engine.filter(self._criteria(query)))

    def count(
        self, query: BindingQueryBuilder | QueryCriteria | Mapping[str, Any]
    ) -> int:
        return self.engine.count(self._criteria(query))

    @staticmethod
    def _criteria(
        query: BindingQueryBuilder | QueryCriteria | Mapping[str, Any],
    ) -> QueryCriteria | Mapping[str, Any]:
        if isinstance(query, BindingQueryBuilder):
            return query.criteria()
        return query

    # -- entities & metadata -------------------------------------------------

    def extract_entity_id(self, entity: object) -> str:
        return EntityReference.of(entity).id

    def extract_entity_type(self, entity: object) -> str:
        return EntityReference.of(entity).type

    def validate_and_normalize_metadata(
        self, metadata: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Validate metadata against the configured limits; return a plain copy.

        Raises:
            InvalidMetadataError: On a bad key, value kind, depth or size.
        """
        return dict(self.codec.validate(metadata))
