"""
edgebinder-weaviate: binding persistence over a Weaviate-shaped store.

Stores typed relationships between entities (bindings) with arbitrary
metadata and queries them with entity, type, field and OR-group criteria,
evaluated in process over the fetched collection.
"""

from .adapter import WeaviateAdapter
from .adapters.memory import InMemoryRecordStore
from .config import AdapterConfig, MetadataConfig
from .domain.binding import Binding, Entity, EntityReference
from .exceptions import (
    BackendError,
    BindingNotFoundError,
    ConfigurationError,
    DeserializationError,
    EdgeBinderError,
    EntityExtractionError,
    InvalidCriteriaError,
    InvalidMetadataError,
    PersistenceError,
    QueryError,
    QueryExecutionError,
    SerializationError,
    UnsupportedOperatorError,
)
from .mapping import BindingMapper, IdentityMapper, MetadataCodec, TemporalEncoding
from .ports.record_store import IRecordStore
from .query import (
    BindingQueryBuilder,
    CriteriaTransformer,
    EntityCriteria,
    FilterEngine,
    OrderByCriteria,
    QueryCriteria,
    QueryOperator,
    QueryResult,
    WhereCriteria,
)

__all__ = [
    # Facade
    "WeaviateAdapter",
    "AdapterConfig",
    "MetadataConfig",
    # Domain
    "Binding",
    "Entity",
    "EntityReference",
    # Mapping
    "BindingMapper",
    "IdentityMapper",
    "MetadataCodec",
    "TemporalEncoding",
    # Store
    "IRecordStore",
    "InMemoryRecordStore",
    # Query
    "BindingQueryBuilder",
    "CriteriaTransformer",
    "EntityCriteria",
    "FilterEngine",
    "OrderByCriteria",
    "QueryCriteria",
    "QueryOperator",
    "QueryResult",
    "WhereCriteria",
    # Exceptions
    "EdgeBinderError",
    "InvalidMetadataError",
    "EntityExtractionError",
    "BindingNotFoundError",
    "ConfigurationError",
    "QueryError",
    "UnsupportedOperatorError",
    "InvalidCriteriaError",
    "QueryExecutionError",
    "PersistenceError",
    "SerializationError",
    "DeserializationError",
    "BackendError",
]
