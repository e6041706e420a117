from .binding_mapper import BindingMapper
from .identity import IdentityMapper, derive_identifier
from .metadata import (
    MAX_METADATA_BYTES,
    MAX_METADATA_DEPTH,
    MetadataCodec,
    TemporalEncoding,
    format_timestamp,
)

__all__ = [
    "BindingMapper",
    "IdentityMapper",
    "derive_identifier",
    "MetadataCodec",
    "TemporalEncoding",
    "MAX_METADATA_BYTES",
    "MAX_METADATA_DEPTH",
    "format_timestamp",
]
