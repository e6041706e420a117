"""Adapter configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .mapping.metadata import MAX_METADATA_BYTES, MAX_METADATA_DEPTH, TemporalEncoding

DEFAULT_COLLECTION_NAME = "EdgeBindings"


class MetadataConfig(BaseModel):
    """Limits and wire encoding for binding metadata."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_size_bytes: int = Field(default=MAX_METADATA_BYTES, gt=0)
    max_depth: int = Field(default=MAX_METADATA_DEPTH, ge=1)
    temporal_encoding: TemporalEncoding = TemporalEncoding.TAGGED


class AdapterConfig(BaseModel):
    """
    Configuration for :class:`~edgebinder_weaviate.adapter.WeaviateAdapter`.

    Passed explicitly; nothing is read from the environment::

        config = AdapterConfig.from_mapping({
            "collection_name": "RAGBindings",
            "metadata": {"temporal_encoding": "iso"},
        })
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    collection_name: str = Field(default=DEFAULT_COLLECTION_NAME, min_length=1)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    skip_malformed_records: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> AdapterConfig:
        """Validate a plain mapping.

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid.
        """
        if not isinstance(mapping, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(mapping).__name__}"
            )
        try:
            return cls.model_validate(dict(mapping))
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid adapter configuration: {problems}"
            ) from e
