"""MetadataCodec: binding metadata <-> JSON wire text.

Temporal values are preserved in one of two encodings:

``tagged`` (default)
    ``{"$datetime": "2024-01-01T10:00:00+00:00"}`` / ``{"$date": "2024-01-01"}``.
    Decoding restores ``datetime``/``date``; plain strings stay strings.
    A caller map whose only key starts with ``$`` is written as
    ``{"$map": {...}}`` so it can never be read back as a tag.
``iso``
    Plain ISO-8601 strings. Decoding turns any string that looks like a
    timestamp back into a ``datetime``, including strings the caller meant
    literally.
"""

from __future__ import annotations

import io
import json
import re
import socket
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from ..exceptions import DeserializationError, InvalidMetadataError, SerializationError

MAX_METADATA_BYTES = 64 * 1024
MAX_METADATA_DEPTH = 10

DATETIME_TAG = "$datetime"
DATE_TAG = "$date"
MAP_TAG = "$map"

_ISO_TIMESTAMP = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?([+-]\d{2}:\d{2}|Z)$"
)

_SCALARS = (str, int, float, bool, type(None))
_RESOURCE_TYPES = (io.IOBase, socket.socket)


class TemporalEncoding(str, Enum):
    """How temporal metadata values are written to the wire."""

    TAGGED = "tagged"
    ISO = "iso"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with an explicit offset; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    timespec = "microseconds" if value.microsecond else "seconds"
    return value.isoformat(timespec=timespec)


def parse_timestamp(text: str) -> datetime:
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


class MetadataCodec:
    """Serialize, deserialize and validate binding metadata."""

    def __init__(
        self,
        *,
        temporal_encoding: TemporalEncoding | str = TemporalEncoding.TAGGED,
        max_size_bytes: int = MAX_METADATA_BYTES,
        max_depth: int = MAX_METADATA_DEPTH,
    ) -> None:
        self.temporal_encoding = TemporalEncoding(temporal_encoding)
        self.max_size_bytes = max_size_bytes
        self.max_depth = max_depth

    # -- wire format ---------------------------------------------------------

    def serialize(self, metadata: Mapping[str, Any]) -> str:
        """Encode metadata to compact JSON. Empty metadata encodes to ``{}``.

        Raises:
            SerializationError: If any value has no JSON representation.
        """
        try:
            processed = {k: self._encode_value(v) for k, v in metadata.items()}
            return json.dumps(processed, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Failed to serialize metadata: {e}") from e

    def deserialize(self, text: str | bytes | None) -> dict[str, Any]:
        """Decode wire text to metadata; ``None`` and ``""`` decode to ``{}``.

        Raises:
            DeserializationError: If the text is not JSON or not a JSON object.
        """
        if text is None or text in ("", b""):
            return {}
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise DeserializationError(f"Failed to deserialize metadata: {e}") from e
        if not isinstance(data, dict):
            raise DeserializationError(
                "Failed to deserialize metadata: decoded JSON is not an object"
            )
        return {key: self._decode_value(value) for key, value in data.items()}

    def encoded_size(self, metadata: Mapping[str, Any]) -> int:
        """Size in bytes of the wire text for ``metadata``."""
        return len(self.serialize(metadata).encode("utf-8"))

    # -- validation ----------------------------------------------------------

    def validate(self, metadata: Mapping[str, Any]) -> Mapping[str, Any]:
        """Check structural invariants and return ``metadata`` unchanged.

        Raises:
            InvalidMetadataError: On a non-string top-level key, a disallowed
                value kind, nesting deeper than ``max_depth`` or an encoded
                size above ``max_size_bytes``.
        """
        if not isinstance(metadata, Mapping):
            raise InvalidMetadataError(
                f"Metadata must be a mapping, got {type(metadata).__name__}"
            )
        for key in metadata:
            if not isinstance(key, str):
                raise InvalidMetadataError(
                    f"Metadata keys must be strings, got {type(key).__name__} "
                    f"key {key!r}",
                    path=str(key),
                )
        self._validate_container(metadata, path="", depth=1)

        try:
            size = self.encoded_size(metadata)
        except SerializationError as e:
            raise InvalidMetadataError(
                f"Metadata cannot be serialized: {e.reason}"
            ) from e
        if size > self.max_size_bytes:
            raise InvalidMetadataError(
                f"Metadata size ({size} bytes) exceeds limit "
                f"({self.max_size_bytes} bytes)"
            )
        return metadata

    def _validate_container(
        self,
        container: Mapping[Any, Any] | list[Any] | tuple[Any, ...],
        *,
        path: str,
        depth: int,
    ) -> None:
        if depth > self.max_depth:
            raise InvalidMetadataError(
                f"Metadata nesting depth exceeds limit ({self.max_depth}) "
                f"at path: {path or '<root>'}",
                path=path or None,
            )
        items = (
            container.items()
            if isinstance(container, Mapping)
            else enumerate(container)
        )
        for key, value in items:
            current = f"{path}.{key}" if path else str(key)
            if isinstance(value, _RESOURCE_TYPES):
                raise InvalidMetadataError(
                    f"Invalid metadata type 'resource' at path: {current}",
                    path=current,
                )
            if isinstance(value, Mapping | list | tuple):
                self._validate_container(value, path=current, depth=depth + 1)
            elif not isinstance(value, _SCALARS + (date,)):
                raise InvalidMetadataError(
                    f"Invalid metadata type '{type(value).__name__}' at path: "
                    f"{current}. Only scalars, lists, mappings and "
                    f"datetime/date values are allowed.",
                    path=current,
                )

    # -- internals -----------------------------------------------------------

    def _encode_value(self, value: Any) -> Any:
        if isinstance(value, datetime):
            text = format_timestamp(value)
            if self.temporal_encoding is TemporalEncoding.TAGGED:
                return {DATETIME_TAG: text}
            return text
        if isinstance(value, date):
            if self.temporal_encoding is TemporalEncoding.TAGGED:
                return {DATE_TAG: value.isoformat()}
            return value.isoformat()
        if isinstance(value, Mapping):
            encoded = {k: self._encode_value(v) for k, v in value.items()}
            if self.temporal_encoding is TemporalEncoding.TAGGED and _looks_tagged(
                encoded
            ):
                return {MAP_TAG: encoded}
            return encoded
        if isinstance(value, list | tuple):
            return [self._encode_value(v) for v in value]
        if isinstance(value, _SCALARS):
            return value
        raise TypeError(
            f"Object of type {type(value).__name__} is not JSON serializable"
        )

    def _decode_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            if self.temporal_encoding is TemporalEncoding.TAGGED and _looks_tagged(
                value
            ):
                inner = value.get(MAP_TAG)
                if isinstance(inner, dict):
                    return {k: self._decode_value(v) for k, v in inner.items()}
                tagged = self._decode_tag(value)
                if tagged is not None:
                    return tagged
            return {k: self._decode_value(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._decode_value(v) for v in value]
        if (
            self.temporal_encoding is TemporalEncoding.ISO
            and isinstance(value, str)
            and _ISO_TIMESTAMP.match(value)
        ):
            try:
                return parse_timestamp(value)
            except ValueError:
                return value
        return value

    @staticmethod
    def _decode_tag(value: dict[str, Any]) -> date | None:
        tag, text = next(iter(value.items()))
        if not isinstance(text, str):
            return None
        try:
            if tag == DATETIME_TAG:
                return parse_timestamp(text)
            if tag == DATE_TAG:
                return date.fromisoformat(text)
        except ValueError as e:
            raise DeserializationError(
                f"Failed to deserialize metadata: invalid {tag} value {text!r}"
            ) from e
        return None


def _looks_tagged(value: Mapping[Any, Any]) -> bool:
    if len(value) != 1:
        return False
    key = next(iter(value))
    return isinstance(key, str) and key.startswith("$")
