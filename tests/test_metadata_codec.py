"""Tests for MetadataCodec: wire format, temporal encodings and validation."""

from __future__ import annotations

import io
import json
from datetime import date, datetime, timedelta, timezone

import pytest

from edgebinder_weaviate.exceptions import (
    DeserializationError,
    InvalidMetadataError,
    SerializationError,
)
from edgebinder_weaviate.mapping.metadata import (
    MAX_METADATA_BYTES,
    MetadataCodec,
    TemporalEncoding,
    format_timestamp,
)


@pytest.fixture
def codec() -> MetadataCodec:
    return MetadataCodec()


@pytest.fixture
def iso_codec() -> MetadataCodec:
    return MetadataCodec(temporal_encoding=TemporalEncoding.ISO)


def _nested(depth: int) -> dict:
    """A metadata map whose nesting depth is ``depth`` (the map itself is 1)."""
    value: dict = {"leaf": 1}
    for _ in range(depth - 1):
        value = {"n": value}
    return value


# -- wire format -------------------------------------------------------------


class TestSerialize:
    def test_empty_metadata_encodes_to_empty_object(self, codec) -> None:
        assert codec.serialize({}) == "{}"

    def test_compact_separators(self, codec) -> None:
        assert codec.serialize({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_non_ascii_is_escaped(self, codec) -> None:
        assert codec.serialize({"name": "café"}) == '{"name":"caf\\u00e9"}'

    def test_round_trip_without_temporal_values_is_exact(self, codec) -> None:
        metadata = {
            "s": "text",
            "i": 3,
            "f": 1.5,
            "b": False,
            "n": None,
            "list": [1, "two", {"three": 3}],
            "nested": {"deep": {"deeper": [True]}},
        }
        assert codec.deserialize(codec.serialize(metadata)) == metadata

    def test_nan_is_rejected(self, codec) -> None:
        with pytest.raises(SerializationError) as exc_info:
            codec.serialize({"x": float("nan")})
        assert exc_info.value.operation == "serialize_metadata"

    def test_unencodable_object_is_rejected(self, codec) -> None:
        with pytest.raises(SerializationError):
            codec.serialize({"x": object()})

    def test_encoded_size_counts_utf8_bytes(self, codec) -> None:
        assert codec.encoded_size({"a": "bc"}) == len('{"a":"bc"}')


class TestDeserialize:
    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_input_decodes_to_empty_dict(self, codec, text) -> None:
        assert codec.deserialize(text) == {}

    def test_invalid_json_raises(self, codec) -> None:
        with pytest.raises(DeserializationError) as exc_info:
            codec.deserialize("{not json")
        assert exc_info.value.operation == "deserialize_metadata"

    def test_non_object_document_raises(self, codec) -> None:
        with pytest.raises(DeserializationError):
            codec.deserialize("[1, 2, 3]")


# -- temporal encodings ------------------------------------------------------


class TestTaggedTemporalEncoding:
    def test_datetime_is_tagged(self, codec) -> None:
        stamp = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert json.loads(codec.serialize({"at": stamp})) == {
            "at": {"$datetime": "2024-01-01T10:00:00+00:00"}
        }

    def test_date_is_tagged(self, codec) -> None:
        assert json.loads(codec.serialize({"on": date(2024, 2, 29)})) == {
            "on": {"$date": "2024-02-29"}
        }

    def test_datetime_round_trip_preserves_instant(self, codec) -> None:
        stamp = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        decoded = codec.deserialize(codec.serialize({"at": stamp}))["at"]
        assert isinstance(decoded, datetime)
        assert decoded == stamp

    def test_nested_temporal_values_round_trip(self, codec) -> None:
        stamp = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
        metadata = {"events": [{"at": stamp, "on": date(2024, 5, 6)}]}
        assert codec.deserialize(codec.serialize(metadata)) == metadata

    def test_plain_timestamp_strings_stay_strings(self, codec) -> None:
        text = '{"note":"2024-01-01T10:00:00+00:00"}'
        assert codec.deserialize(text) == {"note": "2024-01-01T10:00:00+00:00"}

    @pytest.mark.parametrize(
        "metadata",
        [
            {"x": {"$date": "2024-01-01"}},
            {"x": {"$datetime": "hello"}},
            {"x": [{"$map": {"a": 1}}]},
            {"$date": "2024-01-01"},
        ],
    )
    def test_caller_maps_shaped_like_tags_round_trip(self, codec, metadata) -> None:
        codec.validate(metadata)
        assert codec.deserialize(codec.serialize(metadata)) == metadata

    def test_tag_shaped_caller_map_is_escaped(self, codec) -> None:
        assert json.loads(codec.serialize({"x": {"$date": "2024-01-01"}})) == {
            "x": {"$map": {"$date": "2024-01-01"}}
        }

    def test_escaped_map_keeps_nested_temporal_values(self, codec) -> None:
        metadata = {"x": {"$at": date(2024, 1, 1)}}
        assert codec.deserialize(codec.serialize(metadata)) == metadata

    def test_naive_datetime_is_taken_as_utc(self, codec) -> None:
        decoded = codec.deserialize(codec.serialize({"at": datetime(2024, 1, 1)}))
        assert decoded["at"] == datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestIsoTemporalEncoding:
    def test_datetime_is_written_as_plain_string(self, iso_codec) -> None:
        stamp = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert iso_codec.serialize({"at": stamp}) == (
            '{"at":"2024-01-01T10:00:00+00:00"}'
        )

    def test_timestamp_like_strings_are_decoded(self, iso_codec) -> None:
        decoded = iso_codec.deserialize('{"at":"2024-01-01T10:00:00Z"}')
        assert decoded["at"] == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_other_strings_are_untouched(self, iso_codec) -> None:
        assert iso_codec.deserialize('{"d":"2024-01-01"}') == {"d": "2024-01-01"}


def test_format_timestamp_uses_seconds_unless_fractional() -> None:
    whole = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    fractional = whole.replace(microsecond=500)
    assert format_timestamp(whole) == "2024-01-01T10:00:00+00:00"
    assert format_timestamp(fractional) == "2024-01-01T10:00:00.000500+00:00"


# -- validation --------------------------------------------------------------


class TestValidate:
    def test_returns_input_unchanged(self, codec) -> None:
        metadata = {"a": 1, "when": date(2024, 1, 1)}
        assert codec.validate(metadata) is metadata

    def test_non_string_top_level_key_rejected(self, codec) -> None:
        with pytest.raises(InvalidMetadataError, match="keys must be strings"):
            codec.validate({1: "x"})

    def test_resource_value_rejected_with_path(self, codec) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            codec.validate({"outer": {"file": io.StringIO()}})
        assert exc_info.value.path == "outer.file"
        assert "resource" in str(exc_info.value)

    def test_object_in_list_rejected_with_index_path(self, codec) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            codec.validate({"items": [1, 2, object()]})
        assert exc_info.value.path == "items.2"

    def test_depth_ten_accepted(self, codec) -> None:
        codec.validate(_nested(10))

    def test_depth_eleven_rejected(self, codec) -> None:
        with pytest.raises(InvalidMetadataError, match="depth"):
            codec.validate(_nested(11))

    def test_size_at_limit_accepted(self, codec) -> None:
        overhead = codec.encoded_size({"pad": ""})
        metadata = {"pad": "x" * (MAX_METADATA_BYTES - overhead)}
        assert codec.encoded_size(metadata) == MAX_METADATA_BYTES
        codec.validate(metadata)

    def test_size_over_limit_rejected(self, codec) -> None:
        overhead = codec.encoded_size({"pad": ""})
        metadata = {"pad": "x" * (MAX_METADATA_BYTES - overhead + 1)}
        assert codec.encoded_size(metadata) == MAX_METADATA_BYTES + 1
        with pytest.raises(InvalidMetadataError, match="exceeds limit"):
            codec.validate(metadata)

    def test_custom_limits(self) -> None:
        codec = MetadataCodec(max_size_bytes=16, max_depth=2)
        codec.validate({"a": {"b": 1}})
        with pytest.raises(InvalidMetadataError):
            codec.validate({"a": {"b": {"c": 1}}})
        with pytest.raises(InvalidMetadataError):
            codec.validate({"a": "0123456789"})
