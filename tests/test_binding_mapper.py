"""Tests for BindingMapper."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from edgebinder_weaviate.exceptions import DeserializationError
from edgebinder_weaviate.mapping import BindingMapper, MetadataCodec, TemporalEncoding


def test_to_properties(mapper, make_binding) -> None:
    binding = make_binding("b1", metadata={"lvl": 1})
    assert mapper.to_properties(binding) == {
        "bindingId": "b1",
        "fromEntityType": "User",
        "fromEntityId": "u1",
        "toEntityType": "Project",
        "toEntityId": "p1",
        "bindingType": "owns",
        "metadata": '{"lvl":1}',
        "createdAt": "2024-01-01T12:00:00+00:00",
        "updatedAt": "2024-01-01T12:00:00+00:00",
    }


def test_round_trip_through_properties(mapper, make_binding) -> None:
    stamp = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)
    binding = make_binding("b1", metadata={"since": stamp, "tags": ["a", "b"]})
    assert mapper.from_record(mapper.to_properties(binding)) == binding


def test_wrapped_record(mapper, make_binding) -> None:
    binding = make_binding("b1")
    record = {"id": "opaque", "properties": mapper.to_properties(binding)}
    assert mapper.from_record(record) == binding


def test_missing_metadata_decodes_to_empty(mapper, make_binding) -> None:
    props = mapper.to_properties(make_binding("b1", metadata={"x": 1}))
    del props["metadata"]
    assert mapper.from_record(props).metadata == {}


def test_missing_required_property_raises(mapper, make_binding) -> None:
    props = mapper.to_properties(make_binding("b1"))
    del props["fromEntityId"]
    with pytest.raises(DeserializationError, match="fromEntityId") as exc_info:
        mapper.from_record(props)
    assert exc_info.value.operation == "map_record"


def test_bad_timestamp_raises(mapper, make_binding) -> None:
    props = mapper.to_properties(make_binding("b1"))
    props["createdAt"] = "yesterday"
    with pytest.raises(DeserializationError):
        mapper.from_record(props)


def test_bad_metadata_text_raises(mapper, make_binding) -> None:
    props = mapper.to_properties(make_binding("b1"))
    props["metadata"] = "{broken"
    with pytest.raises(DeserializationError):
        mapper.from_record(props)


def test_non_mapping_record_raises(mapper) -> None:
    with pytest.raises(DeserializationError, match="must be a mapping"):
        mapper.from_record(["not", "a", "record"])  # type: ignore[arg-type]


def test_from_records_skips_malformed(mapper, make_binding) -> None:
    good = mapper.to_properties(make_binding("b1"))
    bindings = mapper.from_records([good, {"bindingId": "b2"}])
    assert [b.id for b in bindings] == ["b1"]


def test_from_records_strict_mode_raises(make_binding) -> None:
    mapper = BindingMapper(skip_malformed=False)
    with pytest.raises(DeserializationError):
        mapper.from_records([{"bindingId": "b2"}])


def test_iso_codec_writes_plain_timestamps(make_binding) -> None:
    mapper = BindingMapper(MetadataCodec(temporal_encoding=TemporalEncoding.ISO))
    stamp = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)
    props = mapper.to_properties(make_binding("b1", metadata={"since": stamp}))
    assert props["metadata"] == '{"since":"2024-03-01T08:30:00+00:00"}'
    assert mapper.from_record(props).metadata["since"] == stamp
