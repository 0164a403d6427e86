"""Tests for metadata normalization."""

from __future__ import annotations

import logging
import types
from datetime import datetime, timedelta, timezone

import pytest

from sharesweep.errors import TimestampParseError
from sharesweep.normalizer import normalize, parse_timestamp


def test_properties_block_takes_precedence() -> None:
    raw = {
        "properties": {
            "last_modified": datetime(2024, 1, 2, tzinfo=timezone.utc),
            "content_length": 10,
        },
        "last_modified": datetime(2020, 1, 1, tzinfo=timezone.utc),
        "size": "999",
        "metadata": {"last_modified": "2019-01-01T00:00:00Z"},
    }

    record = normalize(raw, "reports/q1.csv")

    assert record.relative_path == "reports/q1.csv"
    assert record.name == "q1.csv"
    assert record.last_modified == datetime(2024, 1, 2, tzinfo=timezone.utc)
    assert record.size_bytes == 10


def test_drive_style_top_level_fields_are_parsed() -> None:
    raw = {"id": "abc", "name": "a.txt", "modifiedTime": "2024-01-15T12:34:56.000Z", "size": "2048"}

    record = normalize(raw, "a.txt")

    assert record.last_modified == datetime(2024, 1, 15, 12, 34, 56, tzinfo=timezone.utc)
    assert record.size_bytes == 2048
    assert record.last_modified_raw is None


def test_legacy_metadata_block_still_populates_last_modified() -> None:
    raw = {"metadata": {"last_modified": "Tue, 09 Jan 2024 10:00:00 GMT", "content_length": 5}}

    record = normalize(raw, "old/legacy.bin")

    assert record.last_modified == datetime(2024, 1, 9, 10, 0, tzinfo=timezone.utc)
    assert record.size_bytes == 5


def test_missing_modification_time_stays_absent() -> None:
    record = normalize({"properties": {"content_length": 42}}, "b.txt")

    assert record.last_modified is None
    assert record.last_modified_raw is None
    assert record.size_bytes == 42


def test_null_properties_fall_through_to_next_source() -> None:
    raw = {"properties": {"last_modified": None}, "last_modified": "2024-02-01T00:00:00+00:00"}

    record = normalize(raw, "c.txt")

    assert record.last_modified == datetime(2024, 2, 1, tzinfo=timezone.utc)


def test_attribute_style_entries_are_supported() -> None:
    properties = types.SimpleNamespace(
        last_modified=datetime(2024, 5, 1, 8, 30), content_length=7
    )
    raw = types.SimpleNamespace(name="d.txt", properties=properties)

    record = normalize(raw, "d.txt")

    assert record.last_modified == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
    assert record.size_bytes == 7


def test_unparseable_timestamp_keeps_raw_value(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="sharesweep.normalizer"):
        record = normalize({"last_modified": "last tuesday", "size": 3}, "e.txt")

    assert record.last_modified is None
    assert record.last_modified_raw == "last tuesday"
    assert record.last_modified_display == "last tuesday"
    assert record.size_bytes == 3
    assert "e.txt" in caplog.text


@pytest.mark.parametrize("size", [-1, True, "12kb", 3.5, None, "²", "①"])
def test_invalid_sizes_are_absent(size) -> None:
    record = normalize({"size": size}, "f.txt")

    assert record.size_bytes is None


def test_non_mapping_entry_produces_bare_record() -> None:
    record = normalize(None, "dir/g.txt")

    assert record.name == "g.txt"
    assert record.last_modified is None
    assert record.size_bytes is None


def test_parse_timestamp_handles_offsets_and_epochs() -> None:
    offset = parse_timestamp("2024-01-15T12:00:00+02:00")
    assert offset.utcoffset() == timedelta(hours=2)
    assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_parse_timestamp_rejects_unknown_types() -> None:
    with pytest.raises(TimestampParseError):
        parse_timestamp(["2024-01-01"])
