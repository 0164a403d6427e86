"""Tests for the CSV inventory report."""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

import pytest

from sharesweep.models import FileRecord
from sharesweep.report import CsvReportSink, render_csv


def _rows(payload: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(payload.decode("utf-8"))))


def test_render_csv_formats_every_column() -> None:
    records = [
        FileRecord("a/b.txt", "b.txt", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), 12),
        FileRecord("odd, name.txt", "odd, name.txt", None, None, "yesterday-ish"),
        FileRecord("bare.txt", "bare.txt"),
    ]

    rows = _rows(render_csv(records))

    assert rows == [
        ["FilePath", "Name", "LastModified", "LengthBytes"],
        ["a/b.txt", "b.txt", "2024-01-02T03:04:05+00:00", "12"],
        ["odd, name.txt", "odd, name.txt", "yesterday-ish", ""],
        ["bare.txt", "bare.txt", "", ""],
    ]


def test_sink_creates_export_directory_and_dates_file(store, now) -> None:
    sink = CsvReportSink(store)

    path = sink.write([FileRecord("a.txt", "a.txt", now, 1)], run_date=now)

    assert path == "Export/FileMetadata_20240301.csv"
    assert "Export" in store.directories
    assert _rows(store.contents[path])[1][0] == "a.txt"


def test_sink_creates_nested_export_directories(store, now) -> None:
    sink = CsvReportSink(store, export_subdirectory="reports/daily", file_name_template="inventory.csv")

    path = sink.write([], run_date=now)

    assert path == "reports/daily/inventory.csv"
    assert {"reports", "reports/daily"} <= store.directories
    assert _rows(store.contents[path]) == [["FilePath", "Name", "LastModified", "LengthBytes"]]


def test_sink_reuses_existing_export_directory(store, now) -> None:
    store.add_directory("Export")
    calls: list[str] = []
    store.create_directory = calls.append  # type: ignore[method-assign]

    CsvReportSink(store).write([], run_date=now)

    assert calls == []


def test_sink_requires_file_name(store) -> None:
    with pytest.raises(ValueError):
        CsvReportSink(store, file_name_template="")
