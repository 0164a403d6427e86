"""CSV inventory report written back into the share."""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from .connectors.base import StorageAccessor, join_path, split_path
from .models import FileRecord

LOGGER = logging.getLogger("sharesweep.report")

REPORT_COLUMNS = ("FilePath", "Name", "LastModified", "LengthBytes")
DEFAULT_REPORT_TEMPLATE = "FileMetadata_{date}.csv"


def render_csv(records: Iterable[FileRecord]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_COLUMNS)
    for record in records:
        writer.writerow(
            (
                record.relative_path,
                record.name,
                record.last_modified_display,
                "" if record.size_bytes is None else record.size_bytes,
            )
        )
    return buffer.getvalue().encode("utf-8")


class CsvReportSink:
    """Serialize the inventory and store it under the export directory."""

    def __init__(
        self,
        accessor: StorageAccessor,
        export_subdirectory: str = "Export",
        file_name_template: str = DEFAULT_REPORT_TEMPLATE,
    ) -> None:
        if not file_name_template:
            raise ValueError("A report file name is required")
        self._accessor = accessor
        self._export_subdirectory = export_subdirectory.strip("/")
        self._file_name_template = file_name_template

    def file_name_for(self, run_date: datetime) -> str:
        return self._file_name_template.replace("{date}", run_date.strftime("%Y%m%d"))

    def write(
        self, records: Iterable[FileRecord], *, run_date: Optional[datetime] = None
    ) -> str:
        """Write the report and return its share-relative path."""

        run_date = run_date or datetime.now(timezone.utc)
        self._ensure_export_directory()
        path = join_path(self._export_subdirectory, self.file_name_for(run_date))
        self._accessor.write_file(path, render_csv(records))
        LOGGER.info("Wrote inventory report to %s", path)
        return path

    def _ensure_export_directory(self) -> None:
        current = ""
        for segment in split_path(self._export_subdirectory):
            current = join_path(current, segment)
            if not self._accessor.directory_exists(current):
                LOGGER.info("Creating export directory %s", current)
                self._accessor.create_directory(current)


__all__ = ["CsvReportSink", "DEFAULT_REPORT_TEMPLATE", "REPORT_COLUMNS", "render_csv"]
