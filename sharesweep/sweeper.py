"""Main orchestration logic for a sweep."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .config import AppConfig
from .connectors.base import StorageAccessor
from .connectors.google_drive import GoogleDriveAccessor
from .connectors.local import LocalFolderAccessor
from .deletion import DeletionSummary, delete_all
from .errors import AccessError
from .models import DeletionOutcome, FileRecord
from .report import CsvReportSink
from .retention import compute_cutoff, partition, sort_for_display
from .walker import DEFAULT_MAX_DEPTH, walk

LOGGER = logging.getLogger("sharesweep")


@dataclass(slots=True)
class SweepResult:
    """Everything a single run discovered and did."""

    cutoff: datetime
    records: List[FileRecord]
    expired: List[FileRecord]
    report_path: Optional[str]
    outcomes: List[DeletionOutcome] = field(default_factory=list)
    dry_run: bool = False

    @property
    def summary(self) -> DeletionSummary:
        return DeletionSummary.from_outcomes(self.outcomes)


@dataclass(slots=True)
class ShareSweeper:
    """Inventory the share, publish the report, then delete expired files."""

    accessor: StorageAccessor
    report_sink: CsvReportSink
    retention_days: int = 7
    root_path: str = ""
    max_depth: int = DEFAULT_MAX_DEPTH
    dry_run: bool = False

    def run_once(self, now: Optional[datetime] = None) -> SweepResult:
        started = now or datetime.now(timezone.utc)
        cutoff = compute_cutoff(self.retention_days, now=started)
        LOGGER.info(
            "Sweeping %s (retention=%s days, cutoff=%s)",
            self.root_path or "/",
            self.retention_days,
            cutoff.isoformat(),
        )

        records = walk(self.accessor, self.root_path, max_depth=self.max_depth)
        LOGGER.info("Discovered %s file(s)", len(records))

        report_path = self.report_sink.write(sort_for_display(records), run_date=started)

        _retain, expired = partition(records, cutoff)
        LOGGER.info("Identified %s expired file(s)", len(expired))

        result = SweepResult(
            cutoff=cutoff,
            records=records,
            expired=expired,
            report_path=report_path,
            dry_run=self.dry_run,
        )
        if self.dry_run:
            for record in expired:
                LOGGER.info(
                    "Would delete %s (modified %s)",
                    record.relative_path,
                    record.last_modified_display,
                )
            return result

        result.outcomes = delete_all(self.accessor, expired)
        summary = result.summary
        log = LOGGER.warning if summary.failed else LOGGER.info
        log(summary.describe())
        return result

    def run_forever(self, interval: float) -> None:
        LOGGER.info("Starting scheduled sweep loop (interval=%s)", interval)
        while True:
            self.run_once()
            time.sleep(interval)


def _build_google_drive_service(config: AppConfig):
    if not config.google_drive:
        raise ValueError("Google Drive configuration missing")
    import google.auth
    from google.auth.exceptions import DefaultCredentialsError
    from googleapiclient.discovery import build

    try:
        credentials, _project = google.auth.default(scopes=list(config.google_drive.scopes))
    except DefaultCredentialsError as exc:
        raise AccessError(f"No ambient Google credentials available: {exc}") from exc
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


def build_accessor(
    config: AppConfig, *, prebuilt_service: "Resource | None" = None
) -> StorageAccessor:
    """Return the configured storage accessor.

    Args:
        config: Parsed application configuration.
        prebuilt_service: Optional already-authorized Google Drive service.
    """

    if config.provider == "google_drive":
        if not config.google_drive:
            raise ValueError("Google Drive configuration missing")
        service = prebuilt_service or _build_google_drive_service(config)
        return GoogleDriveAccessor(
            service=service,
            folder_id=config.google_drive.folder_id,
            page_size=config.google_drive.page_size,
            max_retries=config.google_drive.max_retries,
        )
    if config.provider == "local":
        if not config.local:
            raise ValueError("Local folder configuration missing")
        return LocalFolderAccessor(config.local.path)
    raise ValueError(f"Unsupported provider: {config.provider}")


def build_sweeper(
    config: AppConfig,
    *,
    accessor: StorageAccessor | None = None,
    dry_run: bool | None = None,
) -> ShareSweeper:
    """Construct the sweeper described by ``config``."""

    accessor = accessor or build_accessor(config)
    return ShareSweeper(
        accessor=accessor,
        report_sink=CsvReportSink(
            accessor,
            export_subdirectory=config.export_subdirectory,
            file_name_template=config.report_file_name,
        ),
        retention_days=config.retention_days,
        root_path=config.root_path,
        max_depth=config.max_depth,
        dry_run=config.dry_run if dry_run is None else dry_run,
    )


__all__ = [
    "SweepResult",
    "ShareSweeper",
    "build_accessor",
    "build_sweeper",
]
