"""Retention window arithmetic and record partitioning."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from .models import FileRecord, RetentionDecision


def compute_cutoff(retention_days: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant before which files are considered expired."""

    if retention_days <= 0:
        raise ValueError("retention_days must be a positive integer")
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current - timedelta(days=retention_days)


def decide(record: FileRecord, cutoff: datetime) -> RetentionDecision:
    expired = record.last_modified is not None and record.last_modified < cutoff
    return RetentionDecision(record=record, expired=expired)


def partition(
    records: Iterable[FileRecord], cutoff: datetime
) -> Tuple[List[FileRecord], List[FileRecord]]:
    """Split ``records`` into ``(retain, expire)`` preserving input order.

    Records without a usable modification time are always retained.
    """

    retain: List[FileRecord] = []
    expire: List[FileRecord] = []
    for record in records:
        if decide(record, cutoff).expired:
            expire.append(record)
        else:
            retain.append(record)
    return retain, expire


def sort_for_display(records: Iterable[FileRecord]) -> List[FileRecord]:
    """Newest first; undated records last in their original order."""

    records = list(records)
    dated = [record for record in records if record.last_modified is not None]
    undated = [record for record in records if record.last_modified is None]
    dated.sort(key=lambda record: record.last_modified, reverse=True)
    return dated + undated


__all__ = ["compute_cutoff", "decide", "partition", "sort_for_display"]
