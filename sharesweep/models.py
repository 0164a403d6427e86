"""Records produced and consumed by a sweep."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Canonical metadata for one file discovered in the share.

    ``last_modified_raw`` holds the source string when a modification time was
    present but could not be parsed; ``last_modified`` is ``None`` in that case.
    """

    relative_path: str
    name: str
    last_modified: Optional[datetime] = None
    size_bytes: Optional[int] = None
    last_modified_raw: Optional[str] = None

    @property
    def last_modified_display(self) -> str:
        if self.last_modified is not None:
            return self.last_modified.isoformat()
        return self.last_modified_raw or ""


@dataclass(frozen=True, slots=True)
class RetentionDecision:
    """Whether a record falls before the cutoff instant."""

    record: FileRecord
    expired: bool


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of one attempted deletion."""

    relative_path: str
    succeeded: bool
    error_message: Optional[str] = None


__all__ = ["DeletionOutcome", "FileRecord", "RetentionDecision"]
