"""Best-effort removal of expired files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .connectors.base import StorageAccessor
from .errors import SweepError
from .models import DeletionOutcome, FileRecord

LOGGER = logging.getLogger("sharesweep.deletion")


def delete_all(
    accessor: StorageAccessor, expired: Iterable[FileRecord]
) -> List[DeletionOutcome]:
    """Attempt to delete every record, recording one outcome per file.

    A failure on one file is logged and recorded; the remaining files are
    still attempted.
    """

    outcomes: List[DeletionOutcome] = []
    for record in expired:
        try:
            accessor.delete_file(record.relative_path)
        except SweepError as exc:
            message = getattr(exc, "message", None) or str(exc)
            LOGGER.warning("Failed to delete %s: %s", record.relative_path, message)
            outcomes.append(DeletionOutcome(record.relative_path, False, message))
            continue
        LOGGER.info("Deleted %s", record.relative_path)
        outcomes.append(DeletionOutcome(record.relative_path, True))
    return outcomes


@dataclass(frozen=True, slots=True)
class DeletionSummary:
    """Tally of a deletion batch."""

    attempted: int
    succeeded: int
    failures: List[DeletionOutcome] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[DeletionOutcome]) -> "DeletionSummary":
        outcomes = list(outcomes)
        failures = [outcome for outcome in outcomes if not outcome.succeeded]
        return cls(
            attempted=len(outcomes),
            succeeded=len(outcomes) - len(failures),
            failures=failures,
        )

    def describe(self) -> str:
        return f"{self.succeeded} of {self.attempted} deletions succeeded"


__all__ = ["DeletionSummary", "delete_all"]
