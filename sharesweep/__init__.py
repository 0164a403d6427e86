"""Top-level package for the ShareSweep project."""

from .config import AppConfig, load_config
from .models import DeletionOutcome, FileRecord
from .sweeper import ShareSweeper, SweepResult, build_sweeper

__all__ = [
    "AppConfig",
    "DeletionOutcome",
    "FileRecord",
    "ShareSweeper",
    "SweepResult",
    "build_sweeper",
    "load_config",
]
