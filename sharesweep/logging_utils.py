"""Console and per-day file logging for sweep runs."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_PREFIX = "sharesweep"


class DailyRunLogHandler(logging.FileHandler):
    """Write to ``<log_dir>/<prefix>-<YYYY-MM-DD>.log``, one file per day.

    The file for a new day is opened on the first record of that day, and
    opening it removes this prefix's files older than ``keep_days``. Other
    files in the directory are never touched, so several sweeps can share a
    log directory under different prefixes.
    """

    def __init__(
        self,
        log_dir: Path,
        *,
        prefix: str = DEFAULT_LOG_PREFIX,
        keep_days: int = 7,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.keep_days = max(keep_days, 1)
        self._day = self._today()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        super().__init__(self.path_for(self._day), encoding="utf-8", delay=True)

    def path_for(self, day: date) -> Path:
        return self.log_dir / f"{self.prefix}-{day.isoformat()}.log"

    def emit(self, record: logging.LogRecord) -> None:
        today = self._today()
        if self.stream is None or today != self._day:
            self._start_day(today)
        super().emit(record)

    def prune(self, today: date) -> List[Path]:
        """Delete dated files for this prefix older than the retention window."""

        cutoff = today - timedelta(days=self.keep_days - 1)
        removed: List[Path] = []
        for path in sorted(self.log_dir.glob(f"{self.prefix}-*.log")):
            try:
                day = date.fromisoformat(path.stem[len(self.prefix) + 1 :])
            except ValueError:
                continue
            if day >= cutoff:
                continue
            try:
                path.unlink()
            except OSError:
                continue
            removed.append(path)
        return removed

    def _start_day(self, day: date) -> None:
        if self.stream is not None:
            self.stream.close()
            self.stream = None
        self._day = day
        self.baseFilename = os.path.abspath(self.path_for(day))
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prune(day)

    @staticmethod
    def _today() -> date:
        return datetime.now().date()


def configure_logging(
    verbose: bool,
    log_dir: Path | None = None,
    *,
    keep_days: int = 7,
    prefix: str = DEFAULT_LOG_PREFIX,
) -> None:
    """Reset root logging to the console plus, with ``log_dir``, daily files.

    Safe to call twice: the CLI configures the console first so configuration
    errors are visible, then again once the log directory is known.
    """

    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        handlers.append(DailyRunLogHandler(log_dir, prefix=prefix, keep_days=keep_days))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)

    # googleapiclient logs every discovery/cache lookup at INFO.
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    logging.captureWarnings(True)


__all__ = ["DEFAULT_LOG_PREFIX", "DailyRunLogHandler", "LOG_FORMAT", "configure_logging"]
