"""Command line interface for the ShareSweep maintenance job."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .errors import SweepError
from .logging_utils import configure_logging
from .sweeper import build_sweeper

LOGGER = logging.getLogger("sharesweep.cli")

EXIT_OK = 0
EXIT_SWEEP_FAILED = 1
EXIT_BAD_CONFIG = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.json"),
        help="Path to the JSON configuration file.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single sweep even when run_interval is configured.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Walk the share and write the report without deleting anything.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging output.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return EXIT_BAD_CONFIG

    if config.logging.directory is not None:
        configure_logging(
            args.verbose, config.logging.directory, keep_days=config.logging.keep_days
        )

    try:
        sweeper = build_sweeper(config, dry_run=True if args.dry_run else None)
        if args.once or not config.run_interval:
            result = sweeper.run_once()
        else:
            sweeper.run_forever(config.run_interval)
            return EXIT_OK  # pragma: no cover - loop only exits by exception
    except SweepError as exc:
        LOGGER.error("Sweep aborted; no files were deleted: %s", exc)
        return EXIT_SWEEP_FAILED

    summary = result.summary
    LOGGER.info(
        "Run complete: %s file(s) discovered, %s expired, %s",
        len(result.records),
        len(result.expired),
        "dry run, nothing deleted" if result.dry_run else summary.describe(),
    )
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
