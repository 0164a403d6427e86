"""Exception hierarchy for ShareSweep runs."""

from __future__ import annotations


class SweepError(Exception):
    """Base class for failures raised while sweeping a share."""


class AccessError(SweepError):
    """The share could not be reached or the identity lacks permission."""


class NotFoundError(SweepError):
    """A path expected to exist in the share does not."""


class TraversalError(SweepError):
    """The directory tree is malformed (too deep, cyclic or inconsistent)."""


class DeleteError(SweepError):
    """A single file could not be deleted."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class TimestampParseError(SweepError, ValueError):
    """A modification time string could not be interpreted."""


__all__ = [
    "AccessError",
    "DeleteError",
    "NotFoundError",
    "SweepError",
    "TimestampParseError",
    "TraversalError",
]
