"""Depth-first enumeration of every file in a share."""

from __future__ import annotations

import logging
from typing import Iterator, List, Set, Tuple

from .connectors.base import StorageAccessor, join_path, split_path
from .errors import TraversalError
from .models import FileRecord
from .normalizer import normalize

LOGGER = logging.getLogger("sharesweep.walker")

DEFAULT_MAX_DEPTH = 1000


def iter_walk(
    accessor: StorageAccessor,
    root: str = "",
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[FileRecord]:
    """Yield a record for every file below ``root``.

    Listing errors are not caught: a directory that cannot be listed aborts
    the walk, since a partial inventory would skew retention decisions.
    """

    root_path = "/".join(split_path(root))
    pending: List[Tuple[str, int]] = [(root_path, 0)]
    seen: Set[str] = set()
    while pending:
        path, depth = pending.pop()
        if depth > max_depth:
            raise TraversalError(
                f"Directory depth exceeded {max_depth} at {path!r}; the tree may contain a cycle"
            )
        LOGGER.debug("Listing %s", path or "/")
        subdirectories: List[str] = []
        for entry in accessor.list_children(path):
            child_path = join_path(path, entry.name)
            if child_path in seen:
                raise TraversalError(f"Path listed twice: {child_path}")
            seen.add(child_path)
            if entry.is_directory:
                subdirectories.append(child_path)
            else:
                yield normalize(entry.metadata, child_path)
        # Reversed so the first listed subdirectory is walked first.
        for child_path in reversed(subdirectories):
            pending.append((child_path, depth + 1))


def walk(
    accessor: StorageAccessor,
    root: str = "",
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[FileRecord]:
    """Return the records for every file below ``root`` as one list."""

    return list(iter_walk(accessor, root, max_depth=max_depth))


__all__ = ["DEFAULT_MAX_DEPTH", "iter_walk", "walk"]
