"""Storage accessor interfaces shared by every share backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class EntryKind(str, Enum):
    """Kind of item returned by a directory listing."""

    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One immediate child of a listed directory.

    ``metadata`` is the raw payload produced by the backend and is only
    interpreted by :func:`sharesweep.normalizer.normalize`.
    """

    kind: EntryKind
    name: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class StorageAccessor(Protocol):
    """Abstract representation of a remote hierarchical file store."""

    def list_children(self, path: str) -> Sequence[DirectoryEntry]:
        """Return the immediate children of ``path`` ("" is the share root)."""

    def delete_file(self, path: str) -> None:
        """Remove the file at ``path``; raise ``DeleteError`` on failure."""

    def write_file(self, path: str, content: bytes) -> None:
        """Create or replace the file at ``path`` with ``content``."""

    def directory_exists(self, path: str) -> bool:
        """Return whether ``path`` names an existing directory."""

    def create_directory(self, path: str) -> None:
        """Create the directory ``path`` (its parent must exist)."""


def join_path(parent: str, name: str) -> str:
    """Join a share-relative parent path and a child name with one slash."""

    name = name.strip("/")
    parent = parent.strip("/")
    if not parent:
        return name
    if not name:
        return parent
    return f"{parent}/{name}"


def split_path(path: str) -> list[str]:
    """Return the non-empty segments of a share-relative path."""

    return [segment for segment in path.split("/") if segment]


__all__ = [
    "DirectoryEntry",
    "EntryKind",
    "StorageAccessor",
    "join_path",
    "split_path",
]
