"""Shared fixtures: an in-memory share that records every call."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest

from sharesweep.connectors.base import DirectoryEntry, EntryKind
from sharesweep.errors import DeleteError, NotFoundError


def _parent(path: str) -> str:
    return path.rpartition("/")[0]


class InMemoryAccessor:
    def __init__(self) -> None:
        self.files: Dict[str, Any] = {}
        self.contents: Dict[str, bytes] = {}
        self.directories: set[str] = {""}
        self.list_failures: Dict[str, Exception] = {}
        self.delete_failures: Dict[str, Exception] = {}
        self.list_calls: List[str] = []
        self.delete_calls: List[str] = []

    def add_directory(self, path: str) -> None:
        while path and path not in self.directories:
            self.directories.add(path)
            path = _parent(path)

    def add_file(self, path: str, metadata: Any = None) -> None:
        self.add_directory(_parent(path))
        self.files[path] = metadata if metadata is not None else {}

    def add_modified(self, path: str, modified: datetime, size: int = 1) -> None:
        self.add_file(
            path, {"properties": {"last_modified": modified, "content_length": size}}
        )

    def list_children(self, path: str) -> List[DirectoryEntry]:
        self.list_calls.append(path)
        if path in self.list_failures:
            raise self.list_failures[path]
        if path not in self.directories:
            raise NotFoundError(f"Directory not found: {path}")
        entries = [
            DirectoryEntry(EntryKind.DIRECTORY, directory.rpartition("/")[2])
            for directory in self.directories
            if directory and _parent(directory) == path
        ]
        entries.extend(
            DirectoryEntry(EntryKind.FILE, file_path.rpartition("/")[2], metadata)
            for file_path, metadata in self.files.items()
            if _parent(file_path) == path
        )
        return sorted(entries, key=lambda entry: entry.name)

    def delete_file(self, path: str) -> None:
        self.delete_calls.append(path)
        if path in self.delete_failures:
            raise self.delete_failures[path]
        if path not in self.files:
            raise DeleteError(path, "no such file")
        del self.files[path]

    def write_file(self, path: str, content: bytes) -> None:
        if _parent(path) not in self.directories:
            raise NotFoundError(f"Directory not found for {path}")
        self.files[path] = {
            "properties": {
                "last_modified": datetime.now(timezone.utc),
                "content_length": len(content),
            }
        }
        self.contents[path] = content

    def directory_exists(self, path: str) -> bool:
        return path in self.directories

    def create_directory(self, path: str) -> None:
        if _parent(path) not in self.directories:
            raise NotFoundError(f"Directory not found: {_parent(path)}")
        self.directories.add(path)


@pytest.fixture()
def store() -> InMemoryAccessor:
    return InMemoryAccessor()


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
