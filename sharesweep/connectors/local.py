"""Local filesystem accessor useful for development and testing."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from ..errors import AccessError, DeleteError, NotFoundError
from .base import DirectoryEntry, EntryKind, StorageAccessor, join_path, split_path

LOGGER = logging.getLogger("sharesweep.local")


class LocalFolderAccessor(StorageAccessor):
    """Treat a folder on the local filesystem as the share."""

    def __init__(self, folder: str | Path):
        self._folder = Path(folder).expanduser().resolve()
        if not self._folder.is_dir():
            raise NotFoundError(f"Local folder does not exist: {self._folder}")

    @property
    def root(self) -> Path:
        return self._folder

    def list_children(self, path: str) -> List[DirectoryEntry]:
        directory = self._resolve(path)
        if not directory.is_dir():
            raise NotFoundError(f"Directory not found: {path or '/'}")
        try:
            children = sorted(directory.iterdir(), key=lambda item: item.name)
        except PermissionError as exc:
            raise AccessError(f"Unable to list {path or '/'}: {exc}") from exc

        entries: List[DirectoryEntry] = []
        for child in children:
            if child.is_dir():
                entries.append(DirectoryEntry(EntryKind.DIRECTORY, child.name))
                continue
            try:
                stat = child.stat()
            except OSError as exc:
                # Dangling symlink, or removed since the listing.
                LOGGER.warning("Skipping %s: %s", join_path(path, child.name), exc)
                continue
            entries.append(
                DirectoryEntry(
                    EntryKind.FILE,
                    child.name,
                    metadata={
                        "properties": {
                            "last_modified": datetime.fromtimestamp(
                                stat.st_mtime, tz=timezone.utc
                            ),
                            "content_length": stat.st_size,
                        }
                    },
                )
            )
        return entries

    def delete_file(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except OSError as exc:
            raise DeleteError(path, exc.strerror or str(exc)) from exc

    def write_file(self, path: str, content: bytes) -> None:
        target = self._resolve(path)
        if not target.parent.is_dir():
            raise NotFoundError(f"Directory not found for {path}")
        target.write_bytes(content)

    def directory_exists(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def create_directory(self, path: str) -> None:
        self._resolve(path).mkdir(exist_ok=True)

    def _resolve(self, path: str) -> Path:
        segments = split_path(path)
        if any(segment in {".", ".."} for segment in segments):
            raise AccessError(f"Path escapes the share root: {path}")
        return self._folder.joinpath(*segments)


__all__ = ["LocalFolderAccessor"]
