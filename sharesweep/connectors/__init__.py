"""Storage accessor implementations for ShareSweep."""

from .base import DirectoryEntry, EntryKind, StorageAccessor, join_path, split_path
from .google_drive import GoogleDriveAccessor
from .local import LocalFolderAccessor

__all__ = [
    "DirectoryEntry",
    "EntryKind",
    "GoogleDriveAccessor",
    "LocalFolderAccessor",
    "StorageAccessor",
    "join_path",
    "split_path",
]
