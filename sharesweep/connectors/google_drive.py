"""Google Drive accessor."""

from __future__ import annotations

import io
import logging
import mimetypes
import time
from collections import Counter
from typing import Callable, Dict, List, Optional, TypeVar

import httplib2
from google.auth.exceptions import GoogleAuthError

from ..errors import AccessError, DeleteError, NotFoundError, SweepError
from .base import DirectoryEntry, EntryKind, StorageAccessor, join_path, split_path

LOGGER = logging.getLogger("sharesweep.google_drive")

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
LIST_FIELDS = "nextPageToken, files(id, name, mimeType, modifiedTime, size)"

T = TypeVar("T")

# Socket-level failures (timeouts, resets) surface as OSError subclasses or
# httplib2 errors and carry no HTTP status.
TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class GoogleDriveAccessor(StorageAccessor):
    """Expose a Google Drive folder as a share addressed by relative paths.

    Drive addresses items by ID, so every relative path is resolved one
    folder at a time starting at ``folder_id``. Resolved IDs are cached for
    the lifetime of the accessor, which matches one sweep.
    """

    def __init__(
        self,
        service: "Resource",
        folder_id: str,
        page_size: int = 100,
        *,
        max_retries: int = 3,
        retry_initial_backoff: float = 1.0,
    ):
        if not folder_id:
            raise ValueError("A root folder_id is required for the Google Drive share")
        self._service = service
        self._folder_id = folder_id
        self._page_size = page_size
        self._max_retries = max(1, int(max_retries))
        self._retry_initial_backoff = max(0.1, float(retry_initial_backoff))
        self._folder_ids: Dict[str, str] = {"": folder_id}
        self._file_ids: Dict[str, str] = {}

    # StorageAccessor --------------------------------------------------

    def list_children(self, path: str) -> List[DirectoryEntry]:
        folder_id = self._require_folder(path)
        items = self._list_items(f"{_quote(folder_id)} in parents and trashed = false", path)
        name_counts = Counter(item.get("name", item["id"]) for item in items)
        entries: List[DirectoryEntry] = []
        for item in items:
            name = item.get("name", item["id"])
            if name_counts[name] > 1:
                # Drive permits same-named siblings; paths must stay unique.
                name = f"{name} ({item['id']})"
                LOGGER.warning("Duplicate name in %s; listing as %s", path or "/", name)
            child_path = join_path(path, name)
            if item.get("mimeType") == FOLDER_MIME_TYPE:
                self._folder_ids[child_path] = item["id"]
                entries.append(DirectoryEntry(EntryKind.DIRECTORY, name, metadata=item))
            else:
                self._file_ids[child_path] = item["id"]
                entries.append(DirectoryEntry(EntryKind.FILE, name, metadata=item))
        return entries

    def delete_file(self, path: str) -> None:
        # Deletes are not retried; a repeated call after a lost response may
        # target an already removed file.
        try:
            file_id = self._file_ids.get(path) or self._lookup(path, folders=False)
            if file_id is None:
                raise NotFoundError(f"File not found: {path}")
            self._service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
        except (SweepError, GoogleAuthError, *TRANSPORT_ERRORS) as exc:
            raise DeleteError(path, str(exc)) from exc
        except Exception as exc:
            if self._status_of(exc) is None:
                raise
            raise DeleteError(path, str(exc)) from exc
        self._file_ids.pop(path, None)

    def write_file(self, path: str, content: bytes) -> None:
        from googleapiclient.http import MediaIoBaseUpload  # type: ignore

        segments = split_path(path)
        if not segments:
            raise ValueError("A file name is required when writing to the share")
        parent_path = "/".join(segments[:-1])
        name = segments[-1]
        parent_id = self._require_folder(parent_path)
        mimetype = mimetypes.guess_type(name)[0] or "application/octet-stream"
        existing_id = self._file_ids.get(path) or self._lookup(path, folders=False)

        def _upload() -> dict:
            media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mimetype, resumable=False)
            files = self._service.files()
            if existing_id:
                request = files.update(
                    fileId=existing_id,
                    media_body=media,
                    supportsAllDrives=True,
                    fields="id",
                )
            else:
                request = files.create(
                    body={"name": name, "parents": [parent_id], "mimeType": mimetype},
                    media_body=media,
                    supportsAllDrives=True,
                    fields="id",
                )
            return request.execute()

        response = self._call(_upload, path)
        self._file_ids[path] = response.get("id", existing_id)

    def directory_exists(self, path: str) -> bool:
        try:
            self._require_folder(path)
        except NotFoundError:
            return False
        return True

    def create_directory(self, path: str) -> None:
        segments = split_path(path)
        if not segments:
            return
        parent_id = self._require_folder("/".join(segments[:-1]))
        body = {"name": segments[-1], "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]}
        response = self._call(
            lambda: self._service.files()
            .create(body=body, supportsAllDrives=True, fields="id")
            .execute(),
            path,
        )
        self._folder_ids["/".join(segments)] = response["id"]
        LOGGER.debug("Created folder %s (%s)", path, response["id"])

    # Path resolution --------------------------------------------------

    def _require_folder(self, path: str) -> str:
        key = "/".join(split_path(path))
        folder_id = self._folder_ids.get(key)
        if folder_id is None:
            folder_id = self._lookup(key, folders=True)
        if folder_id is None:
            raise NotFoundError(f"Directory not found: {path or '/'}")
        return folder_id

    def _lookup(self, path: str, *, folders: bool) -> Optional[str]:
        segments = split_path(path)
        if not segments:
            return self._folder_id if folders else None
        parent_path = "/".join(segments[:-1])
        parent_id = self._folder_ids.get(parent_path)
        if parent_id is None:
            parent_id = self._lookup(parent_path, folders=True)
            if parent_id is None:
                return None
            self._folder_ids[parent_path] = parent_id

        mime_clause = "=" if folders else "!="
        query = (
            f"{_quote(parent_id)} in parents and name = {_quote(segments[-1])} "
            f"and mimeType {mime_clause} {_quote(FOLDER_MIME_TYPE)} and trashed = false"
        )
        items = self._list_items(query, path)
        if not items:
            return None
        if len(items) > 1:
            LOGGER.warning("Multiple items named %s; using the first match", path)
        item_id = items[0]["id"]
        if folders:
            self._folder_ids[path] = item_id
        return item_id

    def _list_items(self, query: str, path: str) -> List[dict]:
        page_token: Optional[str] = None
        items: List[dict] = []
        while True:
            response = self._call(
                lambda page_token=page_token: self._service.files()
                .list(
                    q=query,
                    fields=LIST_FIELDS,
                    pageToken=page_token,
                    pageSize=self._page_size,
                    supportsAllDrives=True,
                    includeItemsFromAllDrives=True,
                )
                .execute(),
                path,
            )
            items.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return items

    # Error handling ---------------------------------------------------

    def _call(self, operation: Callable[[], T], path: str) -> T:
        try:
            return self._with_retry(operation)
        except GoogleAuthError as exc:
            raise AccessError(f"Authentication failed for {path or '/'}: {exc}") from exc
        except TRANSPORT_ERRORS as exc:
            raise AccessError(f"Unable to reach Drive for {path or '/'}: {exc}") from exc
        except Exception as exc:
            status = self._status_of(exc)
            if status in (401, 403):
                raise AccessError(f"Access denied for {path or '/'}: {exc}") from exc
            if status == 404:
                raise NotFoundError(f"Not found: {path or '/'}") from exc
            if status is not None:
                raise AccessError(f"Drive request failed for {path or '/'}: {exc}") from exc
            raise

    def _with_retry(self, operation: Callable[[], T]) -> T:
        delay = self._retry_initial_backoff
        last_error: Optional[Exception] = None
        for attempt in range(self._max_retries):
            try:
                return operation()
            except Exception as exc:
                if not self._is_retryable_error(exc) or attempt == self._max_retries - 1:
                    raise
                last_error = exc
                LOGGER.debug("Retrying Drive call after %s (attempt %s)", exc, attempt + 1)
                self._sleep(delay)
                delay = min(delay * 2, 30.0)
        if last_error is not None:  # pragma: no cover - defensive
            raise last_error
        raise RuntimeError("Retry logic reached an unexpected state")  # pragma: no cover

    @staticmethod
    def _status_of(error: Exception) -> Optional[int]:
        resp = getattr(error, "resp", None)
        status = getattr(resp, "status", None)
        if status is None:
            return None
        try:
            return int(status)
        except (TypeError, ValueError):
            return None

    @classmethod
    def _is_retryable_error(cls, error: Exception) -> bool:
        if isinstance(error, TRANSPORT_ERRORS):
            return True
        status = cls._status_of(error)
        if status is None:
            return False
        return status == 429 or 500 <= status < 600

    @staticmethod
    def _sleep(seconds: float) -> None:
        time.sleep(seconds)


__all__ = ["FOLDER_MIME_TYPE", "GoogleDriveAccessor"]
