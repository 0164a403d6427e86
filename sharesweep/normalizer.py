"""Turn backend-specific directory entries into :class:`FileRecord` objects.

Different listing calls expose modification time and size under different
keys: some nest them in a ``properties`` object, some put them at the top
level (Drive's ``modifiedTime`` and ``size``), and older payloads carry them
in a ``metadata`` block. Each field is resolved by trying an ordered list of
extractors against a plain mapping view of the entry; the first one that
finds a value wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional, Sequence, Tuple

from .errors import TimestampParseError
from .models import FileRecord

LOGGER = logging.getLogger("sharesweep.normalizer")


@dataclass(frozen=True, slots=True)
class FieldExtractor:
    """Look up the first non-null value among ``keys`` in one section."""

    section: Optional[str]
    keys: Tuple[str, ...]

    def extract(self, view: Mapping[str, Any]) -> Any:
        source: Mapping[str, Any] = view
        if self.section is not None:
            source = _as_mapping(view.get(self.section))
        for key in self.keys:
            value = source.get(key)
            if value is not None:
                return value
        return None


LAST_MODIFIED_EXTRACTORS: Tuple[FieldExtractor, ...] = (
    FieldExtractor("properties", ("last_modified",)),
    FieldExtractor(None, ("last_modified", "modifiedTime", "lastModified")),
    FieldExtractor("metadata", ("last_modified", "modifiedTime")),
)

SIZE_EXTRACTORS: Tuple[FieldExtractor, ...] = (
    FieldExtractor("properties", ("content_length",)),
    FieldExtractor(None, ("content_length", "size", "contentLength")),
    FieldExtractor("metadata", ("content_length",)),
)


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return raw
    try:
        return vars(raw)
    except TypeError:
        return {}


def _first_match(view: Mapping[str, Any], extractors: Sequence[FieldExtractor]) -> Any:
    for extractor in extractors:
        value = extractor.extract(view)
        if value is not None:
            return value
    return None


def parse_timestamp(value: Any) -> datetime:
    """Coerce a raw modification value to an aware UTC-compatible datetime."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise TimestampParseError(f"Timestamp out of range: {value!r}") from exc
    elif isinstance(value, str):
        parsed = _parse_timestamp_string(value)
    else:
        raise TimestampParseError(f"Unsupported timestamp type: {type(value).__name__}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_timestamp_string(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise TimestampParseError("Empty timestamp")
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError) as exc:
        raise TimestampParseError(f"Unrecognised timestamp: {value!r}") from exc


def _coerce_size(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        size = value
    elif isinstance(value, str) and value.strip().isdecimal():
        size = int(value.strip())
    else:
        return None
    return size if size >= 0 else None


def normalize(raw_entry: Any, relative_path: str) -> FileRecord:
    """Build the canonical record for the file at ``relative_path``.

    Never raises for missing fields or unparseable timestamps.
    """

    view = _as_mapping(raw_entry)
    name = relative_path.rsplit("/", 1)[-1]

    last_modified: Optional[datetime] = None
    last_modified_raw: Optional[str] = None
    raw_modified = _first_match(view, LAST_MODIFIED_EXTRACTORS)
    if raw_modified is not None:
        try:
            last_modified = parse_timestamp(raw_modified)
        except TimestampParseError as exc:
            last_modified_raw = str(raw_modified)
            LOGGER.warning(
                "Keeping unparsed modification time for %s (%s)", relative_path, exc
            )

    return FileRecord(
        relative_path=relative_path,
        name=name,
        last_modified=last_modified,
        size_bytes=_coerce_size(_first_match(view, SIZE_EXTRACTORS)),
        last_modified_raw=last_modified_raw,
    )


__all__ = [
    "FieldExtractor",
    "LAST_MODIFIED_EXTRACTORS",
    "SIZE_EXTRACTORS",
    "normalize",
    "parse_timestamp",
]
