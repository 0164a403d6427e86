"""Configuration utilities for ShareSweep."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .report import DEFAULT_REPORT_TEMPLATE
from .walker import DEFAULT_MAX_DEPTH

DEFAULT_DRIVE_SCOPES: Tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


@dataclass(slots=True)
class GoogleDriveConfig:
    """Settings required to sweep a Google Drive folder.

    Credentials are taken from Application Default Credentials, so only the
    folder and request tuning live here.
    """

    folder_id: str
    page_size: int = 100
    scopes: Tuple[str, ...] = DEFAULT_DRIVE_SCOPES
    max_retries: int = 3


@dataclass(slots=True)
class LocalFolderConfig:
    """Settings for the built-in local filesystem accessor."""

    path: Path


@dataclass(slots=True)
class LoggingConfig:
    directory: Optional[Path] = None
    keep_days: int = 7


@dataclass(slots=True)
class AppConfig:
    """Top-level application configuration."""

    provider: str
    retention_days: int = 7
    root_path: str = ""
    export_subdirectory: str = "Export"
    report_file_name: str = DEFAULT_REPORT_TEMPLATE
    dry_run: bool = False
    run_interval: float = 0.0
    max_depth: int = DEFAULT_MAX_DEPTH
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    google_drive: Optional[GoogleDriveConfig] = None
    local: Optional[LocalFolderConfig] = None

    @staticmethod
    def _coerce_path(value: Optional[str | Path]) -> Optional[Path]:
        if value is None:
            return None
        return Path(os.path.expandvars(str(value))).expanduser().resolve()

    @staticmethod
    def _positive_int(data: Dict[str, Any], key: str, default: int) -> int:
        raw = data.get(key, default)
        try:
            value = int(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{key} must be an integer") from exc
        if isinstance(raw, bool) or value <= 0:
            raise ValueError(f"{key} must be a positive integer")
        return value

    @staticmethod
    def _section(data: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
        value = data.get(key)
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise ValueError(f"{key} must be a JSON object")
        return value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        if not isinstance(data, Mapping):
            raise ValueError("Configuration must be a JSON object")
        provider = str(data.get("provider", "google_drive")).lower()
        if provider not in {"google_drive", "local"}:
            raise ValueError("provider must be either 'google_drive' or 'local'")

        retention_days = cls._positive_int(data, "retention_days", 7)
        max_depth = cls._positive_int(data, "max_depth", DEFAULT_MAX_DEPTH)
        try:
            run_interval = float(data.get("run_interval", 0))
        except (TypeError, ValueError) as exc:
            raise ValueError("run_interval must be a number of seconds") from exc
        if run_interval < 0:
            raise ValueError("run_interval must not be negative")

        report_file_name = str(data.get("report_file_name") or DEFAULT_REPORT_TEMPLATE)
        if "/" in report_file_name:
            raise ValueError("report_file_name must be a plain file name")

        logging_data = cls._section(data, "logging") or {}
        logging_cfg = LoggingConfig(
            directory=cls._coerce_path(logging_data.get("directory")),
            keep_days=cls._positive_int(logging_data, "keep_days", 7),
        )

        google_drive_cfg = None
        gd = cls._section(data, "google_drive")
        if gd is not None:
            folder_id = gd.get("folder_id")
            if not folder_id:
                raise ValueError("google_drive.folder_id is required")
            scopes: Sequence[str] = gd.get("scopes", DEFAULT_DRIVE_SCOPES)
            google_drive_cfg = GoogleDriveConfig(
                folder_id=str(folder_id),
                page_size=int(gd.get("page_size", 100)),
                scopes=tuple(str(scope) for scope in scopes),
                max_retries=int(gd.get("max_retries", 3)),
            )

        local_cfg = None
        local_data = cls._section(data, "local")
        if local_data is not None:
            local_path = cls._coerce_path(local_data.get("path"))
            if local_path is None:
                raise ValueError("local.path is required")
            local_cfg = LocalFolderConfig(path=local_path)

        if provider == "google_drive" and google_drive_cfg is None:
            raise ValueError("google_drive configuration is required for the google_drive provider")
        if provider == "local" and local_cfg is None:
            raise ValueError("local configuration is required for the local provider")

        return cls(
            provider=provider,
            retention_days=retention_days,
            root_path=str(data.get("root_path", "")).strip("/"),
            export_subdirectory=str(data.get("export_subdirectory", "Export")).strip("/"),
            report_file_name=report_file_name,
            dry_run=bool(data.get("dry_run", False)),
            run_interval=run_interval,
            max_depth=max_depth,
            logging=logging_cfg,
            google_drive=google_drive_cfg,
            local=local_cfg,
        )


def load_config(path: str | Path) -> AppConfig:
    """Load configuration data from a JSON file."""

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    return AppConfig.from_dict(data)


__all__ = [
    "AppConfig",
    "GoogleDriveConfig",
    "LocalFolderConfig",
    "LoggingConfig",
    "load_config",
]
