"""
Persistent installation settings for the central service client.

Stored as a small JSON document in the data directory.
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from autodj.core.config import get_data_dir


@dataclass
class AppSettings:
    """Installation-wide values remembered between runs."""

    app_unique_identifier: Optional[str] = None
    external_ip: Optional[str] = None


def get_settings_path() -> Path:
    return get_data_dir() / "settings.json"


def read_settings(path: Optional[Path] = None) -> AppSettings:
    """Load settings, returning defaults when the file is missing or unreadable."""
    path = path or get_settings_path()
    if not path.exists():
        return AppSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read settings from {path}: {e}")
        return AppSettings()

    return AppSettings(
        app_unique_identifier=data.get("app_unique_identifier"),
        external_ip=data.get("external_ip"),
    )


def write_settings(settings: AppSettings, path: Optional[Path] = None) -> None:
    path = path or get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
