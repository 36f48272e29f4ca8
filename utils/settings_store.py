"""In-memory cache for pose pipeline settings."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

from utils.file_utils import load_json
from utils.log_utils import tprint

DEFAULT_SETTINGS_PATH = Path("config/pose_settings.json")
SETTINGS_PATH_ENV = "POSE_SETTINGS_PATH"

_lock = threading.Lock()
_settings_cache: dict[str, Any] = {}
_loaded = False
_deep_override: bool | None = None


def settings_path() -> Path:
    """Return the settings file path, honoring ``POSE_SETTINGS_PATH``."""
    raw = os.getenv(SETTINGS_PATH_ENV)
    return Path(raw) if raw else DEFAULT_SETTINGS_PATH


def refresh_settings(path: str | Path | None = None) -> dict[str, Any]:
    """Reload settings from disk and replace the cache."""
    global _loaded
    data = load_json(path or settings_path())
    with _lock:
        _settings_cache.clear()
        _settings_cache.update(data)
        _loaded = True
        return dict(_settings_cache)


def get_settings() -> dict[str, Any]:
    """Return a copy of the cached settings."""
    with _lock:
        loaded = _loaded
    if not loaded:
        return refresh_settings()
    with _lock:
        return dict(_settings_cache)


def set_deep_logging(enabled: bool | None) -> None:
    """Force deep tracing on/off regardless of settings. ``None`` clears the override."""
    global _deep_override
    _deep_override = enabled


def is_deep_logging() -> bool:
    """Return True when log_level requests deep tracing."""
    if _deep_override is not None:
        return _deep_override
    level = str(get_settings().get("log_level", "")).upper()
    return level in {"DEEP"}


def deep_log(message: str) -> None:
    if is_deep_logging():
        tprint(message)
