"""Timestamped logging helpers for the pose and gesture pipeline."""

from __future__ import annotations

import builtins
import threading
import time
from typing import Any


_LEVELS = {"DEEP", "DEBUG", "INFO", "WARN", "ERROR"}

_once_lock = threading.Lock()
_once_keys: set[str] = set()


def _split_tags(message: str) -> tuple[list[str], str]:
    tags: list[str] = []
    remaining = message.lstrip()
    while remaining.startswith("["):
        end = remaining.find("]")
        if end == -1:
            break
        tag = remaining[1:end].strip()
        if not tag:
            break
        tags.append(tag)
        remaining = remaining[end + 1 :].lstrip()
    return tags, remaining


def _format_message(message: str) -> str:
    """Reorder leading tags to ``[SYSTEM][LEVEL] [extra] text``."""
    tags, remaining = _split_tags(message)
    system = "POSE"
    variant = None
    extra_tags: list[str] = []
    if tags:
        if tags[0].upper() in _LEVELS:
            variant = tags[0].upper()
            system = tags[1] if len(tags) > 1 else system
            extra_tags = tags[2:]
        else:
            system = tags[0]
            variant = tags[1].upper() if len(tags) > 1 else None
            extra_tags = tags[2:]
    extra = f" [{' '.join(extra_tags)}]" if extra_tags else ""
    suffix = f" {remaining}" if remaining else ""
    if variant:
        return f"[{system}][{variant}]{extra}{suffix}"
    return f"[{system}]{extra}{suffix}"


def tprint(*args: Any, **kwargs: Any) -> None:
    """Print with a timestamp prefix and normalized tag order."""
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
    message = " ".join(str(arg) for arg in args)
    builtins.print(f"[{timestamp}]{_format_message(message)}", **kwargs)


def log_once(key: str, message: str) -> bool:
    """Log ``message`` only the first time ``key`` is seen. Returns True if printed."""
    with _once_lock:
        if key in _once_keys:
            return False
        _once_keys.add(key)
    tprint(message)
    return True
