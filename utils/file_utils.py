"""Safe JSON loading helpers."""

import json
from pathlib import Path


def load_json(path: str | Path) -> dict:
    """Read a JSON object from ``path``; a missing file yields an empty dict."""
    p = Path(path)
    if not p.exists():
        return {}
    data = json.loads(p.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {p}, got {type(data).__name__}")
    return data
