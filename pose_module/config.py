"""Typed views over the pose/gesture settings dict."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from utils.settings_store import get_settings, refresh_settings


def _as_int(raw) -> int:
    """int() that refuses booleans and non-integral numbers instead of truncating."""
    if isinstance(raw, bool):
        raise ValueError(f"expected an integer, got {raw!r}")
    value = float(raw)
    if not value.is_integer():
        raise ValueError(f"expected an integer, got {raw!r}")
    return int(value)


def _number(cfg: Mapping[str, Any], key: str, default, cast=float, *, minimum=None, maximum=None):
    raw = cfg.get(key, default)
    try:
        value = cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {key!r}: {raw!r}") from exc
    if minimum is not None and value < minimum:
        raise ValueError(f"{key!r} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{key!r} must be <= {maximum}, got {value}")
    return value


@dataclass(frozen=True)
class WaveSettings:
    history_length: int = 30
    min_y_above_shoulder: float = 0.05
    min_x_delta: float = 0.15
    min_confidence: float = 0.5
    cooldown_frames: int = 30

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any] | None) -> "WaveSettings":
        cfg = cfg or {}
        return cls(
            history_length=_number(cfg, "history_length", cls.history_length, _as_int, minimum=1),
            min_y_above_shoulder=_number(cfg, "min_y_above_shoulder", cls.min_y_above_shoulder),
            min_x_delta=_number(cfg, "min_x_delta", cls.min_x_delta, minimum=0.0),
            min_confidence=_number(cfg, "min_confidence", cls.min_confidence, minimum=0.0, maximum=1.0),
            cooldown_frames=_number(cfg, "cooldown_frames", cls.cooldown_frames, _as_int, minimum=0),
        )


@dataclass(frozen=True)
class PoseSettings:
    conf_threshold: float = 0.25
    keypoint_threshold: float = 0.2
    iou_threshold: float = 0.45
    max_detections: int = 5
    model_input_size: tuple[int, int] = (640, 640)
    wave: WaveSettings = field(default_factory=WaveSettings)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any] | None) -> "PoseSettings":
        cfg = cfg or {}
        size = cfg.get("model_input_size", cls.model_input_size)
        try:
            width, height = (_as_int(v) for v in size)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for 'model_input_size': {size!r}") from exc
        if width < 1 or height < 1:
            raise ValueError(f"'model_input_size' must be positive, got {size!r}")
        wave_cfg = cfg.get("wave", {})
        if not isinstance(wave_cfg, Mapping):
            raise ValueError(f"Invalid value for 'wave': {wave_cfg!r}")
        return cls(
            conf_threshold=_number(cfg, "conf_threshold", cls.conf_threshold, minimum=0.0, maximum=1.0),
            keypoint_threshold=_number(cfg, "keypoint_threshold", cls.keypoint_threshold, minimum=0.0, maximum=1.0),
            iou_threshold=_number(cfg, "iou_threshold", cls.iou_threshold, minimum=0.0, maximum=1.0),
            max_detections=_number(cfg, "max_detections", cls.max_detections, _as_int, minimum=0),
            model_input_size=(width, height),
            wave=WaveSettings.from_mapping(wave_cfg),
        )


def load_pose_settings(path: str | Path | None = None) -> PoseSettings:
    """Build settings from the JSON settings file (defaults when it is missing)."""
    cfg = refresh_settings(path) if path else get_settings()
    return PoseSettings.from_mapping(cfg)
