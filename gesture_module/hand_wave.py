"""Sliding-window hand-wave detector for a single tracked person."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable

import numpy as np

from gesture_module.base import GestureDetector
from pose_module.types import KeypointIndex, PoseFrame
from utils.log_utils import tprint
from utils.settings_store import deep_log

MIN_WINDOW = 5

RIGHT = "right"
LEFT = "left"

_SIDE_JOINTS = {
    RIGHT: (KeypointIndex.RIGHT_WRIST, KeypointIndex.RIGHT_SHOULDER),
    LEFT: (KeypointIndex.LEFT_WRIST, KeypointIndex.LEFT_SHOULDER),
}


class HandWaveDetector(GestureDetector):
    """Fires when a wrist stays above its shoulder while sweeping sideways.

    Over a full window, every sample of the side's wrist and shoulder must be
    present. The side triggers when the mean (shoulder_y - wrist_y) is at least
    ``min_y_above_shoulder`` and the wrist's x range is at least ``min_x_delta``.
    After firing, that side stays silent for ``cooldown_frames`` frames.
    """

    def __init__(
        self,
        *,
        history_length: int = 30,
        min_y_above_shoulder: float = 0.05,
        min_x_delta: float = 0.15,
        min_confidence: float = 0.5,
        cooldown_frames: int = 30,
        on_right_wave: Callable[[], None] | None = None,
        on_left_wave: Callable[[], None] | None = None,
    ) -> None:
        self.window = max(MIN_WINDOW, int(history_length))
        self.min_y_above_shoulder = float(min_y_above_shoulder)
        self.min_x_delta = float(min_x_delta)
        self.min_confidence = float(min_confidence)
        self.cooldown_frames = max(0, int(cooldown_frames))
        self._callbacks: dict[str, Callable[[], None] | None] = {
            RIGHT: on_right_wave,
            LEFT: on_left_wave,
        }
        self._history: deque[PoseFrame] = deque(maxlen=self.window)
        self._cooldown: dict[str, int] = {RIGHT: 0, LEFT: 0}

    @classmethod
    def from_settings(cls, settings, **callbacks) -> "HandWaveDetector":
        return cls(
            history_length=settings.history_length,
            min_y_above_shoulder=settings.min_y_above_shoulder,
            min_x_delta=settings.min_x_delta,
            min_confidence=settings.min_confidence,
            cooldown_frames=settings.cooldown_frames,
            **callbacks,
        )

    @staticmethod
    def event_name(side: str) -> str:
        return f"{side}_hand_wave"

    @property
    def history_size(self) -> int:
        return len(self._history)

    def cooldown(self, side: str) -> int:
        return self._cooldown[side]

    def reset_state(self) -> None:
        self._history.clear()
        self._cooldown = {RIGHT: 0, LEFT: 0}

    def on_no_pose(self) -> None:
        for side, remaining in self._cooldown.items():
            if remaining > 0:
                self._cooldown[side] = remaining - 1

    def on_pose(self, frame: PoseFrame) -> list[str]:
        self._history.append(frame.copy())
        armed = [side for side in (RIGHT, LEFT) if self._cooldown[side] == 0]
        self.on_no_pose()
        if len(self._history) < self.window:
            return []

        fired: list[str] = []
        for side in armed:
            if self.detect(side):
                self._cooldown[side] = self.cooldown_frames
                fired.append(self.event_name(side))
                self._notify(side, frame.frame_id)
        return fired

    def detect(self, side: str) -> bool:
        """Evaluate the wave condition for one side over the current window."""
        if len(self._history) < self.window:
            return False
        wrist_idx, shoulder_idx = _SIDE_JOINTS[side]
        frames = list(self._history)
        for f in frames:
            if not (f.keypoint_ok(wrist_idx, self.min_confidence) and f.keypoint_ok(shoulder_idx, self.min_confidence)):
                return False

        wrists = np.stack([f.points[wrist_idx] for f in frames])
        shoulders = np.stack([f.points[shoulder_idx] for f in frames])
        x_delta = float(wrists[:, 0].max() - wrists[:, 0].min())
        y_above = float(np.mean(shoulders[:, 1] - wrists[:, 1]))
        deep_log(f"[DEEP][GESTURE] wave side={side} x_delta={x_delta:.3f} y_above={y_above:.3f}")
        return y_above >= self.min_y_above_shoulder and x_delta >= self.min_x_delta

    def _notify(self, side: str, frame_id: int) -> None:
        tprint(f"[GESTURE] {side.capitalize()} hand wave detected (frame {frame_id})")
        callback = self._callbacks.get(side)
        if callback is None:
            return
        try:
            callback()
        except Exception as exc:
            tprint(f"[GESTURE][ERROR] {side} wave callback failed: {exc}")
