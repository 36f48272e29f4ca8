"""Decode-stage error types."""

from __future__ import annotations


class PoseDecodeError(Exception):
    """Base class for failures inside the pose decode stage."""


class ShapeUnrecognized(PoseDecodeError):
    """Raised when a tensor's rank/dimensions match no known output layout."""

    def __init__(self, shape: tuple[int, ...], reason: str = "") -> None:
        self.shape = tuple(int(d) for d in shape)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Unrecognized pose output shape {list(self.shape)}{detail}")
