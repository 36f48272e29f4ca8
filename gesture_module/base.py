"""Contract every gesture sink implements."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pose_module.types import PoseFrame


class GestureDetector(ABC):
    """A per-frame consumer of the tracked person's pose.

    The engine calls exactly one of ``on_pose``/``on_no_pose`` per produced frame,
    in strictly increasing ``frame_id`` order. Detectors keep their own history
    and never raise on malformed frames.
    """

    def setup(self, model_input_size: tuple[int, int]) -> None:
        """Optional hook called once on registration."""

    @abstractmethod
    def on_pose(self, frame: PoseFrame) -> list[str]:
        """Consume one frame and return the names of any events fired."""

    def on_no_pose(self) -> None:
        """Called when the frame had no tracked person."""

    def reset_state(self) -> None:
        """Drop all history and cooldowns."""

    @property
    def name(self) -> str:
        return type(self).__name__
