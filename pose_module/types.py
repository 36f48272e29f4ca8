"""Value types shared by the decode stage and the gesture detectors.

Coordinates in ``DetectionCandidate``/``Keypoint``/``PoseDetection`` are model-space
pixels. ``PoseFrame`` carries one tracked person normalized to [0, 1] with the
origin at the top-left corner.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

NUM_KEYPOINTS = 17
INVALID_COORD = -1.0

COCO17_NAMES = (
    "nose",
    "left_eye",
    "right_eye",
    "left_ear",
    "right_ear",
    "left_shoulder",
    "right_shoulder",
    "left_elbow",
    "right_elbow",
    "left_wrist",
    "right_wrist",
    "left_hip",
    "right_hip",
    "left_knee",
    "right_knee",
    "left_ankle",
    "right_ankle",
)


class KeypointIndex:
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


SKELETON_EDGES: tuple[tuple[int, int], ...] = (
    (5, 6),  # shoulders
    (5, 7), (7, 9),  # left arm
    (6, 8), (8, 10),  # right arm
    (11, 12),  # hips
    (5, 11), (6, 12),  # torso
    (11, 13), (13, 15),  # left leg
    (12, 14), (14, 16),  # right leg
    (1, 0), (2, 0), (1, 3), (2, 4),  # head
)


@dataclass(frozen=True)
class DetectionCandidate:
    """One decoded candidate; box is top-left + size in model-space pixels."""

    source_index: int
    confidence: float
    x: float
    y: float
    width: float
    height: float

    @property
    def box(self) -> tuple[float, float, float, float]:
        """(x1, y1, x2, y2) corners."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def to_dict(self) -> dict:
        return {
            "source_index": self.source_index,
            "confidence": self.confidence,
            "box": [self.x, self.y, self.width, self.height],
        }


@dataclass(frozen=True)
class Keypoint:
    x: float
    y: float
    score: float

    @classmethod
    def invalid(cls) -> "Keypoint":
        return cls(INVALID_COORD, INVALID_COORD, 0.0)

    @property
    def is_valid(self) -> bool:
        return not (self.x == INVALID_COORD and self.y == INVALID_COORD)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "score": self.score}


@dataclass(frozen=True)
class PoseDetection:
    """17 COCO-ordered keypoints tied to the candidate they were read from."""

    candidate: DetectionCandidate
    keypoints: tuple[Keypoint, ...]

    def points(self) -> np.ndarray:
        return np.array([[kp.x, kp.y] for kp in self.keypoints], dtype=np.float32)

    def scores(self) -> np.ndarray:
        return np.array([kp.score for kp in self.keypoints], dtype=np.float32)

    @property
    def valid_count(self) -> int:
        return sum(1 for kp in self.keypoints if kp.is_valid)

    def segments(self) -> Iterator[tuple[tuple[float, float], tuple[float, float]]]:
        """Yield skeleton edges whose two endpoints are both valid."""
        for a, b in SKELETON_EDGES:
            ka, kb = self.keypoints[a], self.keypoints[b]
            if ka.is_valid and kb.is_valid:
                yield (ka.x, ka.y), (kb.x, kb.y)

    def to_dict(self) -> dict:
        return {
            **self.candidate.to_dict(),
            "keypoints": {
                name: kp.to_dict() for name, kp in zip(COCO17_NAMES, self.keypoints)
            },
        }


@dataclass(eq=False)
class PoseFrame:
    """A single tracked person for one produced frame.

    ``points`` is (17, 2) float32 normalized to [0, 1]; invalid joints keep the
    (-1, -1) sentinel. The gesture engine hands each detector its own ``copy()``.
    """

    points: np.ndarray
    confidences: np.ndarray
    frame_id: int

    def __post_init__(self) -> None:
        self.points = np.asarray(self.points, dtype=np.float32).reshape(NUM_KEYPOINTS, 2)
        self.confidences = np.asarray(self.confidences, dtype=np.float32).reshape(NUM_KEYPOINTS)

    def copy(self) -> "PoseFrame":
        return PoseFrame(
            points=self.points.copy(),
            confidences=self.confidences.copy(),
            frame_id=self.frame_id,
        )

    def keypoint_ok(self, index: int, min_confidence: float) -> bool:
        """True when the joint is present: score >= threshold and not the sentinel."""
        if index < 0 or index >= NUM_KEYPOINTS:
            return False
        if float(self.confidences[index]) < min_confidence:
            return False
        x, y = self.points[index]
        return bool(x >= 0.0 and y >= 0.0)

    def to_dict(self) -> dict:
        return {
            "frame_id": self.frame_id,
            "points": self.points.tolist(),
            "confidences": self.confidences.tolist(),
        }
