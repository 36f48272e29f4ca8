"""Expand a candidate into its 17 COCO keypoints."""

from __future__ import annotations

import numpy as np

from pose_module.tensor_layout import TensorView
from pose_module.types import (
    INVALID_COORD,
    NUM_KEYPOINTS,
    DetectionCandidate,
    Keypoint,
    PoseDetection,
    PoseFrame,
)


def extract_keypoints(view: TensorView, candidate_index: int, keypoint_threshold: float) -> tuple[Keypoint, ...]:
    """Read (x, y, score) triplets; low-score joints become the (-1, -1) sentinel with score 0."""
    keypoints: list[Keypoint] = []
    for k in range(NUM_KEYPOINTS):
        x, y, score = view.keypoint_fields(candidate_index, k)
        if score >= keypoint_threshold:
            keypoints.append(Keypoint(x, y, score))
        else:
            keypoints.append(Keypoint.invalid())
    return tuple(keypoints)


def build_detection(
    view: TensorView, candidate: DetectionCandidate, keypoint_threshold: float
) -> PoseDetection:
    return PoseDetection(
        candidate=candidate,
        keypoints=extract_keypoints(view, candidate.source_index, keypoint_threshold),
    )


def normalize_keypoints(
    keypoints: tuple[Keypoint, ...],
    model_input_size: tuple[int, int],
    frame_id: int,
) -> PoseFrame:
    """Scale model-space keypoints to [0, 1]; sentinel joints are left untouched."""
    width, height = model_input_size
    points = np.full((NUM_KEYPOINTS, 2), INVALID_COORD, dtype=np.float32)
    confidences = np.zeros(NUM_KEYPOINTS, dtype=np.float32)
    for i, kp in enumerate(keypoints):
        confidences[i] = kp.score
        if kp.x >= 0.0 and kp.y >= 0.0:
            points[i] = (kp.x / width, kp.y / height)
    return PoseFrame(points=points, confidences=confidences, frame_id=frame_id)
