"""Decode raw multi-person pose-model output into skeletons."""

from pose_module.candidates import decode_candidates, select_best
from pose_module.config import PoseSettings, WaveSettings, load_pose_settings
from pose_module.errors import PoseDecodeError, ShapeUnrecognized
from pose_module.keypoints import extract_keypoints, normalize_keypoints
from pose_module.nms import iou, suppress
from pose_module.pipeline import FrameReport, PoseDecoder, PosePipeline, PoseResult
from pose_module.tensor_layout import AxisLayout, RawTensor, TensorView, resolve_layout
from pose_module.types import (
    COCO17_NAMES,
    SKELETON_EDGES,
    DetectionCandidate,
    Keypoint,
    KeypointIndex,
    PoseDetection,
    PoseFrame,
)

__all__ = [
    "AxisLayout",
    "COCO17_NAMES",
    "DetectionCandidate",
    "FrameReport",
    "Keypoint",
    "KeypointIndex",
    "PoseDecodeError",
    "PoseDecoder",
    "PoseDetection",
    "PoseFrame",
    "PosePipeline",
    "PoseResult",
    "PoseSettings",
    "RawTensor",
    "SKELETON_EDGES",
    "ShapeUnrecognized",
    "TensorView",
    "WaveSettings",
    "decode_candidates",
    "extract_keypoints",
    "iou",
    "load_pose_settings",
    "normalize_keypoints",
    "resolve_layout",
    "select_best",
    "suppress",
]
