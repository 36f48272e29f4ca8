"""Decode stage: raw tensor -> multi-person detections + tracked single pose.

Two independent paths share one resolved layout:

    candidates -> NMS -> keypoints        (multi-person display)
    best candidate -> keypoints -> [0,1]  (tracked person for gestures)

The tracked person is the global confidence maximum and may differ from every
NMS survivor; it is re-chosen each frame with no identity continuity.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pose_module.candidates import decode_candidates, select_best
from pose_module.config import PoseSettings
from pose_module.errors import ShapeUnrecognized
from pose_module.keypoints import build_detection, extract_keypoints, normalize_keypoints
from pose_module.nms import suppress
from pose_module.tensor_layout import AxisLayout, RawTensor, TensorView, resolve_layout
from pose_module.types import PoseDetection, PoseFrame
from utils.log_utils import log_once
from utils.settings_store import deep_log

if TYPE_CHECKING:
    from gesture_module.engine import GestureEngine


@dataclass
class PoseResult:
    detections: list[PoseDetection] = field(default_factory=list)
    tracked: PoseFrame | None = None
    layout: AxisLayout | None = None
    frame_id: int = 0

    def to_dict(self) -> dict:
        return {
            "frame_id": self.frame_id,
            "detections": [d.to_dict() for d in self.detections],
            "tracked": self.tracked.to_dict() if self.tracked is not None else None,
        }


class PoseDecoder:
    """Stateless apart from the frame counter; safe to rebuild when settings change."""

    def __init__(self, settings: PoseSettings | None = None) -> None:
        self.settings = settings or PoseSettings()
        self._frame_ids = itertools.count(1)

    def decode(self, tensor: RawTensor, frame_id: int | None = None) -> PoseResult:
        fid = next(self._frame_ids) if frame_id is None else int(frame_id)
        try:
            layout = resolve_layout(tensor)
        except ShapeUnrecognized as exc:
            log_once(f"unrecognized:{exc.shape}", f"[POSE][WARN] {exc}")
            return PoseResult(frame_id=fid)

        log_once(
            f"layout:{tensor.shape}",
            f"[POSE] Output shape {list(tensor.shape)} -> channels on axis {layout.channel_axis}, "
            f"{layout.candidate_count} candidates on axis {layout.candidate_axis}",
        )
        view = TensorView(tensor, layout)
        return PoseResult(
            detections=self.detect_people(view),
            tracked=self.track_best(view, fid),
            layout=layout,
            frame_id=fid,
        )

    def detect_people(self, view: TensorView) -> list[PoseDetection]:
        s = self.settings
        candidates = decode_candidates(view, s.conf_threshold)
        kept = suppress(candidates, s.iou_threshold, s.max_detections)
        by_index = {c.source_index: c for c in candidates}
        return [build_detection(view, by_index[i], s.keypoint_threshold) for i in kept]

    def track_best(self, view: TensorView, frame_id: int) -> PoseFrame | None:
        s = self.settings
        best = select_best(view, s.conf_threshold)
        if best is None:
            deep_log(f"[DEEP][POSE] frame {frame_id}: no candidate >= {s.conf_threshold}")
            return None
        keypoints = extract_keypoints(view, best, s.keypoint_threshold)
        return normalize_keypoints(keypoints, s.model_input_size, frame_id)


@dataclass
class FrameReport:
    result: PoseResult
    gestures: dict[str, list[str]]


class PosePipeline:
    """Decode a tensor and hand the tracked pose to the gesture engine."""

    def __init__(self, decoder: PoseDecoder, engine: "GestureEngine") -> None:
        self.decoder = decoder
        self.engine = engine

    def step(self, tensor: RawTensor, frame_id: int | None = None) -> FrameReport:
        result = self.decoder.decode(tensor, frame_id)
        gestures = self.engine.process(result.tracked)
        return FrameReport(result=result, gestures=gestures)

    def reset(self) -> None:
        self.engine.reset()
