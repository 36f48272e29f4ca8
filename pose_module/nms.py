"""Confidence-ordered non-max suppression over decoded candidates."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from pose_module.types import DetectionCandidate
from utils.settings_store import deep_log


def iou(a: DetectionCandidate, b: DetectionCandidate) -> float:
    """Axis-aligned intersection-over-union; a zero-area union gives 0."""
    ax1, ay1, ax2, ay2 = a.box
    bx1, by1, bx2, by2 = b.box
    inter_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    inter_h = max(0.0, min(ay2, by2) - max(ay1, by1))
    inter = inter_w * inter_h
    union = a.area + b.area - inter
    if union <= 0.0:
        return 0.0
    return inter / union


def _iou_against(boxes: np.ndarray, areas: np.ndarray, ref: int, others: np.ndarray) -> np.ndarray:
    x1 = np.maximum(boxes[ref, 0], boxes[others, 0])
    y1 = np.maximum(boxes[ref, 1], boxes[others, 1])
    x2 = np.minimum(boxes[ref, 2], boxes[others, 2])
    y2 = np.minimum(boxes[ref, 3], boxes[others, 3])
    inter = np.clip(x2 - x1, 0.0, None) * np.clip(y2 - y1, 0.0, None)
    union = areas[ref] + areas[others] - inter
    out = np.zeros_like(inter)
    np.divide(inter, union, out=out, where=union > 0.0)
    return out


def suppress(
    candidates: Sequence[DetectionCandidate], iou_threshold: float, max_kept: int
) -> list[int]:
    """Greedy NMS. Returns kept ``source_index`` values, highest confidence first.

    Equal confidences keep their input order. A candidate is dropped when its IoU
    with an already kept box is strictly greater than ``iou_threshold``.
    """
    if not candidates or max_kept <= 0:
        return []

    order = sorted(range(len(candidates)), key=lambda i: -candidates[i].confidence)
    boxes = np.array([candidates[i].box for i in order], dtype=np.float64)
    areas = np.array([candidates[i].area for i in order], dtype=np.float64)
    suppressed = np.zeros(len(order), dtype=bool)

    kept: list[int] = []
    for pos in range(len(order)):
        if suppressed[pos]:
            continue
        kept.append(candidates[order[pos]].source_index)
        if len(kept) >= max_kept:
            break
        later = np.flatnonzero(~suppressed[pos + 1 :]) + pos + 1
        if later.size:
            overlaps = _iou_against(boxes, areas, pos, later)
            suppressed[later[overlaps > iou_threshold]] = True

    deep_log(f"[DEEP][NMS] candidates={len(candidates)} kept={kept}")
    return kept
