"""Candidate decoding and best-single-person selection."""

from __future__ import annotations

import numpy as np

from pose_module.tensor_layout import CONFIDENCE_CHANNEL, TensorView
from pose_module.types import DetectionCandidate


def _confidence_row(view: TensorView) -> np.ndarray:
    return np.asarray(view.row(CONFIDENCE_CHANNEL), dtype=np.float32)


def decode_candidates(view: TensorView, confidence_threshold: float) -> list[DetectionCandidate]:
    """Return every candidate whose confidence clears the threshold.

    Boxes are stored as center-x, center-y, width, height in channels 0-3 and
    converted to top-left form. Output follows candidate index order.
    """
    conf = _confidence_row(view)
    keep = np.flatnonzero(conf >= confidence_threshold)
    if keep.size == 0:
        return []

    cx = view.row(0)[keep]
    cy = view.row(1)[keep]
    w = view.row(2)[keep]
    h = view.row(3)[keep]
    scores = np.minimum(conf[keep], 1.0)

    return [
        DetectionCandidate(
            source_index=int(i),
            confidence=float(s),
            x=float(x - bw / 2.0),
            y=float(y - bh / 2.0),
            width=float(bw),
            height=float(bh),
        )
        for i, s, x, y, bw, bh in zip(keep, scores, cx, cy, w, h)
    ]


def select_best(view: TensorView, confidence_threshold: float) -> int | None:
    """Index of the highest-confidence candidate at or above the threshold.

    No suppression is applied; on exact ties the lowest index wins. ``None`` when
    nothing clears the threshold.
    """
    conf = _confidence_row(view)
    passing = conf >= confidence_threshold
    if not passing.any():
        return None
    masked = np.where(passing, conf, -np.inf)
    return int(np.argmax(masked))
