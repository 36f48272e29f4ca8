"""Write a synthetic sequence of YOLO pose output tensors showing a right-hand wave.

The result has shape [frames, 1, 56, candidates] and can be replayed with:

    python main.py wave.npy --sequence

Each frame holds one confident person (plus a weaker duplicate box that NMS
should drop) whose right wrist sweeps left/right above the shoulder.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

# Ensure project root is on path when run as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pose_module.tensor_layout import KEYPOINT_FIELDS, KEYPOINT_OFFSET, MIN_CHANNELS
from pose_module.types import KeypointIndex, NUM_KEYPOINTS

# Standing pose in model pixels (640x640 input), COCO order.
_BASE_POSE = np.array(
    [
        [320, 120], [310, 110], [330, 110], [300, 115], [340, 115],
        [280, 180], [360, 180], [260, 250], [380, 250], [250, 320], [400, 320],
        [290, 330], [350, 330], [290, 430], [350, 430], [290, 530], [350, 530],
    ],
    dtype=np.float32,
)


def person_column(pose: np.ndarray, confidence: float, kp_score: float = 0.9) -> np.ndarray:
    column = np.zeros(MIN_CHANNELS, dtype=np.float32)
    x1, y1 = pose.min(axis=0)
    x2, y2 = pose.max(axis=0)
    column[:5] = [(x1 + x2) / 2, (y1 + y2) / 2, x2 - x1, y2 - y1, confidence]
    for k in range(NUM_KEYPOINTS):
        base = KEYPOINT_OFFSET + k * KEYPOINT_FIELDS
        column[base : base + 3] = [pose[k, 0], pose[k, 1], kp_score]
    return column


def wave_sequence(frames: int, candidates: int, period: int = 20, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    out = np.zeros((frames, 1, MIN_CHANNELS, candidates), dtype=np.float32)
    out[:, 0, 4, :] = rng.uniform(0.0, 0.1, size=(frames, candidates))
    shoulder = _BASE_POSE[KeypointIndex.RIGHT_SHOULDER]
    for f in range(frames):
        pose = _BASE_POSE.copy()
        phase = np.sin(2.0 * np.pi * f / period)
        pose[KeypointIndex.RIGHT_ELBOW] = [shoulder[0] + 50, shoulder[1] - 40]
        pose[KeypointIndex.RIGHT_WRIST] = [shoulder[0] + 60 + 80 * phase, shoulder[1] - 110]
        out[f, 0, :, 3] = person_column(pose, 0.92)
        out[f, 0, :, 4] = person_column(pose + 4.0, 0.55)
    return out


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("output", type=Path, help="Destination .npy path.")
    parser.add_argument("--frames", type=int, default=90)
    parser.add_argument("--candidates", type=int, default=256)
    args = parser.parse_args(argv)

    if args.candidates < 5:
        print("Error: need at least 5 candidates", file=sys.stderr)
        return 1
    data = wave_sequence(args.frames, args.candidates)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    np.save(args.output, data)
    print(f"[SCRIPT] Wrote {list(data.shape)} to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
