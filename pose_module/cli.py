"""CLI: decode saved pose-model output tensors and run the wave detector over them."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Literal

import numpy as np

from gesture_module.engine import GestureEngine
from gesture_module.hand_wave import HandWaveDetector
from pose_module.config import PoseSettings, load_pose_settings
from pose_module.pipeline import FrameReport, PoseDecoder, PosePipeline
from pose_module.tensor_layout import RawTensor
from utils.settings_store import set_deep_logging

OutputFormat = Literal["text", "json"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode YOLO pose output tensors (.npy) into skeletons and gestures."
    )
    parser.add_argument("input", help="Path to a .npy file with one raw output tensor.")
    parser.add_argument(
        "--sequence",
        action="store_true",
        help="Treat the leading axis of the array as consecutive frames.",
    )
    parser.add_argument("--settings", default=None, help="Path to a pose settings JSON file.")
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable deep tracing.")
    return parser


def _load_frames(path: str, sequence: bool) -> list[RawTensor]:
    array = np.load(path, allow_pickle=False)
    if sequence:
        if array.ndim == 0:
            raise ValueError(f"{path}: a 0-d array has no frames to iterate")
        return [RawTensor.from_array(frame) for frame in array]
    return [RawTensor.from_array(array)]


def build_pipeline(settings: PoseSettings) -> PosePipeline:
    engine = GestureEngine(
        [HandWaveDetector.from_settings(settings.wave)],
        model_input_size=settings.model_input_size,
    )
    return PosePipeline(PoseDecoder(settings), engine)


def _render_text(reports: list[FrameReport]) -> str:
    lines: list[str] = []
    for report in reports:
        result = report.result
        lines.append(f"frame {result.frame_id}: {len(result.detections)} people")
        for det in result.detections:
            c = det.candidate
            lines.append(
                f"  #{c.source_index} conf={c.confidence:.2f} "
                f"box=({c.x:.1f}, {c.y:.1f}, {c.width:.1f}, {c.height:.1f}) "
                f"keypoints={det.valid_count}/17"
            )
        for detector, events in report.gestures.items():
            for event in events:
                lines.append(f"  gesture {detector}: {event}")
    return "\n".join(lines)


def _render_json(reports: list[FrameReport]) -> str:
    payload = {
        "frames": [
            {**report.result.to_dict(), "gestures": report.gestures} for report in reports
        ]
    }
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_deep_logging(True)

    try:
        settings = load_pose_settings(args.settings)
        frames = _load_frames(args.input, args.sequence)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    pipeline = build_pipeline(settings)
    reports = [pipeline.step(tensor) for tensor in frames]

    fmt: OutputFormat = args.format
    if fmt == "json":
        print(_render_json(reports))
    else:
        print(_render_text(reports))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
