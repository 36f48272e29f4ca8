"""Axis-layout resolution and read access for raw pose-model output tensors.

YOLOv8-pose style exports produce ``[1, C, N]`` or ``[1, N, C]`` (C >= 56:
4 box params + 1 confidence + 17 * 3 keypoint fields), and some runtimes add a
fourth axis. The layout is resolved once per tensor into an ``AxisLayout``;
every read then goes through ``AxisLayout.index`` so axis-guessing lives in one
place.

Known approximation: for 4-D tensors any axis that is neither the channel nor
the candidate axis is read at index 0, whatever its size (an empty axis is
rejected).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from pose_module.errors import ShapeUnrecognized

BOX_FIELDS = 4
CONFIDENCE_CHANNEL = 4
KEYPOINT_OFFSET = 5
KEYPOINT_FIELDS = 3
MIN_CHANNELS = BOX_FIELDS + 1 + 17 * KEYPOINT_FIELDS  # 56
MIN_CANDIDATES_4D = 1000


@dataclass(frozen=True, eq=False)
class RawTensor:
    """Immutable float32 buffer with a 3-D or 4-D shape."""

    data: np.ndarray

    @classmethod
    def from_array(cls, array) -> "RawTensor":
        arr = np.array(array, dtype=np.float32, copy=True)
        arr.setflags(write=False)
        return cls(arr)

    @classmethod
    def from_buffer(cls, buffer: Sequence[float], shape: Sequence[int]) -> "RawTensor":
        flat = np.asarray(buffer, dtype=np.float32).ravel()
        dims = tuple(int(d) for d in shape)
        expected = int(np.prod(dims))
        if any(d < 0 for d in dims) or flat.size != expected:
            raise ShapeUnrecognized(
                dims, f"buffer holds {flat.size} elements, shape needs {expected}"
            )
        return cls.from_array(flat.reshape(dims))

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(d) for d in self.data.shape)

    @property
    def rank(self) -> int:
        return self.data.ndim


@dataclass(frozen=True)
class AxisLayout:
    rank: int
    channel_axis: int
    candidate_axis: int
    channel_count: int
    candidate_count: int

    def index(self, channel: int, candidate: int | slice) -> tuple:
        """Full index tuple for (channel, candidate); unused axes are pinned to 0."""
        idx: list = [0] * self.rank
        idx[self.channel_axis] = channel
        idx[self.candidate_axis] = candidate
        return tuple(idx)


def _resolve_3d(shape: tuple[int, ...]) -> AxisLayout:
    batch, d1, d2 = shape
    if batch != 1:
        raise ShapeUnrecognized(shape, "batch axis must be 1")
    ok1, ok2 = d1 >= MIN_CHANNELS, d2 >= MIN_CHANNELS
    if not (ok1 or ok2):
        raise ShapeUnrecognized(shape, f"no axis with >= {MIN_CHANNELS} channels")
    # With both axes wide enough, the smaller one holds the channels.
    if ok1 and (not ok2 or d1 <= d2):
        channel_axis, candidate_axis = 1, 2
    else:
        channel_axis, candidate_axis = 2, 1
    if shape[candidate_axis] < 1:
        raise ShapeUnrecognized(shape, "no candidates")
    return AxisLayout(3, channel_axis, candidate_axis, shape[channel_axis], shape[candidate_axis])


def _resolve_4d(shape: tuple[int, ...]) -> AxisLayout:
    channel_axis = next((i for i, d in enumerate(shape) if d >= MIN_CHANNELS), -1)
    if channel_axis < 0:
        raise ShapeUnrecognized(shape, f"no axis with >= {MIN_CHANNELS} channels")
    candidate_axis = next(
        (i for i, d in enumerate(shape) if i != channel_axis and d >= MIN_CANDIDATES_4D), -1
    )
    if candidate_axis < 0:
        raise ShapeUnrecognized(shape, f"no axis with >= {MIN_CANDIDATES_4D} candidates")
    if any(d == 0 for i, d in enumerate(shape) if i not in (channel_axis, candidate_axis)):
        raise ShapeUnrecognized(shape, "pinned axis has size 0")
    return AxisLayout(4, channel_axis, candidate_axis, shape[channel_axis], shape[candidate_axis])


def resolve_layout(tensor: RawTensor) -> AxisLayout:
    """Decide which axes hold channels and candidates, or raise ShapeUnrecognized."""
    shape = tensor.shape
    if tensor.rank == 3:
        return _resolve_3d(shape)
    if tensor.rank == 4:
        return _resolve_4d(shape)
    raise ShapeUnrecognized(shape, f"rank {tensor.rank} not supported")


class TensorView:
    """Read-only (channel, candidate) accessor over a resolved tensor."""

    def __init__(self, tensor: RawTensor, layout: AxisLayout | None = None) -> None:
        self.tensor = tensor
        self.layout = layout or resolve_layout(tensor)

    def read(self, channel: int, candidate: int) -> float:
        return float(self.tensor.data[self.layout.index(channel, candidate)])

    def row(self, channel: int) -> np.ndarray:
        """All candidates' values for one channel, in candidate index order."""
        return self.tensor.data[self.layout.index(channel, slice(None))]

    def keypoint_fields(self, candidate: int, keypoint: int) -> tuple[float, float, float]:
        base = KEYPOINT_OFFSET + keypoint * KEYPOINT_FIELDS
        return (
            self.read(base, candidate),
            self.read(base + 1, candidate),
            self.read(base + 2, candidate),
        )
