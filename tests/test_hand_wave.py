"""Tests for HandWaveDetector (window, trigger, cooldown, reset)."""

from unittest.mock import Mock

import numpy as np

from gesture_module.hand_wave import HandWaveDetector
from pose_module.types import KeypointIndex, PoseFrame

WINDOW = 30


def _frame(frame_id, right_wrist, left_wrist=(0.4, 0.6), conf=0.9):
    points = np.full((17, 2), 0.5, dtype=np.float32)
    points[KeypointIndex.LEFT_SHOULDER] = (0.4, 0.3)
    points[KeypointIndex.RIGHT_SHOULDER] = (0.6, 0.3)
    points[KeypointIndex.LEFT_WRIST] = left_wrist
    points[KeypointIndex.RIGHT_WRIST] = right_wrist
    return PoseFrame(points=points, confidences=np.full(17, conf, dtype=np.float32), frame_id=frame_id)


def _sweep_x(i):
    """Wrist x sweeping linearly 0.1 -> 0.4 over one window, then repeating."""
    return 0.1 + 0.3 * (i % WINDOW) / (WINDOW - 1)


def _wave_frame(i):
    return _frame(i, right_wrist=(_sweep_x(i), 0.2))


def _feed(detector, frames):
    """Feed frames; return {frame_id: events} for frames that fired."""
    fired = {}
    for frame in frames:
        events = detector.on_pose(frame)
        if events:
            fired[frame.frame_id] = events
    return fired


class TestHandWaveDetector:
    """Test suite for HandWaveDetector."""

    def test_stationary_wrist_never_triggers(self):
        """A raised but still wrist does not count as a wave."""
        detector = HandWaveDetector()
        fired = _feed(detector, [_frame(i, right_wrist=(0.6, 0.2)) for i in range(1, 2 * WINDOW)])
        assert fired == {}

    def test_partial_window_does_not_trigger(self):
        """No wave fires before the history window is full."""
        detector = HandWaveDetector()
        assert _feed(detector, [_wave_frame(i) for i in range(WINDOW - 1)]) == {}
        assert detector.history_size == WINDOW - 1

    def test_sweep_triggers_once_then_cools_down(self):
        """A sweep fires once, stays silent for the cooldown, then fires again."""
        detector = HandWaveDetector(cooldown_frames=30)
        fired = _feed(detector, [_wave_frame(i) for i in range(WINDOW + 30)])

        # Fires when the window fills, then stays silent for 30 frames.
        assert fired == {WINDOW - 1: ["right_hand_wave"]}

        more = _feed(detector, [_wave_frame(WINDOW + 30)])
        assert more == {WINDOW + 30: ["right_hand_wave"]}

    def test_wrist_below_shoulder_does_not_trigger(self):
        """Sweeping below the shoulder is not a wave."""
        detector = HandWaveDetector()
        frames = [_frame(i, right_wrist=(_sweep_x(i), 0.32)) for i in range(WINDOW)]
        assert _feed(detector, frames) == {}

    def test_single_invalid_sample_blocks_until_it_leaves_window(self):
        """One invalid sample blocks firing until it slides out of the window."""
        detector = HandWaveDetector(cooldown_frames=0)
        frames = [_wave_frame(i) for i in range(WINDOW + 10)]
        frames[5] = _frame(5, right_wrist=(_sweep_x(5), 0.2), conf=0.1)
        fired = _feed(detector, frames)

        assert min(fired) == WINDOW + 5

    def test_sentinel_position_is_never_a_real_coordinate(self):
        """Sentinel coordinates never count as a valid wrist position."""
        detector = HandWaveDetector()
        frames = [_wave_frame(i) for i in range(WINDOW)]
        frames[10] = _frame(10, right_wrist=(-1.0, -1.0))
        assert _feed(detector, frames) == {}

    def test_both_sides_can_fire_same_frame(self):
        """Left and right waves can fire on the same frame."""
        detector = HandWaveDetector()
        frames = [
            _frame(i, right_wrist=(_sweep_x(i), 0.2), left_wrist=(_sweep_x(i), 0.1))
            for i in range(WINDOW)
        ]
        fired = _feed(detector, frames)
        assert fired == {WINDOW - 1: ["right_hand_wave", "left_hand_wave"]}

    def test_reset_requires_full_new_window(self):
        """After reset a full new window is needed before firing."""
        detector = HandWaveDetector()
        _feed(detector, [_wave_frame(i) for i in range(WINDOW)])
        detector.reset_state()

        assert detector.history_size == 0
        assert detector.cooldown("right") == 0
        assert _feed(detector, [_wave_frame(i) for i in range(100, 100 + WINDOW - 1)]) == {}
        assert _feed(detector, [_wave_frame(100 + WINDOW - 1)]) == {
            100 + WINDOW - 1: ["right_hand_wave"]
        }

    def test_no_pose_ticks_cooldown_and_keeps_history(self):
        """Frames with no pose tick the cooldown but keep the history."""
        detector = HandWaveDetector(cooldown_frames=10)
        _feed(detector, [_wave_frame(i) for i in range(WINDOW)])
        assert detector.cooldown("right") == 10

        for _ in range(10):
            detector.on_no_pose()
        assert detector.cooldown("right") == 0
        assert detector.history_size == WINDOW

        detector.on_no_pose()
        assert detector.cooldown("right") == 0
        assert _feed(detector, [_wave_frame(WINDOW)]) == {WINDOW: ["right_hand_wave"]}

    def test_history_keeps_copies_of_reused_frames(self):
        """Mutating a frame after handing it over does not alter the history."""
        detector = HandWaveDetector()
        frame = _wave_frame(0)
        fired = []
        for i in range(WINDOW):
            frame.points[KeypointIndex.RIGHT_WRIST] = (_sweep_x(i), 0.2)
            frame.frame_id = i
            fired.extend(detector.on_pose(frame))
        assert fired == ["right_hand_wave"]

    def test_history_never_exceeds_window(self):
        """History is bounded by the window length."""
        detector = HandWaveDetector(history_length=12)
        _feed(detector, [_frame(i, right_wrist=(0.6, 0.2)) for i in range(50)])
        assert detector.history_size == 12

    def test_window_has_minimum_length(self):
        """Short history lengths are raised to the minimum window."""
        assert HandWaveDetector(history_length=2).window == 5

    def test_callbacks_invoked_and_errors_contained(self):
        """Wave callbacks run and their exceptions are logged, not raised."""
        right = Mock(side_effect=RuntimeError("listener broke"))
        left = Mock()
        detector = HandWaveDetector(on_right_wave=right, on_left_wave=left)

        fired = _feed(detector, [_wave_frame(i) for i in range(WINDOW)])

        assert fired == {WINDOW - 1: ["right_hand_wave"]}
        right.assert_called_once_with()
        left.assert_not_called()

    def test_name_defaults_to_class_name(self):
        """The detector name is its class name."""
        assert HandWaveDetector().name == "HandWaveDetector"
