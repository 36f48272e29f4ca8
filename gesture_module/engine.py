"""Drives registered gesture detectors with the tracked-person stream."""

from __future__ import annotations

from gesture_module.base import GestureDetector
from pose_module.types import PoseFrame
from utils.event_bus import EventBus
from utils.log_utils import tprint
from utils.settings_store import deep_log

GESTURE_TOPIC = "gesture"


class GestureEngine:
    def __init__(
        self,
        detectors: list[GestureDetector] | None = None,
        *,
        model_input_size: tuple[int, int] = (640, 640),
        bus: EventBus | None = None,
    ) -> None:
        self.model_input_size = model_input_size
        self.bus = bus or EventBus()
        self._detectors: list[GestureDetector] = []
        for detector in detectors or []:
            self.register(detector)

    @property
    def detectors(self) -> list[GestureDetector]:
        return list(self._detectors)

    def register(self, detector: GestureDetector) -> None:
        if detector in self._detectors:
            return
        detector.setup(self.model_input_size)
        detector.reset_state()
        self._detectors.append(detector)
        tprint(f"[GESTURE] Registered detector {detector.name}")

    def unregister(self, detector: GestureDetector) -> None:
        if detector in self._detectors:
            self._detectors.remove(detector)

    def reset(self) -> None:
        for detector in self._detectors:
            detector.reset_state()

    def process(self, frame: PoseFrame | None) -> dict[str, list[str]]:
        """Feed one produced frame (``None`` = no tracked person) to every detector.

        Each detector gets its own copy of the frame. Events are published once
        every detector has seen it; subscriber errors are logged.
        """
        fired: dict[str, list[str]] = {}
        if frame is None:
            deep_log("[DEEP][GESTURE] no pose this frame")
            for detector in self._detectors:
                detector.on_no_pose()
            return fired

        for detector in self._detectors:
            events = detector.on_pose(frame.copy())
            if events:
                fired[detector.name] = list(events)

        for name, events in fired.items():
            for event in events:
                self._publish(name, event, frame.frame_id)
        return fired

    def _publish(self, detector: str, event: str, frame_id: int) -> None:
        try:
            self.bus.publish(
                GESTURE_TOPIC,
                {"detector": detector, "event": event, "frame_id": frame_id},
            )
        except Exception as exc:
            tprint(f"[GESTURE][ERROR] Subscriber failed on {event} from {detector}: {exc}")
