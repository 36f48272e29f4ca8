from gesture_module.base import GestureDetector
from gesture_module.engine import GESTURE_TOPIC, GestureEngine
from gesture_module.hand_wave import HandWaveDetector

__all__ = [
    "GESTURE_TOPIC",
    "GestureDetector",
    "GestureEngine",
    "HandWaveDetector",
]
