"""Gesture classification front door.

Two interchangeable strategies share one contract: ``evaluate`` compares a
single current sample against the mission baseline, ``evaluate_window``
scans a trailing run of buffered samples. Which one the mission runner
uses is a configuration choice (:class:`DetectionMode`).

Thresholds throughout are loose on purpose so a live session stays
responsive; they live in the per-gesture threshold dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from errors import UnknownGestureError
from geometry import distance_2d, midpoint_x, midpoint_y
from gesture_registry import get_gesture_detectors
from gestures import GestureDetector, GestureKind, MissionResult
from pose_types import LEFT_SHOULDER, LEFT_WRIST, NOSE, RIGHT_SHOULDER, RIGHT_WRIST, PoseSample


class DetectionMode(str, Enum):
    SINGLE_FRAME = "single_frame"
    WINDOWED = "windowed"


@dataclass(frozen=True)
class DebugValues:
    nose_x: float
    nose_y: float
    nose_z: float
    shoulder_mid_x: float
    shoulder_mid_y: float
    wrist_dist_left: float
    wrist_dist_right: float
    wrist_mid_y: float
    wrist_gap: float


class GestureClassifier:
    def __init__(self, detectors: Optional[Dict[GestureKind, GestureDetector]] = None):
        self._detectors = detectors if detectors is not None else get_gesture_detectors()

    def detector_for(self, gesture: Union[GestureKind, str]) -> GestureDetector:
        try:
            kind = GestureKind(gesture)
        except ValueError:
            raise UnknownGestureError(f"unknown gesture kind: {gesture!r}") from None
        detector = self._detectors.get(kind)
        if detector is None:
            raise UnknownGestureError(f"no detector registered for {kind.value}")
        return detector

    def evaluate(
        self,
        current: Optional[PoseSample],
        baseline: Optional[PoseSample],
        gesture: Union[GestureKind, str],
    ) -> bool:
        detector = self.detector_for(gesture)
        if current is None or baseline is None:
            return False
        if not current.valid or not baseline.valid:
            return False
        return detector.evaluate(current, baseline)

    def evaluate_window(self, gesture: Union[GestureKind, str], frames: Sequence[PoseSample]) -> MissionResult:
        detector = self.detector_for(gesture)
        return detector.evaluate_window(list(frames))


def debug_values(sample: PoseSample) -> Optional[DebugValues]:
    needed = (NOSE, LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_WRIST, RIGHT_WRIST)
    if not sample.has(*needed):
        return None
    nose = sample.get(NOSE)
    ls, rs = sample.get(LEFT_SHOULDER), sample.get(RIGHT_SHOULDER)
    lw, rw = sample.get(LEFT_WRIST), sample.get(RIGHT_WRIST)
    return DebugValues(
        nose_x=nose.x,
        nose_y=nose.y,
        nose_z=nose.z,
        shoulder_mid_x=midpoint_x(ls, rs),
        shoulder_mid_y=midpoint_y(ls, rs),
        wrist_dist_left=distance_2d(lw, ls),
        wrist_dist_right=distance_2d(rw, rs),
        wrist_mid_y=midpoint_y(lw, rw),
        wrist_gap=abs(lw.x - rw.x),
    )
