from dataclasses import dataclass
from typing import Optional

from geometry import midpoint_y
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_SHOULDER, LEFT_WRIST, RIGHT_SHOULDER, RIGHT_WRIST, PoseSample


@dataclass
class CatchThresholds:
    max_wrist_gap: float = 0.15


class CatchDetector(GestureDetector):
    """Both hands together and raised above the shoulder line.

    Posture only; the baseline is not consulted.
    """

    kind = GestureKind.CATCH
    required_landmarks = [LEFT_WRIST, RIGHT_WRIST, LEFT_SHOULDER, RIGHT_SHOULDER]

    def __init__(self, thresholds: Optional[CatchThresholds] = None):
        self.thresholds = thresholds or CatchThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        if not current.has(*self.required_landmarks):
            return False
        left_wrist = current.get(LEFT_WRIST)
        right_wrist = current.get(RIGHT_WRIST)
        gap = abs(left_wrist.x - right_wrist.x)
        wrist_y = midpoint_y(left_wrist, right_wrist)
        shoulder_y = midpoint_y(current.get(LEFT_SHOULDER), current.get(RIGHT_SHOULDER))
        return gap < self.thresholds.max_wrist_gap and wrist_y < shoulder_y
