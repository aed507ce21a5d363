from dataclasses import dataclass
from typing import Optional

from geometry import midpoint_y
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_WRIST, RIGHT_WRIST, PoseSample


@dataclass
class ClapThresholds:
    max_wrist_gap: float = 0.1
    # Roughly hip height in a standard webcam framing.
    max_wrist_y: float = 0.65


class ClapDetector(GestureDetector):
    kind = GestureKind.CLAP
    required_landmarks = [LEFT_WRIST, RIGHT_WRIST]

    def __init__(self, thresholds: Optional[ClapThresholds] = None):
        self.thresholds = thresholds or ClapThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        if not current.has(*self.required_landmarks):
            return False
        left_wrist = current.get(LEFT_WRIST)
        right_wrist = current.get(RIGHT_WRIST)
        gap = abs(left_wrist.x - right_wrist.x)
        return gap < self.thresholds.max_wrist_gap and midpoint_y(left_wrist, right_wrist) < self.thresholds.max_wrist_y
