from dataclasses import dataclass
from typing import Optional

from geometry import distance_2d
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_WRIST, RIGHT_WRIST, PoseSample


@dataclass
class PunchThresholds:
    strike: float = 0.10
    guard: float = 0.06


class PunchDetector(GestureDetector):
    """One fist leaves the guard while the other stays put.

    The asymmetry is what separates a punch from a two-handed push.
    """

    kind = GestureKind.PUNCH
    required_landmarks = [LEFT_WRIST, RIGHT_WRIST]
    min_frames = 8

    def __init__(self, thresholds: Optional[PunchThresholds] = None):
        self.thresholds = thresholds or PunchThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        if not current.has(*self.required_landmarks) or not baseline.has(*self.required_landmarks):
            return False
        moved = sorted(distance_2d(current.get(w), baseline.get(w)) for w in self.required_landmarks)
        other, one = moved
        return one > self.thresholds.strike and other < self.thresholds.guard
