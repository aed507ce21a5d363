from dataclasses import dataclass
from typing import Optional

from geometry import midpoint_y
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_SHOULDER, NOSE, RIGHT_SHOULDER, PoseSample


@dataclass
class DuckThresholds:
    drop: float = 0.05
    # How far above the standing shoulder line the nose may still be.
    shoulder_margin: float = 0.12


class DuckDetector(GestureDetector):
    kind = GestureKind.DUCK
    required_landmarks = [NOSE, LEFT_SHOULDER, RIGHT_SHOULDER]

    def __init__(self, thresholds: Optional[DuckThresholds] = None):
        self.thresholds = thresholds or DuckThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        cur = current.get(NOSE)
        if cur is None or not baseline.has(*self.required_landmarks):
            return False
        base = baseline.get(NOSE)
        shoulder_line = midpoint_y(baseline.get(LEFT_SHOULDER), baseline.get(RIGHT_SHOULDER))
        dropped = cur.y - base.y > self.thresholds.drop
        near_shoulders = cur.y >= shoulder_line - self.thresholds.shoulder_margin
        return dropped and near_shoulders
