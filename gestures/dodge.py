from dataclasses import dataclass
from typing import Optional

from gestures.base import GestureDetector, GestureKind
from pose_types import NOSE, PoseSample


@dataclass
class DodgeThresholds:
    shift: float = 0.06


class DodgeDetector(GestureDetector):
    required_landmarks = [NOSE]

    def __init__(self, direction: str, thresholds: Optional[DodgeThresholds] = None):
        if direction not in ("left", "right"):
            raise ValueError(f"direction must be 'left' or 'right', got {direction!r}")
        self.direction = direction
        self.kind = GestureKind.DODGE_LEFT if direction == "left" else GestureKind.DODGE_RIGHT
        self.thresholds = thresholds or DodgeThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        cur = current.get(NOSE)
        base = baseline.get(NOSE)
        if cur is None or base is None:
            return False
        # Raw camera frame is mirrored: stepping to the player's left raises x.
        delta = cur.x - base.x
        if self.direction == "left":
            return delta > self.thresholds.shift
        return delta < -self.thresholds.shift
