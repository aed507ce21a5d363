from dataclasses import dataclass
from typing import Optional, Sequence

from geometry import midpoint_y
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_HIP, NOSE, RIGHT_HIP, PoseSample


@dataclass
class JumpThresholds:
    nose_rise: float = 0.04
    hip_rise: float = 0.06


class JumpDetector(GestureDetector):
    kind = GestureKind.JUMP
    required_landmarks = [NOSE]

    def __init__(self, thresholds: Optional[JumpThresholds] = None):
        self.thresholds = thresholds or JumpThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        cur = current.get(NOSE)
        base = baseline.get(NOSE)
        if cur is None or base is None:
            return False
        # Up is decreasing y.
        return base.y - cur.y > self.thresholds.nose_rise

    def frame_hit(self, previous: Optional[PoseSample], frame: PoseSample, baseline: PoseSample) -> bool:
        if not frame.has(LEFT_HIP, RIGHT_HIP) or not baseline.has(LEFT_HIP, RIGHT_HIP):
            return False
        base_y = midpoint_y(baseline.get(LEFT_HIP), baseline.get(RIGHT_HIP))
        cur_y = midpoint_y(frame.get(LEFT_HIP), frame.get(RIGHT_HIP))
        return base_y - cur_y > self.thresholds.hip_rise

    def window_hit(self, frames: Sequence[PoseSample]) -> bool:
        # The peak of a jump may already be past by the newest frame.
        baseline = frames[0]
        return any(self.frame_hit(prev, frame, baseline) for prev, frame in zip(frames[:-1], frames[1:]))
