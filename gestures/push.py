from dataclasses import dataclass
from typing import Optional

from geometry import distance_2d
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_SHOULDER, LEFT_WRIST, RIGHT_SHOULDER, RIGHT_WRIST, PoseSample


@dataclass
class PushThresholds:
    extension: float = 0.05


class PushDetector(GestureDetector):
    kind = GestureKind.PUSH
    required_landmarks = [LEFT_WRIST, RIGHT_WRIST, LEFT_SHOULDER, RIGHT_SHOULDER]

    def __init__(self, thresholds: Optional[PushThresholds] = None):
        self.thresholds = thresholds or PushThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        if not current.has(*self.required_landmarks) or not baseline.has(*self.required_landmarks):
            return False
        extensions = []
        for wrist, shoulder in ((LEFT_WRIST, LEFT_SHOULDER), (RIGHT_WRIST, RIGHT_SHOULDER)):
            cur_reach = distance_2d(current.get(wrist), current.get(shoulder))
            base_reach = distance_2d(baseline.get(wrist), baseline.get(shoulder))
            extensions.append(cur_reach - base_reach)
        return sum(extensions) / len(extensions) > self.thresholds.extension
