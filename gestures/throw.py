from dataclasses import dataclass
from typing import Optional, Sequence

from geometry import compute_velocity, distance_2d
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_WRIST, RIGHT_WRIST, PoseSample


@dataclass
class ThrowThresholds:
    displacement: float = 0.12
    # Normalized frame units per second.
    peak_speed: float = 0.8


class ThrowDetector(GestureDetector):
    kind = GestureKind.THROW
    required_landmarks = [LEFT_WRIST, RIGHT_WRIST]

    def __init__(self, thresholds: Optional[ThrowThresholds] = None):
        self.thresholds = thresholds or ThrowThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        if not current.has(*self.required_landmarks) or not baseline.has(*self.required_landmarks):
            return False
        moved = max(distance_2d(current.get(w), baseline.get(w)) for w in self.required_landmarks)
        return moved > self.thresholds.displacement

    def _wrist_speed(self, previous: PoseSample, frame: PoseSample) -> Optional[float]:
        speeds = []
        for wrist in self.required_landmarks:
            a = previous.get(wrist)
            b = frame.get(wrist)
            if a is None or b is None:
                continue
            speed = compute_velocity(0.0, previous.timestamp, distance_2d(a, b), frame.timestamp)
            if speed is not None:
                speeds.append(speed)
        return max(speeds) if speeds else None

    def frame_hit(self, previous: Optional[PoseSample], frame: PoseSample, baseline: PoseSample) -> bool:
        if previous is None:
            return False
        speed = self._wrist_speed(previous, frame)
        return speed is not None and speed > self.thresholds.peak_speed

    def window_hit(self, frames: Sequence[PoseSample]) -> bool:
        baseline = frames[0]
        return any(self.frame_hit(prev, frame, baseline) for prev, frame in zip(frames[:-1], frames[1:]))
