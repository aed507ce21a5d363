from dataclasses import dataclass
from typing import Optional, Sequence

from geometry import count_direction_reversals
from gestures.base import GestureDetector, GestureKind
from pose_types import LEFT_SHOULDER, LEFT_WRIST, NOSE, RIGHT_SHOULDER, RIGHT_WRIST, PoseSample

ARMS = ((LEFT_WRIST, LEFT_SHOULDER), (RIGHT_WRIST, RIGHT_SHOULDER))


@dataclass
class WaveThresholds:
    lateral_offset: float = 0.1
    min_reversals: int = 2
    min_step: float = 0.01
    min_raised_ratio: float = 0.7


class WaveDetector(GestureDetector):
    kind = GestureKind.WAVE
    required_landmarks = [NOSE, LEFT_WRIST, RIGHT_WRIST, LEFT_SHOULDER, RIGHT_SHOULDER]
    min_frames = 10

    def __init__(self, thresholds: Optional[WaveThresholds] = None):
        self.thresholds = thresholds or WaveThresholds()

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        nose = current.get(NOSE)
        if nose is None:
            return False
        for wrist_idx, shoulder_idx in ARMS:
            wrist = current.get(wrist_idx)
            shoulder = current.get(shoulder_idx)
            if wrist is None or shoulder is None:
                continue
            if wrist.y < nose.y and abs(wrist.x - shoulder.x) > self.thresholds.lateral_offset:
                return True
        return False

    @staticmethod
    def _raised(frame: PoseSample, wrist_idx: int, shoulder_idx: int) -> bool:
        wrist = frame.get(wrist_idx)
        shoulder = frame.get(shoulder_idx)
        return wrist is not None and shoulder is not None and wrist.y < shoulder.y

    def frame_hit(self, previous: Optional[PoseSample], frame: PoseSample, baseline: PoseSample) -> bool:
        return any(self._raised(frame, w, s) for w, s in ARMS)

    def window_hit(self, frames: Sequence[PoseSample]) -> bool:
        for wrist_idx, shoulder_idx in ARMS:
            raised = [f for f in frames if self._raised(f, wrist_idx, shoulder_idx)]
            if len(raised) < self.thresholds.min_raised_ratio * len(frames):
                continue
            xs = [f.get(wrist_idx).x for f in raised]
            if count_direction_reversals(xs, self.thresholds.min_step) >= self.thresholds.min_reversals:
                return True
        return False
