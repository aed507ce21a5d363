from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from pose_types import PoseSample

# Windowed confidence is the trailing hit ratio lifted by this floor.
CONFIDENCE_BOOST = 0.3


class GestureKind(str, Enum):
    JUMP = "jump"
    DODGE_LEFT = "dodge_left"
    DODGE_RIGHT = "dodge_right"
    PUSH = "push"
    CATCH = "catch"
    THROW = "throw"
    DUCK = "duck"
    WAVE = "wave"
    CLAP = "clap"
    PUNCH = "punch"

    @property
    def is_core(self) -> bool:
        return self in CORE_GESTURES


CORE_GESTURES = (
    GestureKind.JUMP,
    GestureKind.DODGE_LEFT,
    GestureKind.DODGE_RIGHT,
    GestureKind.PUSH,
    GestureKind.CATCH,
    GestureKind.THROW,
)
EXTENDED_GESTURES = (
    GestureKind.DUCK,
    GestureKind.WAVE,
    GestureKind.CLAP,
    GestureKind.PUNCH,
)


@dataclass(frozen=True)
class MissionResult:
    gesture: GestureKind
    success: bool
    confidence: float

    @classmethod
    def miss(cls, gesture: GestureKind) -> "MissionResult":
        return cls(gesture, False, 0.0)


class GestureDetector:
    """Geometric rule for one gesture.

    ``evaluate`` compares a single current sample against the baseline
    captured at mission start. ``evaluate_window`` looks at a trailing run
    of samples, oldest first, and treats the oldest one as the baseline.
    Detectors never mutate their inputs and never raise on missing
    landmarks; a landmark that is absent or below the visibility gate makes
    the check fail.
    """

    kind: GestureKind
    required_landmarks: List[int] = []
    min_frames = 6

    def evaluate(self, current: PoseSample, baseline: PoseSample) -> bool:
        raise NotImplementedError

    def frame_hit(self, previous: Optional[PoseSample], frame: PoseSample, baseline: PoseSample) -> bool:
        return self.evaluate(frame, baseline)

    def window_hit(self, frames: Sequence[PoseSample]) -> bool:
        return self.frame_hit(frames[-2], frames[-1], frames[0])

    def evaluate_window(self, frames: Sequence[PoseSample]) -> MissionResult:
        if len(frames) < self.min_frames:
            return MissionResult.miss(self.kind)
        if not self.window_hit(frames):
            return MissionResult.miss(self.kind)

        baseline = frames[0]
        trailing = list(zip(frames[:-1], frames[1:]))
        hits = sum(1 for prev, frame in trailing if self.frame_hit(prev, frame, baseline))
        confidence = min(hits / len(trailing) + CONFIDENCE_BOOST, 1.0)
        return MissionResult(self.kind, True, confidence)
