from dataclasses import dataclass
from typing import Optional, Tuple

POSE_LANDMARK_COUNT = 33
VISIBILITY_THRESHOLD = 0.3

# Indices into the mediapipe pose topology.
NOSE = 0
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24

LANDMARK_NAMES = {
    NOSE: "nose",
    LEFT_SHOULDER: "left_shoulder",
    RIGHT_SHOULDER: "right_shoulder",
    LEFT_ELBOW: "left_elbow",
    RIGHT_ELBOW: "right_elbow",
    LEFT_WRIST: "left_wrist",
    RIGHT_WRIST: "right_wrist",
    LEFT_HIP: "left_hip",
    RIGHT_HIP: "right_hip",
}


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float
    visibility: float

    @property
    def is_valid(self) -> bool:
        return self.visibility > VISIBILITY_THRESHOLD


@dataclass(frozen=True)
class PoseSample:
    timestamp: float
    landmarks: Tuple[Landmark, ...]

    @property
    def well_formed(self) -> bool:
        return len(self.landmarks) == POSE_LANDMARK_COUNT

    @property
    def valid(self) -> bool:
        return self.well_formed and any(lm.is_valid for lm in self.landmarks)

    def get(self, index: int) -> Optional[Landmark]:
        # Invalid or out-of-range landmarks read as missing.
        if not self.well_formed or not 0 <= index < len(self.landmarks):
            return None
        lm = self.landmarks[index]
        if not lm.is_valid:
            return None
        return lm

    def has(self, *indices: int) -> bool:
        return all(self.get(i) is not None for i in indices)
