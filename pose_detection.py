from typing import Optional

import cv2
import mediapipe as mp

from pose_types import Landmark, PoseSample


class PoseDetector:
    """Wraps the mediapipe pose model.

    Built once and reused for every session; loading the model is far too
    slow to repeat per mission.
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        model_complexity: int = 1,
    ):
        self._pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=model_complexity,
            smooth_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def process(self, frame_bgr, timestamp: float) -> Optional[PoseSample]:
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self._pose.process(frame_rgb)
        if results.pose_landmarks is None:
            return None

        # Raw, un-mirrored coordinates; detectors expect the camera's view.
        landmarks = tuple(
            Landmark(lm.x, lm.y, lm.z, lm.visibility)
            for lm in results.pose_landmarks.landmark
        )
        return PoseSample(timestamp=timestamp, landmarks=landmarks)

    def close(self) -> None:
        self._pose.close()
