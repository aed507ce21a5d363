import logging
import time
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from config import CameraSettings
from errors import SourceUnavailableError
from landmark_source import BufferedLandmarkSource
from pose_detection import PoseDetector
from pose_types import PoseSample

logger = logging.getLogger(__name__)

# Consecutive failed reads before the camera is considered gone.
MAX_READ_FAILURES = 30


@dataclass
class CameraFrame:
    image: Optional[np.ndarray]
    timestamp: float

    @property
    def ok(self) -> bool:
        return self.image is not None


class CameraStream:
    """Webcam capture held near ``target_fps``."""

    def __init__(self, settings: Optional[CameraSettings] = None):
        self.settings = settings or CameraSettings()
        self._capture: Optional[cv2.VideoCapture] = None
        self._last_read = time.monotonic()

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        s = self.settings
        capture = cv2.VideoCapture(s.index)
        if not capture.isOpened():
            capture.release()
            raise SourceUnavailableError(f"could not open camera {s.index} (missing device or permission denied)")
        for prop, value in (
            (cv2.CAP_PROP_FRAME_WIDTH, s.width),
            (cv2.CAP_PROP_FRAME_HEIGHT, s.height),
            (cv2.CAP_PROP_FPS, s.target_fps),
        ):
            capture.set(prop, value)
        self._capture = capture
        logger.info("Camera %d open at %dx%d", s.index, s.width, s.height)

    def _pace(self) -> float:
        now = time.monotonic()
        if self.settings.target_fps > 0:
            wait = 1.0 / self.settings.target_fps - (now - self._last_read)
            if wait > 0:
                time.sleep(wait)
                now = time.monotonic()
        self._last_read = now
        return now

    def read(self) -> CameraFrame:
        if self._capture is None:
            return CameraFrame(None, time.monotonic())
        grabbed, image = self._capture.read()
        if not grabbed:
            return CameraFrame(None, time.monotonic())
        return CameraFrame(image, self._pace())

    def release(self) -> None:
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
        logger.info("Camera released")


class CameraFeed:
    """Producer side of :class:`BufferedLandmarkSource`.

    Each :meth:`step` grabs one frame, runs the pose model on it and hands
    the result to the source. The source turns ready on the first detected
    pose and fails once the camera stops delivering frames.
    """

    def __init__(self, stream: CameraStream, detector: PoseDetector, source: BufferedLandmarkSource):
        self.stream = stream
        self.detector = detector
        self.source = source
        self._failures = 0

    def start(self) -> None:
        try:
            self.stream.open()
        except SourceUnavailableError as exc:
            self.source.fail(str(exc))

    def step(self) -> CameraFrame:
        frame = self.stream.read()
        if not frame.ok:
            self.source.mark_lost()
            self._failures += 1
            if self.stream.is_open and self._failures == MAX_READ_FAILURES:
                self.source.fail(f"camera stopped delivering frames after {MAX_READ_FAILURES} attempts")
            return frame

        self._failures = 0
        sample: Optional[PoseSample] = self.detector.process(frame.image, frame.timestamp)
        if sample is None:
            self.source.mark_lost()
        else:
            self.source.push(sample)
            if not self.source.ready and self.source.error is None:
                self.source.set_ready()
        return frame

    def latest_pose(self) -> Optional[PoseSample]:
        return self.source.get_latest()

    def close(self) -> None:
        self.detector.close()
        self.stream.release()
