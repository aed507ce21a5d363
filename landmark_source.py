import logging
import threading
from typing import List, Optional, Protocol, runtime_checkable

from history import FrameBuffer
from pose_types import PoseSample

logger = logging.getLogger(__name__)


@runtime_checkable
class LandmarkSource(Protocol):
    """Where the mission runner reads poses from. Reads never block."""

    @property
    def ready(self) -> bool:
        ...

    @property
    def error(self) -> Optional[str]:
        ...

    def get_latest(self) -> Optional[PoseSample]:
        ...

    def get_window(self) -> List[PoseSample]:
        ...


class BufferedLandmarkSource:
    """Landmark source fed by whoever owns the camera loop.

    The producer calls :meth:`push` for every detected pose and
    :meth:`mark_lost` when a frame has no person in it. One instance is
    meant to live for the whole process so the camera and model stay warm
    across sessions.
    """

    def __init__(self, buffer_size: int = 20):
        self._buffer = FrameBuffer(maxlen=buffer_size)
        self._latest: Optional[PoseSample] = None
        self._ready = False
        self._error: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._ready and self._error is None

    @property
    def error(self) -> Optional[str]:
        return self._error

    def set_ready(self, ready: bool = True) -> None:
        self._ready = ready

    def fail(self, message: str) -> None:
        logger.error("Landmark source failed: %s", message)
        self._error = message
        self._ready = False

    def push(self, sample: PoseSample) -> None:
        with self._lock:
            self._buffer.append(sample)
            self._latest = sample

    def mark_lost(self) -> None:
        with self._lock:
            self._latest = None

    def get_latest(self) -> Optional[PoseSample]:
        with self._lock:
            return self._latest

    def get_window(self) -> List[PoseSample]:
        with self._lock:
            return self._buffer.snapshot()

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
            self._latest = None
