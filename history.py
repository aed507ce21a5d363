from collections import deque
from typing import Deque, List

from pose_types import PoseSample


class FrameBuffer:
    """Bounded ring of recent pose samples, oldest first."""

    def __init__(self, maxlen: int = 20):
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self._buffer: Deque[PoseSample] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._buffer)

    def append(self, sample: PoseSample) -> None:
        self._buffer.append(sample)

    def clear(self) -> None:
        self._buffer.clear()

    def snapshot(self) -> List[PoseSample]:
        return list(self._buffer)
