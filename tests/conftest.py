"""Shared fixtures for Motion Conquest tests."""

from concurrent.futures import Executor, Future
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from landmark_source import BufferedLandmarkSource
from pose_types import (
    LEFT_ELBOW,
    LEFT_HIP,
    LEFT_SHOULDER,
    LEFT_WRIST,
    NOSE,
    POSE_LANDMARK_COUNT,
    RIGHT_ELBOW,
    RIGHT_HIP,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    Landmark,
    PoseSample,
)
from scheduler import Scheduler

# Standing upright, arms hanging, facing the camera. Raw (un-mirrored)
# coordinates, so the player's left side has the larger x.
NEUTRAL: Dict[int, Tuple[float, float]] = {
    NOSE: (0.50, 0.30),
    LEFT_SHOULDER: (0.60, 0.45),
    RIGHT_SHOULDER: (0.40, 0.45),
    LEFT_ELBOW: (0.62, 0.60),
    RIGHT_ELBOW: (0.38, 0.60),
    LEFT_WRIST: (0.62, 0.72),
    RIGHT_WRIST: (0.38, 0.72),
    LEFT_HIP: (0.56, 0.75),
    RIGHT_HIP: (0.44, 0.75),
}

Override = Union[Tuple[float, float], Landmark]


def build_pose(timestamp: float = 0.0, visibility: float = 0.9, **overrides: Override) -> PoseSample:
    """Neutral pose with named landmarks moved, e.g. ``nose=(0.5, 0.2)``.

    A tuple override keeps the default visibility; pass a :class:`Landmark`
    to control visibility too.
    """
    names = {
        "nose": NOSE,
        "left_shoulder": LEFT_SHOULDER,
        "right_shoulder": RIGHT_SHOULDER,
        "left_elbow": LEFT_ELBOW,
        "right_elbow": RIGHT_ELBOW,
        "left_wrist": LEFT_WRIST,
        "right_wrist": RIGHT_WRIST,
        "left_hip": LEFT_HIP,
        "right_hip": RIGHT_HIP,
    }
    points = dict(NEUTRAL)
    explicit: Dict[int, Landmark] = {}
    for name, value in overrides.items():
        index = names[name]
        if isinstance(value, Landmark):
            explicit[index] = value
        else:
            points[index] = value

    landmarks = []
    for index in range(POSE_LANDMARK_COUNT):
        if index in explicit:
            landmarks.append(explicit[index])
        else:
            x, y = points.get(index, (0.5, 0.5))
            landmarks.append(Landmark(x, y, 0.0, visibility))
    return PoseSample(timestamp=timestamp, landmarks=tuple(landmarks))


def catch_pose(timestamp: float = 0.0) -> PoseSample:
    return build_pose(timestamp, left_wrist=(0.53, 0.35), right_wrist=(0.47, 0.35))


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


def run_for(scheduler: Scheduler, clock: FakeClock, seconds: float, step: float = 0.05,
            until: Optional[Callable[[], bool]] = None) -> None:
    """Step the fake clock, running due tasks after every step."""
    for _ in range(int(round(seconds / step))):
        clock.advance(step)
        scheduler.run_pending()
        if until is not None and until():
            return


class ImmediateExecutor(Executor):
    """Runs submitted work inline and hands back a finished future."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until :meth:`complete_all` is called."""

    def __init__(self):
        self.pending: List[Tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def complete_all(self) -> None:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as exc:
                future.set_exception(exc)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture
def neutral() -> PoseSample:
    return build_pose()


@pytest.fixture
def source(clock) -> BufferedLandmarkSource:
    src = BufferedLandmarkSource(buffer_size=20)
    src.push(build_pose(clock.t))
    src.set_ready()
    return src
