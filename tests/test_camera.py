"""Tests for the camera feed and panel helpers, without a real camera."""

import pytest

pytest.importorskip("cv2")
pytest.importorskip("mediapipe")

import numpy as np  # noqa: E402

from camera import MAX_READ_FAILURES, CameraFeed, CameraFrame  # noqa: E402
from conftest import build_pose  # noqa: E402
from errors import SourceUnavailableError  # noqa: E402
from landmark_source import BufferedLandmarkSource  # noqa: E402
from ui import hit_row, visible_range  # noqa: E402


class FakeStream:
    def __init__(self, frames, fail_open=False):
        self.frames = list(frames)
        self.fail_open = fail_open
        self.is_open = False

    def open(self):
        if self.fail_open:
            raise SourceUnavailableError("could not open camera 0")
        self.is_open = True

    def read(self):
        if self.frames:
            return self.frames.pop(0)
        return CameraFrame(None, 0.0)

    def release(self):
        self.is_open = False


class FakeDetector:
    def __init__(self, poses):
        self.poses = list(poses)

    def process(self, image, timestamp):
        return self.poses.pop(0)

    def close(self):
        pass


def _image():
    return np.zeros((4, 4, 3), dtype=np.uint8)


def test_feed_pushes_and_turns_ready():
    source = BufferedLandmarkSource()
    frames = [CameraFrame(_image(), 1.0), CameraFrame(_image(), 2.0)]
    feed = CameraFeed(FakeStream(frames), FakeDetector([None, build_pose(2.0)]), source)
    feed.start()

    feed.step()
    assert not source.ready
    assert source.get_latest() is None

    feed.step()
    assert source.ready
    assert feed.latest_pose().timestamp == 2.0


def test_feed_open_failure_marks_source():
    source = BufferedLandmarkSource()
    feed = CameraFeed(FakeStream([], fail_open=True), FakeDetector([]), source)
    feed.start()
    assert source.error == "could not open camera 0"
    assert not source.ready


def test_feed_fails_after_repeated_read_errors():
    source = BufferedLandmarkSource()
    feed = CameraFeed(FakeStream([]), FakeDetector([]), source)
    feed.start()
    for _ in range(MAX_READ_FAILURES - 1):
        feed.step()
    assert source.error is None
    feed.step()
    assert source.error is not None


def test_visible_range_keeps_selection_in_view():
    assert list(visible_range(5, 0, rows=12)) == [0, 1, 2, 3, 4]
    rows = visible_range(30, 20, rows=10)
    assert 20 in rows
    assert len(rows) == 10
    assert list(visible_range(30, 29, rows=10)) == list(range(20, 30))


def test_hit_row():
    rows = [((0, 0, 10, 10), 0), ((0, 20, 10, 30), 1)]
    assert hit_row(rows, 5, 25) == 1
    assert hit_row(rows, 50, 50) is None
