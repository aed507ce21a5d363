"""Tests for the frame buffer, landmark source and geometry helpers."""

import pytest

from conftest import build_pose
from geometry import compute_velocity, count_direction_reversals, distance_2d, midpoint_x
from history import FrameBuffer
from landmark_source import BufferedLandmarkSource, LandmarkSource
from pose_types import NOSE, Landmark


def test_buffer_evicts_oldest():
    buffer = FrameBuffer(maxlen=3)
    for ts in range(5):
        buffer.append(build_pose(float(ts)))
    assert len(buffer) == 3
    assert [s.timestamp for s in buffer.snapshot()] == [2.0, 3.0, 4.0]
    buffer.clear()
    assert buffer.snapshot() == []


def test_buffer_rejects_zero_length():
    with pytest.raises(ValueError):
        FrameBuffer(maxlen=0)


def test_buffered_source_lifecycle():
    source = BufferedLandmarkSource(buffer_size=5)
    assert isinstance(source, LandmarkSource)
    assert not source.ready
    assert source.get_latest() is None

    source.push(build_pose(1.0))
    source.set_ready()
    assert source.ready
    assert source.get_latest().timestamp == 1.0

    source.mark_lost()
    assert source.get_latest() is None
    assert len(source.get_window()) == 1

    source.fail("camera unplugged")
    assert not source.ready
    assert source.error == "camera unplugged"
    source.set_ready()
    assert not source.ready


def test_pose_sample_get():
    sample = build_pose(nose=Landmark(0.5, 0.3, 0.0, 0.2))
    assert sample.get(NOSE) is None
    assert sample.get(99) is None
    assert sample.valid


def test_direction_reversals():
    assert count_direction_reversals([0.0, 0.1, 0.0, 0.1]) == 2
    assert count_direction_reversals([0.0, 0.005, 0.0, 0.005]) == 0
    assert count_direction_reversals([0.0, 0.1]) == 0


def test_velocity_and_distance():
    assert compute_velocity(0.0, 1.0, 0.5, 1.5) == pytest.approx(1.0)
    assert compute_velocity(0.0, 1.0, 0.5, 1.0) is None
    a = Landmark(0.0, 0.6, 0.0, 1.0)
    b = Landmark(0.3, 0.2, 0.0, 1.0)
    assert distance_2d(a, b) == pytest.approx(0.5)
    assert midpoint_x(a, b) == pytest.approx(0.15)
