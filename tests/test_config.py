"""Tests for configuration system."""

import pytest
from pydantic import ValidationError

from classifier import DetectionMode
from config import AppConfig, PoseSettings, RunnerSettings, SessionSettings


def test_runner_settings_defaults():
    r = RunnerSettings()
    assert r.detection_mode == DetectionMode.SINGLE_FRAME
    assert r.poll_interval == pytest.approx(1 / 30)
    assert r.hit_confidence == 0.9
    assert r.strict is False


def test_session_settings_defaults():
    s = SessionSettings()
    assert s.grace_delay == 2.0
    assert s.cutoff == 60.0
    assert s.default_time_limit == 3.0
    assert s.time_limit_range == (2.0, 4.0)


def test_app_config_defaults():
    config = AppConfig()
    assert config.config_dir.name == ".motion_conquest"
    assert config.cache_dir.parent.name == ".motion_conquest"
    assert config.pose.buffer_size == 20


def test_detection_mode_from_string():
    assert RunnerSettings(detection_mode="windowed").detection_mode == DetectionMode.WINDOWED


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval": 0},
        {"countdown_interval": -1.0},
        {"hit_confidence": 1.5},
        {"detection_mode": "telepathy"},
    ],
)
def test_runner_settings_validation(kwargs):
    with pytest.raises(ValidationError):
        RunnerSettings(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeline_poll_interval": 0},
        {"time_limit_range": (4.0, 2.0)},
        {"time_limit_range": (0.0, 2.0)},
        {"cutoff": -5},
    ],
)
def test_session_settings_validation(kwargs):
    with pytest.raises(ValidationError):
        SessionSettings(**kwargs)


def test_session_cutoff_can_be_disabled():
    assert SessionSettings(cutoff=None).cutoff is None


def test_pose_buffer_too_small():
    with pytest.raises(ValidationError):
        PoseSettings(buffer_size=1)


def test_env_override(monkeypatch):
    monkeypatch.setenv("MOTION_CONQUEST_SESSION__CUTOFF", "30")
    monkeypatch.setenv("MOTION_CONQUEST_RUNNER__DETECTION_MODE", "windowed")
    config = AppConfig()
    assert config.session.cutoff == 30.0
    assert config.runner.detection_mode == DetectionMode.WINDOWED


def test_ensure_dirs(tmp_path):
    config = AppConfig(config_dir=tmp_path / "cfg", cache_dir=tmp_path / "cfg" / "missions")
    config.ensure_dirs()
    assert config.cache_dir.is_dir()
