"""Game configuration with pydantic-settings + TOML."""

from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from classifier import DetectionMode


def _default_config_dir() -> Path:
    return Path.home() / ".motion_conquest"


def _default_cache_dir() -> Path:
    return _default_config_dir() / "missions"


class CameraSettings(BaseSettings):
    """Webcam capture parameters."""

    index: int = Field(default=0, ge=0)
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)
    target_fps: int = Field(default=30, ge=0)


class PoseSettings(BaseSettings):
    """Pose model and frame buffer."""

    min_detection_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    min_tracking_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    buffer_size: int = Field(default=20, ge=2)


class RunnerSettings(BaseSettings):
    """Per-mission detection loop."""

    detection_mode: DetectionMode = DetectionMode.SINGLE_FRAME
    poll_interval: float = Field(default=1.0 / 30.0, gt=0.0)
    countdown_interval: float = Field(default=0.05, gt=0.0)
    hit_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    # Re-raise programming errors instead of scoring them as a miss.
    strict: bool = False


class SessionSettings(BaseSettings):
    """Session pacing."""

    grace_delay: float = Field(default=2.0, ge=0.0)
    result_dwell: float = Field(default=1.5, ge=0.0)
    cutoff: Optional[float] = Field(default=60.0, gt=0.0)
    timeline_poll_interval: float = Field(default=0.1, gt=0.0)
    loading_poll_interval: float = Field(default=0.05, gt=0.0)
    default_time_limit: float = Field(default=3.0, gt=0.0)
    time_limit_range: Tuple[float, float] = (2.0, 4.0)

    @field_validator("time_limit_range")
    @classmethod
    def _check_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if low <= 0 or low > high:
            raise ValueError(f"invalid time limit range {value}")
        return value


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MOTION_CONQUEST_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    cache_dir: Path = Field(default_factory=_default_cache_dir)
    camera: CameraSettings = Field(default_factory=CameraSettings)
    pose: PoseSettings = Field(default_factory=PoseSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))

    def ensure_dirs(self) -> None:
        """Create config and cache directories if they don't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load application config, creating directories if needed."""
    config = AppConfig()
    config.ensure_dirs()
    return config
