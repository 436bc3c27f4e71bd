"""Configuration module for the focus dashboard.

This module provides configuration dataclasses and profile loading.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

# Display flags passed to the hosted player; everything else is rejected.
DEFAULT_PLAYER_VARS: dict[str, int] = {
    "autoplay": 0,
    "controls": 0,
    "disablekb": 1,
    "enablejsapi": 1,
    "fs": 0,
    "iv_load_policy": 3,
    "modestbranding": 1,
    "playsinline": 1,
    "rel": 0,
}


@dataclass
class TimerConfig:
    """Session clock configuration (seconds)."""

    study_seconds: int = 45 * 60
    short_break_seconds: int = 10 * 60
    tick_interval: float = 1.0
    finished_display: float = 2.0
    settle_delay: float = 1.0


@dataclass
class MediaConfig:
    """Media session configuration."""

    debounce: float = 0.1
    destroy_cooldown: float = 0.5
    poll_interval: float = 0.1
    max_load_failures: int = 2
    mpv_path: str = "mpv"
    ipc_timeout: float = 5.0
    player_vars: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_PLAYER_VARS))


@dataclass
class SoundConfig:
    """Notification tone configuration."""

    enabled: bool = True
    frequency: int = 800
    duration_ms: int = 500
    start_gain: float = 0.3
    end_gain: float = 0.01
    sample_rate: int = 22050
    output_device: str = "default"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class FocusConfig:
    """Main focus dashboard configuration."""

    timer: TimerConfig = field(default_factory=TimerConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    sound: SoundConfig = field(default_factory=SoundConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> FocusConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> FocusConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


__all__ = [
    "DEFAULT_PLAYER_VARS",
    "ConfigLoader",
    "FocusConfig",
    "LoggingConfig",
    "MediaConfig",
    "SoundConfig",
    "TimerConfig",
]
