"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Profile selection through FOCUSDASH_PROFILE
"""

import os
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError
from . import (
    DEFAULT_PLAYER_VARS,
    FocusConfig,
    LoggingConfig,
    MediaConfig,
    SoundConfig,
    TimerConfig,
)

PROFILE_ENV_VAR = "FOCUSDASH_PROFILE"
VALID_PROFILES = ("dev", "prod", "test")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    if "extends" in config:
        base_name = config.pop("extends")
        base_path = path.parent / base_name
        base_config = load_yaml_with_inheritance(base_path)
        config = deep_merge(base_config, config)

    return config


def _build(cls: type, section: str, data: dict[str, Any]) -> Any:
    """Instantiate a config dataclass, turning unknown keys into ConfigError."""
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigError(f"Invalid '{section}' section: {e}") from e


def _parse_media_config(data: dict[str, Any]) -> MediaConfig:
    """Parse media config, restricting player vars to the known whitelist."""
    data = dict(data)
    player_vars = data.pop("player_vars", None) or {}
    unknown = set(player_vars) - set(DEFAULT_PLAYER_VARS)
    if unknown:
        raise ConfigError(f"Unsupported player vars: {', '.join(sorted(unknown))}")

    config = _build(MediaConfig, "media", data)
    config.player_vars = {**DEFAULT_PLAYER_VARS, **player_vars}
    return config


def dict_to_config(data: dict[str, Any]) -> FocusConfig:
    """Convert raw dict to typed FocusConfig dataclass."""
    root = data.get("focusdash", {}) or {}

    # YAML turns an empty section into None
    def safe_get(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return FocusConfig(
        timer=_build(TimerConfig, "timer", safe_get("timer")),
        media=_parse_media_config(safe_get("media")),
        sound=_build(SoundConfig, "sound", safe_get("sound")),
        logging=_build(LoggingConfig, "logging", safe_get("logging")),
    )


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> FocusConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed FocusConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_profile(self, profile: str) -> FocusConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed FocusConfig for the profile
        """
        config_path = self._config_dir / f"{profile}.yaml"
        return self.load(config_path)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def detect_profile() -> str:
    """Detect the configuration profile from the environment.

    Returns:
        Profile name, 'dev' when FOCUSDASH_PROFILE is unset or unknown.
    """
    profile = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    return profile if profile in VALID_PROFILES else "dev"


def load_config(path: str | Path | None = None, profile: str | None = None) -> FocusConfig:
    """Load focus dashboard configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed FocusConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    elif profile is not None:
        return loader.load_profile(profile)
    else:
        return loader.load_profile(detect_profile())


__all__ = [
    "PROFILE_ENV_VAR",
    "YAMLConfigLoader",
    "deep_merge",
    "detect_profile",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
