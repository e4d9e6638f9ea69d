"""Configuration loader — reads optional YAML config and merges with defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from companion.parser import AGGREGATION_MODES

CONFIG_PATH = Path("~/.config/companion/config.yaml")
CONFIG_ENV_VAR = "COMPANION_CONFIG"

STATUS_FILE_NAME = "status.json"

DEFAULTS = {
    "status_dir": "~/.claude-companion",
    "aggregation_mode": "latest",
    "log_file": None,
    "log_level": "WARNING",
}


@dataclass
class CompanionConfig:
    status_dir: Path
    aggregation_mode: str
    log_file: Path | None
    log_level: str

    @property
    def status_file(self) -> Path:
        return self.status_dir / STATUS_FILE_NAME


def default_config_path() -> Path:
    """Config path from $COMPANION_CONFIG, falling back to CONFIG_PATH."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return CONFIG_PATH


def save_config_value(key: str, value: object, config_path: Path | None = None) -> None:
    """Update a single key in the config file, preserving other settings.

    Raises ValueError for an unknown key or an invalid aggregation_mode.
    """
    if key not in DEFAULTS:
        raise ValueError(f"Unknown config key {key!r}; expected one of {', '.join(DEFAULTS)}")
    if key == "aggregation_mode":
        value = _check_mode(value)

    if config_path is None:
        config_path = default_config_path()
    config_path = config_path.expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict = {}
    if config_path.is_file():
        with open(config_path) as f:
            loaded = yaml.safe_load(f)
        if isinstance(loaded, dict):
            existing = loaded

    existing[key] = value
    with open(config_path, "w") as f:
        yaml.dump(existing, f, default_flow_style=False)


def load_config(config_path: Path | None = None) -> CompanionConfig:
    """Load config from ~/.config/companion/config.yaml, merged with defaults.

    Expand ~ in paths. If no config file exists, return defaults (don't error).
    Raises ValueError for an unknown aggregation_mode.
    """
    if config_path is None:
        config_path = default_config_path()

    config_path = config_path.expanduser()

    merged = dict(DEFAULTS)

    if config_path.is_file():
        with open(config_path) as f:
            user_config = yaml.safe_load(f)
        if isinstance(user_config, dict):
            for key in DEFAULTS:
                if key in user_config:
                    merged[key] = user_config[key]

    mode = _check_mode(merged["aggregation_mode"])

    log_file = merged["log_file"]

    return CompanionConfig(
        status_dir=Path(merged["status_dir"]).expanduser(),
        aggregation_mode=mode,
        log_file=Path(log_file).expanduser() if log_file else None,
        log_level=str(merged["log_level"]).upper(),
    )


def _check_mode(value: object) -> str:
    mode = str(value).lower()
    if mode not in AGGREGATION_MODES:
        raise ValueError(
            f"aggregation_mode must be one of {', '.join(AGGREGATION_MODES)}, got {mode!r}"
        )
    return mode
