"""Platform path helpers for ipchttp configuration."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir


def get_config_dir() -> Path:
    """Get the config directory for ipchttp (config.toml)."""
    override = os.environ.get("IPCHTTP_CONFIG_DIR")
    if override:
        return Path(override).resolve()
    return Path(user_config_dir("ipchttp"))


def get_config_path() -> Path:
    """Get the path to the main config file."""
    return get_config_dir() / "config.toml"


__all__ = ["get_config_dir", "get_config_path"]
