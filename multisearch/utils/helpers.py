"""
Helper utilities for Multi Search.

Provides common functions used across the store and front ends:
- XDG data/config directory resolution
- Settings loading with defaults
- Seed engine loading
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

APP_NAME = "multisearch"

SEED_PATH = Path(__file__).parent.parent / "data" / "default_engines.json"


def data_dir() -> Path:
    """Directory for persisted engines ($XDG_DATA_HOME/multisearch)."""
    base = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(base) / APP_NAME


def config_dir() -> Path:
    """Directory for settings.toml ($XDG_CONFIG_HOME/multisearch)."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def default_settings() -> Dict[str, Any]:
    return {
        "storage": {
            "backend": "json",
            "path": "",
        },
        "dispatch": {
            "opener": "xdg-open",
        },
        "icons": {
            "favicon_service": "https://www.google.com/s2/favicons?domain={domain}&sz=64",
        },
        "export": {
            "filename": "search_engines.json",
        },
    }


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from a TOML file.

    Args:
        settings_path: File to read. Defaults to the XDG config location.

    Returns:
        Dictionary containing settings with defaults applied

    Example settings.toml:
        [storage]
        backend = "sqlite"

        [dispatch]
        opener = "webbrowser"
    """
    defaults = default_settings()

    if settings_path is None:
        settings_path = config_dir() / "settings.toml"
    settings_path = Path(settings_path)

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Could not load settings from {settings_path}, using defaults")
        return defaults

    return _deep_merge(defaults, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_seed_engines() -> list:
    """
    Load the built-in engine records.

    Returns:
        List of engine dicts, in display order
    """
    with open(SEED_PATH, encoding="utf-8") as f:
        return json.load(f)
