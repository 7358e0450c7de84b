"""
Settings persistence.

Handles save/load of generator settings to ~/.config/floorgen/settings.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .settings import GeneratorSettings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


def get_config_dir() -> Path:
    """
    Get the directory for storing floorgen configuration.

    Returns:
        Path to ~/.config/floorgen/
        Creates the directory if it doesn't exist.
    """
    config_dir = Path.home() / ".config" / "floorgen"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def save_settings(settings: GeneratorSettings, file_path: Optional[Path] = None) -> Path:
    """
    Save settings as JSON.

    Args:
        settings: Settings to write
        file_path: Destination; defaults to the config directory

    Returns:
        Path to the saved file

    Raises:
        OSError: If the file cannot be written
    """
    if file_path is None:
        file_path = get_config_dir() / SETTINGS_FILENAME

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=2)

    return file_path


def load_settings_from_path(file_path: Path) -> Optional[GeneratorSettings]:
    """
    Load settings from a specific file path.

    Returns:
        GeneratorSettings if the file is valid, None otherwise
    """
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return GeneratorSettings.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Ignoring invalid settings file {file_path}: {e}")
        return None


def load_settings(file_path: Optional[Path] = None) -> GeneratorSettings:
    """
    Load settings, falling back to defaults when absent or invalid.
    """
    if file_path is None:
        file_path = get_config_dir() / SETTINGS_FILENAME
    settings = load_settings_from_path(file_path)
    return settings if settings is not None else GeneratorSettings()
