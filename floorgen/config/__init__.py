"""
Generator configuration and its persistence.

Usage:
    from floorgen.config import GeneratorSettings, load_settings, save_settings

    settings = load_settings()          # ~/.config/floorgen/settings.json or defaults
    settings.door_credit_budget = 30
    save_settings(settings)
"""

from .settings import GeneratorSettings
from .settings_storage import (
    get_config_dir,
    load_settings,
    load_settings_from_path,
    save_settings,
)

__all__ = [
    'GeneratorSettings',
    'get_config_dir',
    'load_settings',
    'load_settings_from_path',
    'save_settings',
]
