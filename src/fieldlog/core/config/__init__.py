"""
Configuration Management Package

Provides Pydantic-based settings models and layered settings lookup.
"""

from fieldlog.core.config.models import AppSettings, ExportSettings, DEFAULT_EXPORT_SETTINGS_KEY
from fieldlog.core.config.manager import (
    ConfigManager,
    select_export_settings,
    select_default_export_settings,
)

__all__ = [
    "AppSettings",
    "ExportSettings",
    "DEFAULT_EXPORT_SETTINGS_KEY",
    "ConfigManager",
    "select_export_settings",
    "select_default_export_settings",
]
