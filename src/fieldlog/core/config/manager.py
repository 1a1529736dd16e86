"""
Configuration Manager

Handles hierarchical settings loading and the layered lookup of per-export
template settings.

Settings sources in order of precedence:
1. CLI overrides (highest priority)
2. Environment variables
3. Settings file (YAML or JSON)
4. Default values (lowest priority)
"""

import os
import json
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from pydantic import ValidationError

from fieldlog.core.config.models import AppSettings, ExportSettings, DEFAULT_EXPORT_SETTINGS_KEY
from fieldlog.core.exceptions import ConfigurationError, ErrorCode


logger = logging.getLogger("fieldlog.config")


class ConfigManager:
    """
    Loads and validates application settings from all sources.
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to a settings file
        """
        self.config_file = Path(config_file) if config_file else None
        self._settings: Optional[AppSettings] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default settings file search paths."""
        search_paths = [
            Path.cwd() / "fieldlog.yaml",
            Path.cwd() / "fieldlog.yml",
            Path.cwd() / ".fieldlog.yaml",
            Path.home() / ".config" / "fieldlog" / "settings.yaml",
        ]

        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            search_paths.append(Path(xdg_config) / "fieldlog" / "settings.yaml")

        return search_paths

    def load_settings(
        self,
        cli_args: Optional[Dict[str, Any]] = None,
        env_prefix: str = "FIELDLOG_"
    ) -> AppSettings:
        """
        Load and validate settings from all sources.

        Args:
            cli_args: Dictionary of CLI overrides (field names or aliases)
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppSettings instance

        Raises:
            ConfigurationError: If the settings are invalid
        """
        settings_data: Dict[str, Any] = {}

        file_settings = self._load_config_file()
        if file_settings:
            settings_data.update(self._normalize_keys(file_settings))

        env_settings = self._load_env_config(env_prefix)
        if env_settings:
            settings_data = self._deep_merge(settings_data, env_settings)

        if cli_args:
            cli_settings = {key: value for key, value in self._normalize_keys(cli_args).items() if value is not None}
            settings_data = self._deep_merge(settings_data, cli_settings)

        try:
            self._settings = AppSettings.model_validate(settings_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Settings validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e
            )
        logger.debug(f"Loaded settings with {len(self._settings.exports)} export entries")
        return self._settings

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load settings from file."""
        config_file = self.config_file

        if config_file and not config_file.exists():
            raise ConfigurationError(
                f"Settings file not found: {config_file}",
                error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                config_key="config_file",
                config_value=str(config_file)
            )

        if not config_file:
            for path in self._config_paths:
                if path.exists() and path.is_file():
                    config_file = path
                    break

        if not config_file:
            return None

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() in {'.yaml', '.yml'}:
                    data = yaml.safe_load(f) or {}
                elif config_file.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    content = f.read()
                    try:
                        data = yaml.safe_load(content) or {}
                    except yaml.YAMLError:
                        data = json.loads(content)
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load settings file {config_file}: {e}", cause=e)

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {config_file} must contain a mapping",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT
            )

        # QSON-style files nest everything under a "settings" key
        if isinstance(data.get('settings'), dict):
            data = data['settings']

        logger.debug(f"Loaded settings file {config_file}")
        return data

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load settings from environment variables."""
        env_config: Dict[str, Any] = {}

        env_mappings = {
            f"{prefix}OPERATOR_CALL": ("operator_call", str),
            f"{prefix}COMPACT_FILE_NAMES": ("use_compact_file_names", self._parse_bool),
            f"{prefix}DEV_MODE": ("dev_mode", self._parse_bool),
        }

        for env_var, (key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    env_config[key] = parser(value)
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {value} ({e})",
                        error_code=ErrorCode.CONFIG_INVALID_VALUE,
                        config_key=env_var,
                        config_value=value
                    )

        return env_config

    @staticmethod
    def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
        """Map camelCase aliases onto field names so sources merge cleanly."""
        normalized = dict(data)
        for field_name, info in AppSettings.model_fields.items():
            if info.alias and info.alias in normalized:
                value = normalized.pop(info.alias)
                normalized.setdefault(field_name, value)
        return normalized

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _parse_bool(value: Union[str, bool]) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in {'true', '1', 'yes', 'on', 'enabled'}
        return bool(value)

    @property
    def settings(self) -> Optional[AppSettings]:
        """Get the loaded settings."""
        return self._settings


def select_export_settings(
    settings: Optional[AppSettings],
    option_key: str,
    fallback: Optional[Union[Dict[str, Any], ExportSettings]] = None
) -> ExportSettings:
    """
    Resolve the export settings for one option key.

    The user's entry for ``option_key`` is layered over ``fallback`` (usually
    the handler's own default export settings); missing entries on both sides
    produce empty settings.

    Args:
        settings: Application settings (may be None)
        option_key: ``<handler>-<format>-<exportType>`` or ``default``
        fallback: Defaults placed beneath the user's settings

    Returns:
        Resolved ExportSettings
    """
    user_settings = None
    if settings is not None:
        user_settings = settings.exports.get(option_key)
    if user_settings is None:
        user_settings = ExportSettings()
    return user_settings.merged_over(fallback)


def select_default_export_settings(settings: Optional[AppSettings]) -> ExportSettings:
    """Global default export settings (the ``default`` entry)."""
    return select_export_settings(settings, DEFAULT_EXPORT_SETTINGS_KEY)
