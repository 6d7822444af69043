"""Settings persistence backed by a YAML file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from stacklens.constants.defaults import CONFIG_FILE_DEFAULT
from stacklens.constants.values import CONFIG_ENV_VAR
from stacklens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads and saves AppSettings as YAML."""

    @staticmethod
    def resolve_path(path: str | Path | None = None) -> Path:
        """Pick the settings file: explicit path, then env override, then default."""
        if path is not None:
            return Path(path).expanduser()
        env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
        if env_path:
            return Path(env_path).expanduser()
        return CONFIG_FILE_DEFAULT.expanduser()

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppSettings:
        """Load settings, returning defaults when the file does not exist.

        Raises:
            ConfigLoadError: The file exists but cannot be read, parsed or
                validated.
        """
        settings_path = cls.resolve_path(path)
        if not settings_path.exists():
            logger.debug("No settings file at %s, using defaults", settings_path)
            return AppSettings()

        try:
            with settings_path.open(encoding="utf-8") as handle:
                raw = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Failed to read {settings_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {settings_path} must be a mapping")

        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {settings_path}: {exc}") from exc

    @classmethod
    def save(cls, settings: AppSettings, path: str | Path | None = None) -> Path:
        """Write settings to YAML and return the file written.

        Raises:
            ConfigSaveError: The file cannot be written.
        """
        settings_path = cls.resolve_path(path)
        try:
            settings_path.parent.mkdir(parents=True, exist_ok=True)
            with settings_path.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(settings.model_dump(), handle, sort_keys=False)
        except OSError as exc:
            raise ConfigSaveError(f"Failed to write {settings_path}: {exc}") from exc
        return settings_path


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
