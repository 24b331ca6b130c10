"""Configuration service for StudyTrack.

Loads and saves ``config.json`` in the platformdirs user config directory
and gives dotted-key access to individual settings (``timer.work_minutes``).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from studytrack.models.config_models import AppConfig
from studytrack.utils.logger import get_logger


class ConfigService:
    """Service for loading, saving and editing the application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("studytrack"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("studytrack"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.log = get_logger("config")
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def records_dir(self) -> Path:
        """Directory the record store writes to."""
        if self.config.storage.data_dir:
            return Path(self.config.storage.data_dir).expanduser()
        return self.data_dir / "records"

    def load_config(self) -> AppConfig:
        """Load configuration from storage, falling back to defaults."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
        except (ValidationError, ValueError, OSError) as e:
            self.log.warning("Using default config, %s is invalid: %s", self.config_path, e)
            self._config = AppConfig()

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """
        Get a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist
        """
        return self._lookup(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by dot-separated key and save.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value fails validation
        """
        self._lookup(self.config, key)

        config_dict = self.config.model_dump()
        current = config_dict
        keys = key.split(".")
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        # Validate the whole tree before replacing the live config
        self._config = AppConfig.model_validate(config_dict)
        self.save_config()
        self.log.info("Config %s set to %r", key, value)

    def reset(self, key: str | None = None) -> None:
        """Reset one key, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
        else:
            self.set(key, self._lookup(AppConfig(), key))

    @staticmethod
    def _lookup(config: AppConfig, key: str) -> Any:
        value: Any = config
        for k in key.split("."):
            if not isinstance(value, BaseModel) or k not in type(value).model_fields:
                raise KeyError(key)
            value = getattr(value, k)
        return value


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
