"""
Configuration loader for the timing history preprocessor.

Loads settings from a YAML config file with an environment variable override
for its location.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from racehistory.utils.config_schema import validate_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RACEHISTORY_CONFIG"
DEFAULT_CONFIG_PATH = "config/default.yaml"


class Config:
    """Central configuration manager."""

    _instance: "Config | None" = None
    _config: dict[str, Any] | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self._load()

    def _load(self):
        """Load config from YAML file."""
        override = os.getenv(CONFIG_ENV_VAR)
        config_path = Path(override or DEFAULT_CONFIG_PATH)

        if not config_path.is_absolute():
            # Try relative to project root
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / config_path

        if not config_path.exists():
            if override:
                raise FileNotFoundError(f"Config file not found: {config_path}")
            # Installed without the source tree: schema defaults only
            logger.warning(f"Default config {config_path} not found, using built-in defaults")
            self._config = self._validate_config({})
            return

        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        self._config = self._validate_config(raw)
        logger.info(f"Configuration loaded successfully from {config_path}")

    @staticmethod
    def _validate_config(raw: Any) -> dict[str, Any]:
        """Validate the raw mapping and return it with defaults filled in."""
        if not isinstance(raw, dict):
            raise ValueError(
                f"Config validation failed: expected a mapping, got {type(raw).__name__}"
            )

        try:
            validated = validate_config(raw)
        except ValidationError as e:
            raise ValueError(f"Config validation failed:\n{e}") from e

        logger.debug("Config validation passed")
        return validated.model_dump()

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value using dot notation, returning default if not found."""
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, section: str) -> dict:
        """Get entire config section."""
        if self._config is None:
            return {}
        value = self._config.get(section, {})
        return value if isinstance(value, dict) else {}

    def reload(self):
        """Force reload config from file."""
        self._config = None
        self._load()


def _get_config() -> Config:
    return Config()


def get(key: str, default: Any = None) -> Any:
    """Get config value."""
    return _get_config().get(key, default)


def get_section(section: str) -> dict:
    """Get config section."""
    return _get_config().get_section(section)


def reload():
    """Reload config."""
    _get_config().reload()
