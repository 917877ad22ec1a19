"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading
    - Environment variable override (WAIT_TIMEOUT_SECONDS overrides wait.timeout_seconds)
    - Dot notation path access
    - Typed accessors that fall back to defaults with a warning

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"

# Named options read by the wait/retry core
WAIT_TIMEOUT_KEY = "wait.timeout_seconds"
WAIT_POLLING_KEY = "wait.polling_millis"
RETRY_ATTEMPTS_KEY = "retry.max_attempts"
RETRY_DELAY_KEY = "retry.base_delay_millis"

DEFAULT_WAIT_TIMEOUT_SECONDS = 10
DEFAULT_WAIT_POLLING_MILLIS = 500
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MILLIS = 500


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (WAIT_TIMEOUT_SECONDS)
        2. Explicit overrides passed to the constructor
        3. YAML configuration file
        4. Default values

    One loader is created per test session and handed to the components
    that need it; nothing looks it up globally.

    Usage:
        >>> config = ConfigLoader()
        >>> config.get_int("wait.timeout_seconds", 10)
        10
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
            overrides: Dot-notation values applied on top of the file
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._overrides: Dict[str, Any] = dict(overrides or {})
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key: Dot-notation path (e.g., "wait.timeout_seconds")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        if key in self._overrides:
            return self._overrides[key]

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_int(self, key: str, default: int, positive: bool = False) -> int:
        """
        Get an integer option, falling back to the default on bad input.

        Never raises: an unparsable (or, with ``positive``, non-positive)
        value logs a warning and yields ``default``.
        """
        raw = self.get(key, default)
        try:
            if isinstance(raw, bool):
                raise TypeError("boolean is not an integer option")
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer config for key '{key}': {raw!r}, using default {default}")
            return default
        if positive and value <= 0:
            logger.warning(f"Non-positive config for key '{key}': {value}, using default {default}")
            return default
        return value

    def get_float(self, key: str, default: float, positive: bool = False) -> float:
        """Float counterpart of get_int()."""
        raw = self.get(key, default)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid float config for key '{key}': {raw!r}, using default {default}")
            return default
        if positive and value <= 0:
            logger.warning(f"Non-positive config for key '{key}': {value}, using default {default}")
            return default
        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get(key, default)
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            return raw.strip().lower() in ("true", "1", "yes", "on")
        return bool(raw)

    @property
    def wait_timeout_seconds(self) -> int:
        return self.get_int(WAIT_TIMEOUT_KEY, DEFAULT_WAIT_TIMEOUT_SECONDS, positive=True)

    @property
    def wait_polling_millis(self) -> int:
        return self.get_int(WAIT_POLLING_KEY, DEFAULT_WAIT_POLLING_MILLIS, positive=True)

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "wait", "retry")

        Returns:
            Section dictionary or empty dict if not found
        """
        return self._config.get(section, {})

    def set(self, key: str, value: Any) -> None:
        """Set a runtime override for a dot-notation key."""
        self._overrides[key] = value

    def reload(self) -> None:
        """
        Reload configuration from file.

        Useful when configuration file has been updated during runtime.
        """
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "WAIT_TIMEOUT_KEY",
    "WAIT_POLLING_KEY",
    "RETRY_ATTEMPTS_KEY",
    "RETRY_DELAY_KEY",
    "DEFAULT_WAIT_TIMEOUT_SECONDS",
    "DEFAULT_WAIT_POLLING_MILLIS",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_MILLIS",
]
