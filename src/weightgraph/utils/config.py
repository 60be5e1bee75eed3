"""
Configuration management for WeightGraph.

This module provides a ConfigManager for loading, validating, and saving the
pipeline tuning and chart settings to a JSON file. It merges defaults for missing
keys, sanitises every value, and writes atomically so a crash can never leave a
half-written file behind.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .helpers import get_app_data_path
from weightgraph import constants


class ConfigError(Exception):
    """Custom exception for configuration-related errors, such as I/O or permission issues."""


class ConfigManager:
    """
    Manages loading, saving, and validation of WeightGraph's configuration.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        """
        Initializes the ConfigManager.

        Args:
            config_path: Location of the JSON file; defaults to the app data directory.
        """
        self.config_path = Path(config_path or get_app_data_path() / constants.config.defaults.CONFIG_FILENAME)
        self.logger = logging.getLogger("WeightGraph.Config")
        self._last_config: Optional[Dict[str, Any]] = None

    def _validate_numeric(self, key: str, value: Any, default: Any, min_v: float, max_v: float) -> Union[int, float]:
        """Validates a numeric value is within a given range."""
        try:
            if isinstance(value, bool):
                raise TypeError("Booleans are not numeric settings")
            num_value = float(value)
            if not (min_v <= num_value <= max_v):
                raise ValueError("Value out of range")
            return int(num_value) if isinstance(default, int) else num_value
        except (TypeError, ValueError):
            self.logger.warning(constants.config.messages.INVALID_NUMERIC.format(key=key, value=value, default=default))
            return default

    def _validate_boolean(self, key: str, value: Any, default: bool) -> bool:
        """Validates a value is a boolean."""
        if isinstance(value, bool):
            return value
        self.logger.warning(constants.config.messages.INVALID_BOOLEAN.format(key=key, value=value, default=default))
        return default

    def _validate_config(self, loaded_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validates the configuration, merges it with defaults for missing keys,
        and sanitizes all values.
        """
        validated = constants.config.defaults.DEFAULT_CONFIG.copy()
        validated.update(loaded_config)
        default_ref = constants.config.defaults.DEFAULT_CONFIG

        unknown_keys = set(loaded_config.keys()) - set(default_ref.keys())
        if unknown_keys:
            self.logger.warning("Ignoring unknown config fields: %s", ", ".join(sorted(unknown_keys)))

        for key, (min_v, max_v) in constants.config.defaults.NUMERIC_RANGES.items():
            validated[key] = self._validate_numeric(key, validated.get(key), default_ref[key], min_v, max_v)

        validated["show_bmi"] = self._validate_boolean("show_bmi", validated.get("show_bmi"), default_ref["show_bmi"])

        if validated["min_window_points"] > validated["max_window_points"]:
            self.logger.warning(constants.config.messages.WINDOW_BOUNDS_SWAP)
            validated["min_window_points"] = validated["max_window_points"]

        if validated["target_min_kg"] > validated["target_max_kg"]:
            self.logger.warning(constants.config.messages.TARGET_RANGE_SWAP)
            validated["target_min_kg"] = default_ref["target_min_kg"]
            validated["target_max_kg"] = default_ref["target_max_kg"]

        return {key: validated[key] for key in default_ref}

    def load(self) -> Dict[str, Any]:
        """Loads and validates the configuration from the file."""
        if not self.config_path.exists():
            self.logger.info("Configuration file not found. Creating with default settings.")
            return self.reset_to_defaults()
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError:
            self.logger.error("Configuration file is corrupt. Backing it up and using defaults.")
            try:
                corrupt_path = self.config_path.with_name(f"{self.config_path.name}.corrupt")
                shutil.move(self.config_path, corrupt_path)
            except OSError:
                self.logger.exception("Failed to back up corrupt config file.")
            return self.reset_to_defaults()
        except OSError as e:
            msg = f"OS error reading config file {self.config_path}: {e}"
            self.logger.critical(msg)
            raise ConfigError(msg) from e

        if not isinstance(config, dict):
            self.logger.error("Configuration file does not contain an object. Using defaults.")
            return self.reset_to_defaults()

        validated_config = self._validate_config(config)
        self._last_config = validated_config.copy()
        return validated_config

    def save(self, config: Dict[str, Any]) -> None:
        """Atomically saves the provided configuration to the file."""
        validated_config = self._validate_config(config)

        if self._last_config == validated_config:
            self.logger.debug("Skipping save, configuration is unchanged.")
            return

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=self.config_path.parent, encoding="utf-8"
            ) as temp_f:
                json.dump(validated_config, temp_f, indent=4)
                temp_path = temp_f.name
            shutil.move(temp_path, self.config_path)
            self._last_config = validated_config.copy()
            self.logger.debug("Configuration saved successfully to %s", self.config_path)
        except OSError as e:
            msg = f"Failed to save configuration to {self.config_path}: {e}"
            self.logger.error(msg)
            raise ConfigError(msg) from e

    def reset_to_defaults(self) -> Dict[str, Any]:
        """Resets the configuration to factory defaults and saves it."""
        self.logger.info("Resetting configuration to default values.")
        defaults = constants.config.defaults.DEFAULT_CONFIG.copy()
        self.save(defaults)
        return defaults
