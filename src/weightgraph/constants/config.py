"""
Constants for application configuration defaults and constraints.
"""
from typing import Final, Dict, Any, Tuple

from .pipeline import pipeline
from .timers import timers

class ConfigMessages:
    """Log message templates for configuration validation."""
    INVALID_NUMERIC: Final[str] = "Invalid {key} '{value}', resetting to default '{default}'"
    INVALID_BOOLEAN: Final[str] = "Invalid {key} '{value}', resetting to boolean default '{default}'"
    WINDOW_BOUNDS_SWAP: Final[str] = "min_window_points > max_window_points, setting min to max's value"
    TARGET_RANGE_SWAP: Final[str] = "target_min_kg > target_max_kg, resetting both to defaults"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for attr_name in dir(self):
            if not attr_name.startswith('_') and attr_name.isupper():
                value = getattr(self, attr_name)
                if not isinstance(value, str) or not value:
                    raise ValueError(f"ConfigMessages.{attr_name} must be a non-empty string.")


class ConfigConstants:
    """Defines default values and constraints for all application settings."""
    DEFAULT_CACHE_EXPIRY_SECONDS: Final[float] = timers.CACHE_EXPIRY_SECONDS
    DEFAULT_DEBOUNCE_MS: Final[int] = timers.DEFAULT_DEBOUNCE_MS
    DEFAULT_TARGET_MIN_KG: Final[float] = 68.0
    DEFAULT_TARGET_MAX_KG: Final[float] = 72.0
    DEFAULT_SHOW_BMI: Final[bool] = False

    CONFIG_FILENAME: Final[str] = "WeightGraph_Config.json"
    PREFERENCES_FILENAME: Final[str] = "WeightGraph_Preferences.json"
    UNIT_PREFERENCE_KEY: Final[str] = "WeightUnitPreference"

    # Inclusive (min, max) accepted for each numeric key.
    NUMERIC_RANGES: Final[Dict[str, Tuple[float, float]]] = {
        "cache_expiry_seconds": (0, timers.MAXIMUM_CACHE_EXPIRY_SECONDS),
        "debounce_ms": (timers.MINIMUM_DEBOUNCE_MS, timers.MAXIMUM_DEBOUNCE_MS),
        "small_series_threshold": (1, 1_000_000),
        "min_window_points": (1, 1_000_000),
        "max_window_points": (1, 1_000_000),
        "window_buffer_multiplier": (1.0, 100.0),
        "density_sample_size": (1, 10_000),
        "max_gap_days_week": (0.01, 3650),
        "max_gap_days_month": (0.01, 3650),
        "max_gap_days_year": (0.01, 3650),
        "scroll_bucket_hours": (0.01, 24 * 365),
        "view_cache_max_entries": (1, 10_000),
        "y_axis_padding_fraction": (0.0, 1.0),
        "target_min_kg": (0.0, 1000.0),
        "target_max_kg": (0.0, 1000.0),
    }

    DEFAULT_CONFIG: Final[Dict[str, Any]] = {
        "cache_expiry_seconds": DEFAULT_CACHE_EXPIRY_SECONDS,
        "debounce_ms": DEFAULT_DEBOUNCE_MS,
        "small_series_threshold": pipeline.SMALL_SERIES_THRESHOLD,
        "min_window_points": pipeline.MIN_WINDOW_POINTS,
        "max_window_points": pipeline.MAX_WINDOW_POINTS,
        "window_buffer_multiplier": pipeline.WINDOW_BUFFER_MULTIPLIER,
        "density_sample_size": pipeline.DENSITY_SAMPLE_SIZE,
        "max_gap_days_week": pipeline.MAX_GAP_DAYS["week"],
        "max_gap_days_month": pipeline.MAX_GAP_DAYS["month"],
        "max_gap_days_year": pipeline.MAX_GAP_DAYS["year"],
        "scroll_bucket_hours": pipeline.SCROLL_BUCKET_HOURS,
        "view_cache_max_entries": pipeline.VIEW_CACHE_MAX_ENTRIES,
        "y_axis_padding_fraction": pipeline.Y_AXIS_PADDING_FRACTION,
        "target_min_kg": DEFAULT_TARGET_MIN_KG,
        "target_max_kg": DEFAULT_TARGET_MAX_KG,
        "show_bmi": DEFAULT_SHOW_BMI,
    }

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        numeric_keys = set(self.NUMERIC_RANGES.keys())
        missing = numeric_keys - set(self.DEFAULT_CONFIG.keys())
        if missing:
            raise ValueError(f"NUMERIC_RANGES keys missing from DEFAULT_CONFIG: {sorted(missing)}")
        for key, (low, high) in self.NUMERIC_RANGES.items():
            if not (low <= self.DEFAULT_CONFIG[key] <= high):
                raise ValueError(f"Default for {key} lies outside its range [{low}, {high}]")
        if self.DEFAULT_TARGET_MIN_KG > self.DEFAULT_TARGET_MAX_KG:
            raise ValueError("DEFAULT_TARGET_MIN_KG must not exceed DEFAULT_TARGET_MAX_KG")
        if not self.CONFIG_FILENAME or not self.PREFERENCES_FILENAME:
            raise ValueError("Config and preference filenames must not be empty")


class ConfigConstantsContainer:
    """Container for configuration-related constant groups."""
    def __init__(self) -> None:
        self.defaults = ConfigConstants()
        self.messages = ConfigMessages()

# Singleton instance for easy access
config = ConfigConstantsContainer()
