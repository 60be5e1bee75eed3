"""
Constants for timer intervals used within the application.
"""

from typing import Final

class TimerConstants:
    """Defines the timer intervals for debouncing and refresh scheduling."""
    DEFAULT_DEBOUNCE_MS: Final[int] = 50
    MINIMUM_DEBOUNCE_MS: Final[int] = 1
    MAXIMUM_DEBOUNCE_MS: Final[int] = 1000
    CACHE_EXPIRY_SECONDS: Final[float] = 300.0
    MAXIMUM_CACHE_EXPIRY_SECONDS: Final[float] = 24 * 60 * 60.0
    REFRESH_WAIT_TIMEOUT_MS: Final[int] = 5000

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate the timer constants to ensure they are positive."""
        for attr_name in dir(self):
            if attr_name.endswith("_MS") or attr_name.endswith("_SECONDS"):
                value = getattr(self, attr_name)
                if not isinstance(value, (int, float)) or value <= 0:
                    raise ValueError(f"{attr_name} must be a positive number.")
        if not (self.MINIMUM_DEBOUNCE_MS <= self.DEFAULT_DEBOUNCE_MS <= self.MAXIMUM_DEBOUNCE_MS):
            raise ValueError("DEFAULT_DEBOUNCE_MS must lie within the debounce bounds")

# Singleton instance for easy access
timers = TimerConstants()
