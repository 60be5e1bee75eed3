"""
Default policy values for the windowing, segmentation and caching pipeline.

These numbers were tuned by eye against ten years of daily samples; they are
defaults only and can be overridden through the configuration file.
"""
from typing import Final, Dict

class PipelineConstants:
    """Defines the default tuning of the data-windowing pipeline."""
    # --- Progressive windowing ---
    SMALL_SERIES_THRESHOLD: Final[int] = 1000
    MIN_WINDOW_POINTS: Final[int] = 500
    MAX_WINDOW_POINTS: Final[int] = 2000
    WINDOW_BUFFER_MULTIPLIER: Final[float] = 4.0
    DENSITY_SAMPLE_SIZE: Final[int] = 50
    DEFAULT_DENSITY_SECONDS: Final[float] = 24 * 60 * 60.0

    # --- Segmentation (maximum gap kept inside one line, in days) ---
    MAX_GAP_DAYS: Final[Dict[str, float]] = {
        "week": 3,
        "month": 7,
        "year": 30,
    }

    # --- Derived view cache ---
    SCROLL_BUCKET_HOURS: Final[float] = 12.0
    VIEW_CACHE_MAX_ENTRIES: Final[int] = 32

    # --- Presentation ---
    Y_AXIS_PADDING_FRACTION: Final[float] = 0.1
    FLAT_SERIES_PADDING: Final[float] = 1.0
    EMPTY_Y_DOMAIN: Final[tuple] = (0.0, 1.0)

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not (0 < self.MIN_WINDOW_POINTS <= self.MAX_WINDOW_POINTS):
            raise ValueError("MIN_WINDOW_POINTS must be positive and <= MAX_WINDOW_POINTS")
        if self.SMALL_SERIES_THRESHOLD <= 0:
            raise ValueError("SMALL_SERIES_THRESHOLD must be positive")
        if self.WINDOW_BUFFER_MULTIPLIER < 1.0:
            raise ValueError("WINDOW_BUFFER_MULTIPLIER must be >= 1.0")
        if set(self.MAX_GAP_DAYS.keys()) != {"week", "month", "year"}:
            raise ValueError("MAX_GAP_DAYS must define week, month and year")
        if any(days <= 0 for days in self.MAX_GAP_DAYS.values()):
            raise ValueError("MAX_GAP_DAYS values must be positive")
        if self.SCROLL_BUCKET_HOURS <= 0:
            raise ValueError("SCROLL_BUCKET_HOURS must be positive")
        if self.VIEW_CACHE_MAX_ENTRIES <= 0:
            raise ValueError("VIEW_CACHE_MAX_ENTRIES must be positive")
        if self.EMPTY_Y_DOMAIN[0] >= self.EMPTY_Y_DOMAIN[1]:
            raise ValueError("EMPTY_Y_DOMAIN must be an increasing pair")

# Singleton instance for easy access
pipeline = PipelineConstants()
