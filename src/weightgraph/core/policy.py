"""
Tunable policy for the windowing pipeline.

The window sizes, gap thresholds and bucket widths below were tuned
empirically. They travel through the pipeline as one validated value object
so they can be overridden from the configuration file.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict

from weightgraph import constants
from weightgraph.core.series import Span


@dataclass(frozen=True)
class PipelinePolicy:
    """
    Validated set of pipeline tuning parameters.

    Attributes:
        small_series_threshold: Series at or below this length are never windowed.
        min_window_points: Lower clamp for the adaptive window size.
        max_window_points: Upper clamp for the adaptive window size.
        window_buffer_multiplier: Visible lengths materialised around the anchor.
        density_sample_size: Points sampled on each side of the anchor to estimate density.
        max_gap_days_week: Largest gap (days) kept inside one segment for the week span.
        max_gap_days_month: Same, for the month span.
        max_gap_days_year: Same, for the year span.
        scroll_bucket_hours: Width of one scroll bucket in the derived view cache.
        view_cache_max_entries: LRU capacity of the derived view cache.
        cache_expiry_seconds: Age after which a non-forced refresh fetches again.
        debounce_ms: Coalescing interval for recompute triggers.
        y_axis_padding_fraction: Fraction of the value spread added above and below.
    """
    small_series_threshold: int = constants.pipeline.SMALL_SERIES_THRESHOLD
    min_window_points: int = constants.pipeline.MIN_WINDOW_POINTS
    max_window_points: int = constants.pipeline.MAX_WINDOW_POINTS
    window_buffer_multiplier: float = constants.pipeline.WINDOW_BUFFER_MULTIPLIER
    density_sample_size: int = constants.pipeline.DENSITY_SAMPLE_SIZE
    max_gap_days_week: float = constants.pipeline.MAX_GAP_DAYS["week"]
    max_gap_days_month: float = constants.pipeline.MAX_GAP_DAYS["month"]
    max_gap_days_year: float = constants.pipeline.MAX_GAP_DAYS["year"]
    scroll_bucket_hours: float = constants.pipeline.SCROLL_BUCKET_HOURS
    view_cache_max_entries: int = constants.pipeline.VIEW_CACHE_MAX_ENTRIES
    cache_expiry_seconds: float = constants.timers.CACHE_EXPIRY_SECONDS
    debounce_ms: int = constants.timers.DEFAULT_DEBOUNCE_MS
    y_axis_padding_fraction: float = constants.pipeline.Y_AXIS_PADDING_FRACTION

    def __post_init__(self):
        """Validate policy parameters."""
        for name in ("small_series_threshold", "min_window_points", "max_window_points",
                     "density_sample_size", "view_cache_max_entries", "debounce_ms"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive int, got {value!r}")

        if self.min_window_points > self.max_window_points:
            raise ValueError(
                f"min_window_points ({self.min_window_points}) must not exceed "
                f"max_window_points ({self.max_window_points})"
            )

        if self.window_buffer_multiplier < 1.0:
            raise ValueError(f"window_buffer_multiplier must be >= 1.0, got {self.window_buffer_multiplier}")

        for name in ("max_gap_days_week", "max_gap_days_month", "max_gap_days_year", "scroll_bucket_hours"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        if self.cache_expiry_seconds < 0:
            raise ValueError(f"cache_expiry_seconds must be non-negative, got {self.cache_expiry_seconds}")

        if not (0.0 <= self.y_axis_padding_fraction <= 1.0):
            raise ValueError(f"y_axis_padding_fraction must be within [0, 1], got {self.y_axis_padding_fraction}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PipelinePolicy":
        """Builds a policy from a validated configuration dictionary, ignoring unrelated keys."""
        fields = cls.__dataclass_fields__
        kwargs = {key: config[key] for key in fields if key in config}
        for key in ("small_series_threshold", "min_window_points", "max_window_points",
                    "density_sample_size", "view_cache_max_entries", "debounce_ms"):
            if key in kwargs:
                kwargs[key] = int(kwargs[key])
        return cls(**kwargs)

    def max_gap(self, span: Span) -> timedelta:
        """Largest distance between neighbouring points that still draws one connected line."""
        days = {
            Span.WEEK: self.max_gap_days_week,
            Span.MONTH: self.max_gap_days_month,
            Span.YEAR: self.max_gap_days_year,
        }[span]
        return timedelta(days=days)

    @property
    def scroll_bucket(self) -> timedelta:
        return timedelta(hours=self.scroll_bucket_hours)


DEFAULT_POLICY = PipelinePolicy()
