"""
Density-adaptive windowing of long series around a scroll anchor.

Fixed-size windows misbehave when density varies (sparse historical years next
to dense recent months), so the window is sized from the local sample spacing:
it covers a constant multiple of the span's visible length while the point
count stays inside a fixed band.
"""

import logging
from datetime import datetime
from typing import List, Sequence

import numpy as np

from weightgraph import constants
from weightgraph.core.policy import DEFAULT_POLICY, PipelinePolicy
from weightgraph.core.series import Bin, Span, to_epoch_array


class ProgressiveWindower:
    """
    Selects the subset of a series to materialise for rendering.

    Pure and deterministic for a given (series, anchor, span): the result feeds
    an interactive cache, so no hidden state influences it.
    """

    def __init__(self, policy: PipelinePolicy = DEFAULT_POLICY) -> None:
        self.policy = policy
        self.logger = logging.getLogger("WeightGraph.ProgressiveWindower")

    def window(self, series: Sequence[Bin], anchor: datetime, span: Span) -> List[Bin]:
        """
        Returns the ascending run of points to materialise around `anchor`.

        Args:
            series: Points sorted ascending by timestamp.
            anchor: The current scroll position.
            span: The active span; its visible length sets the window duration.

        Returns:
            List[Bin]: The whole series when it is small, otherwise a contiguous
            slice whose length lies within [min_window_points, max_window_points].
        """
        if len(series) <= self.policy.small_series_threshold:
            return list(series)

        epochs = to_epoch_array(series)
        center = self.center_index(epochs, anchor)
        density = self.estimate_density(epochs, center)
        count = self.window_size(span, density, len(series))

        # Half before, half after; shifted inward at the edges so the count holds.
        start = center - count // 2
        start = max(0, min(start, len(series) - count))
        end = start + count

        self.logger.debug(
            "Windowed %d points to [%d:%d] (center=%d, density=%.0fs, span=%s)",
            len(series), start, end, center, density, span.value,
        )
        return list(series[start:end])

    @staticmethod
    def center_index(epochs: np.ndarray, anchor: datetime) -> int:
        """First index with timestamp >= anchor, or the midpoint when the anchor is past the end."""
        index = int(np.searchsorted(epochs, anchor.timestamp(), side="left"))
        if index >= len(epochs):
            return len(epochs) // 2
        return index

    def estimate_density(self, epochs: np.ndarray, center: int) -> float:
        """Average spacing in seconds over up to `density_sample_size` points on each side of `center`."""
        if len(epochs) < 2:
            return constants.pipeline.DEFAULT_DENSITY_SECONDS

        sample = self.policy.density_sample_size
        low = max(0, center - sample)
        high = min(len(epochs) - 1, center + sample)
        if high <= low:
            return constants.pipeline.DEFAULT_DENSITY_SECONDS

        spacing = float(np.mean(np.diff(epochs[low:high + 1])))
        if not np.isfinite(spacing) or spacing <= 0:
            return constants.pipeline.DEFAULT_DENSITY_SECONDS
        return spacing

    def window_size(self, span: Span, density_seconds: float, series_length: int) -> int:
        """Point count covering the buffered visible duration, clamped to the policy band."""
        duration = span.visible_length.total_seconds() * self.policy.window_buffer_multiplier
        count = int(round(duration / density_seconds))
        count = max(self.policy.min_window_points, min(self.policy.max_window_points, count))
        return min(count, series_length)
