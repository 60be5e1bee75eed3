"""
Active span, scroll anchor and unit, and the full series the pipeline reads.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple

from weightgraph.core.series import Bin, Metric, Span
from weightgraph.core.store import TimeSeriesStore
from weightgraph.core.units import WeightUnit


@dataclass(frozen=True)
class WindowState:
    """
    Chart view state. Only the UI layer changes it, through `SpanWindowModel`.

    Attributes:
        span: The selected span.
        scroll_anchor: Current scroll position; None until data first arrives.
        unit: The display unit for weight.
    """
    span: Span
    scroll_anchor: Optional[datetime]
    unit: WeightUnit


class SpanWindowModel:
    """
    Read-only view of the store for the active span.

    Weight points are converted into the active unit; BMI is unitless and
    passed through. No truncation happens here, windowing is left to
    `ProgressiveWindower`.
    """

    def __init__(self, store: TimeSeriesStore, span: Span = Span.WEEK,
                 scroll_anchor: Optional[datetime] = None,
                 unit: WeightUnit = WeightUnit.KILOGRAM) -> None:
        self.store = store
        self.logger = logging.getLogger("WeightGraph.SpanWindowModel")
        self._state = WindowState(span=span, scroll_anchor=scroll_anchor, unit=unit)

    @property
    def state(self) -> WindowState:
        return self._state

    @property
    def span(self) -> Span:
        return self._state.span

    @property
    def scroll_anchor(self) -> Optional[datetime]:
        return self._state.scroll_anchor

    @property
    def unit(self) -> WeightUnit:
        return self._state.unit

    def set_span(self, span: Span) -> None:
        """Switches span and clamps the anchor into the new series' date range."""
        self._state = replace(self._state, span=span)
        self.clamp_anchor()

    def set_unit(self, unit: WeightUnit) -> None:
        self._state = replace(self._state, unit=unit)

    def set_scroll_anchor(self, anchor: datetime) -> None:
        self._state = replace(self._state, scroll_anchor=anchor)

    def clamp_anchor(self) -> None:
        """
        Keeps the anchor within [first, last] of the active span's data.

        Weight data decides the bounds; BMI is used when there is no weight data,
        and the anchor is left alone when both are empty. An unset anchor moves
        to the most recent sample.
        """
        bounds = self.data_bounds()
        if bounds is None:
            return
        anchor = self.scroll_anchor
        clamped = bounds[1] if anchor is None else min(max(anchor, bounds[0]), bounds[1])
        if clamped != anchor:
            self.logger.debug("Moved scroll anchor from %s to %s", anchor, clamped)
            self._state = replace(self._state, scroll_anchor=clamped)

    def data_bounds(self) -> Optional[Tuple[datetime, datetime]]:
        """(first, last) timestamp of the weight series, else of the BMI series, else None."""
        series = self.store.series_for(self.span, Metric.WEIGHT) or self.store.series_for(self.span, Metric.BMI)
        if not series:
            return None
        return series[0].timestamp, series[-1].timestamp

    def visible_points(self, metric: Metric) -> List[Bin]:
        """The full series for the active span, unit-converted for weight."""
        series = self.store.series_for(self.span, metric)
        if metric is Metric.BMI or self.unit is WeightUnit.KILOGRAM:
            return list(series)
        factor = self.unit.factor
        return [Bin(timestamp=b.timestamp, value=b.value * factor) for b in series]
