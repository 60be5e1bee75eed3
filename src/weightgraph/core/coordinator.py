"""
Coordinates state changes (span, scroll, unit, data refreshes) with the
windowing pipeline and hands finished frames to the rendering layer.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from weightgraph import constants
from weightgraph.core.normalizer import SeriesNormalizer, value_range
from weightgraph.core.policy import DEFAULT_POLICY, PipelinePolicy
from weightgraph.core.segments import SegmentBuilder
from weightgraph.core.series import Bin, Metric, Span
from weightgraph.core.store import TimeSeriesStore
from weightgraph.core.trend import TrendLine, linear_trend
from weightgraph.core.units import WeightUnit
from weightgraph.core.view_cache import CachedView, CacheKey, DerivedViewCache, bucket_anchor, scroll_bucket
from weightgraph.core.window_model import SpanWindowModel
from weightgraph.core.windowing import ProgressiveWindower
from weightgraph.utils.preferences import PreferenceStore
from weightgraph.utils.timer_utils import clamp_debounce_interval, cleanup_timer, create_timer


@dataclass(frozen=True)
class ChartFrame:
    """
    Everything the renderer needs for one frame.

    Attributes:
        span: The active span.
        unit: The active weight unit.
        scroll_anchor: The anchor the frame was windowed around (None without data).
        weight_segments: Gap-free runs of weight points, in `unit`.
        bmi_segments: Gap-free runs of BMI points rescaled onto the weight axis;
                      empty while the overlay is hidden.
        y_domain: (low, high) of the vertical axis, in `unit`.
        visible_duration: Length of the x-axis window.
        trend: Least-squares line over the windowed weight points.
        target_range: Goal band in `unit`.
    """
    span: Span
    unit: WeightUnit
    scroll_anchor: Optional[datetime]
    weight_segments: List[List[Bin]] = field(default_factory=list)
    bmi_segments: List[List[Bin]] = field(default_factory=list)
    y_domain: Tuple[float, float] = constants.pipeline.EMPTY_Y_DOMAIN
    visible_duration: timedelta = timedelta(days=7)
    trend: Optional[TrendLine] = None
    target_range: Optional[Tuple[float, float]] = None

    @property
    def is_empty(self) -> bool:
        return not self.weight_segments and not self.bmi_segments


def padded_domain(points: List[Bin], padding_fraction: float) -> Tuple[float, float]:
    """Value range of `points` widened by `padding_fraction` of the spread on each side."""
    bounds = value_range(points)
    if bounds is None:
        return constants.pipeline.EMPTY_Y_DOMAIN
    low, high = bounds
    if high <= low:
        pad = constants.pipeline.FLAT_SERIES_PADDING
    else:
        pad = (high - low) * padding_fraction
    return low - pad, high + pad


class ChartCoordinator(QObject):
    """
    Owns the window state, the pipeline stages and the derived view cache.

    Every state change restarts a single-shot debounce timer; when it fires the
    frame for the newest state is computed (or fetched from the cache) and
    emitted through `frame_ready`.
    """
    frame_ready = pyqtSignal(object)  # ChartFrame

    def __init__(self, store: TimeSeriesStore, policy: PipelinePolicy = DEFAULT_POLICY,
                 preferences: Optional[PreferenceStore] = None,
                 target_range_kg: Optional[Tuple[float, float]] = None,
                 show_bmi: bool = False, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logging.getLogger("WeightGraph.ChartCoordinator")
        self.store = store
        self.policy = policy
        self.preferences = preferences
        self.target_range_kg = target_range_kg
        self.show_bmi = show_bmi

        unit = WeightUnit.load(preferences) if preferences is not None else WeightUnit.KILOGRAM
        self.model = SpanWindowModel(store, unit=unit)
        self.windower = ProgressiveWindower(policy)
        self.segment_builder = SegmentBuilder(policy)
        self.normalizer = SeriesNormalizer()
        self.cache = DerivedViewCache(policy.view_cache_max_entries)
        self._is_shut_down = False

        self.update_debounce_timer = create_timer(
            self, self._execute_debounced_update, clamp_debounce_interval(policy.debounce_ms), single_shot=True
        )

        self.store.data_published.connect(self.handle_data_published)

    # --- State transitions ---

    def set_span(self, span: Span) -> None:
        """Switches span; the cache context changes so every cached view is dropped."""
        if span is self.model.span:
            return
        self.logger.debug("Coordinator: span change to %s", span.value)
        self.model.set_span(span)
        self.schedule_update()

    def set_unit(self, unit: WeightUnit) -> None:
        """Switches unit without refetching and persists the preference."""
        if unit is self.model.unit:
            return
        self.logger.debug("Coordinator: unit change to %s", unit.value)
        self.model.set_unit(unit)
        if self.preferences is not None:
            unit.save(self.preferences)
        self.schedule_update()

    def set_scroll_anchor(self, anchor: datetime) -> None:
        self.model.set_scroll_anchor(anchor)
        self.model.clamp_anchor()
        self.schedule_update()

    def set_show_bmi(self, show: bool) -> None:
        if show == self.show_bmi:
            return
        self.show_bmi = show
        self.schedule_update()

    def handle_data_published(self, data_version: int) -> None:
        self.logger.debug("Coordinator: data version %d published", data_version)
        self.model.clamp_anchor()
        self.schedule_update()

    def on_appear(self) -> None:
        """Kicks off a (possibly cached) refresh each time the chart becomes visible."""
        self.store.refresh()
        self.schedule_update()

    # --- Debounced recompute ---

    def schedule_update(self) -> None:
        """Restarts the debounce timer so a burst of changes computes only the last state."""
        if self._is_shut_down:
            return
        self.update_debounce_timer.start()

    def flush(self) -> Optional[ChartFrame]:
        """Runs a pending debounced update immediately; returns the emitted frame, if any."""
        if self._is_shut_down or not self.update_debounce_timer.isActive():
            return None
        self.update_debounce_timer.stop()
        return self._execute_debounced_update()

    def shutdown(self) -> None:
        """Stops pending updates and detaches from the store."""
        if self._is_shut_down:
            return
        self._is_shut_down = True
        self.store.data_published.disconnect(self.handle_data_published)
        cleanup_timer(self.update_debounce_timer)
        self.logger.debug("Coordinator shut down")

    def _execute_debounced_update(self) -> ChartFrame:
        frame = self.current_frame()
        self.frame_ready.emit(frame)
        return frame

    # --- Frame assembly ---

    def current_key(self) -> CacheKey:
        anchor = self.model.scroll_anchor
        bucket = scroll_bucket(anchor, self.policy.scroll_bucket) if anchor is not None else 0
        return CacheKey(span=self.model.span, unit=self.model.unit,
                        data_version=self.store.data_version, scroll_bucket=bucket)

    def current_view(self) -> CachedView:
        """Returns the derived view for the current state, computing and caching it on a miss."""
        self.cache.sync(self.model.span, self.model.unit, self.store.data_version)
        key = self.current_key()
        view = self.cache.get(key)
        if view is None:
            view = self.derive_view(key)
            self.cache.put(key, view)
        return view

    def derive_view(self, key: CacheKey) -> CachedView:
        """Runs windowing, segmentation and normalisation for the bucket of `key`."""
        anchor = self.model.scroll_anchor
        bounds = self.model.data_bounds()
        if anchor is not None and bounds is not None:
            # Window around the bucket's own anchor so every anchor in a bucket sees the same view.
            anchor = bucket_anchor(key.scroll_bucket, self.policy.scroll_bucket, anchor)
            anchor = min(max(anchor, bounds[0]), bounds[1])

        weight = self.model.visible_points(Metric.WEIGHT)
        bmi = self.model.visible_points(Metric.BMI)
        if anchor is not None:
            weight = self.windower.window(weight, anchor, key.span)
            bmi = self.windower.window(bmi, anchor, key.span)

        # Both ranges come from the windowed view so the overlay matches what is visible.
        normalized_bmi = self.normalizer.normalize(bmi, value_range(weight), value_range(bmi))

        return CachedView(
            weight_points=weight,
            weight_segments=self.segment_builder.segments(weight, key.span),
            bmi_points=normalized_bmi,
            bmi_segments=self.segment_builder.segments(normalized_bmi, key.span),
            y_domain=padded_domain(weight, self.policy.y_axis_padding_fraction),
            trend=linear_trend(weight),
        )

    def current_frame(self) -> ChartFrame:
        view = self.current_view()
        unit = self.model.unit
        target = None
        if self.target_range_kg is not None:
            target = (unit.convert(self.target_range_kg[0]), unit.convert(self.target_range_kg[1]))

        return ChartFrame(
            span=self.model.span,
            unit=unit,
            scroll_anchor=self.model.scroll_anchor,
            weight_segments=view.weight_segments,
            bmi_segments=view.bmi_segments if self.show_bmi else [],
            y_domain=view.y_domain,
            visible_duration=self.model.span.visible_length,
            trend=view.trend,
            target_range=target,
        )
