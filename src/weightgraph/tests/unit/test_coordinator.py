"""
Unit tests for ChartCoordinator: debounced recompute, cache use and frame
assembly, plus the empty-input path through every pipeline stage.
"""
from datetime import timedelta

import pytest

from weightgraph.core.coordinator import ChartCoordinator, padded_domain
from weightgraph.core.normalizer import SeriesNormalizer, value_range
from weightgraph.core.segments import SegmentBuilder
from weightgraph.core.series import Metric, Span
from weightgraph.core.store import TimeSeriesStore
from weightgraph.core.trend import linear_trend
from weightgraph.core.units import WeightUnit
from weightgraph.core.windowing import ProgressiveWindower
from weightgraph.utils.preferences import PreferenceStore
from sample_data import BASE_TIME, MockWeightProvider, daily_series, wait_until


def _published_store(provider):
    store = TimeSeriesStore(provider)
    store.refresh()
    assert wait_until(lambda: store.data_version == 1)
    return store


@pytest.fixture
def frames():
    return []


@pytest.fixture
def coordinator(q_app, weight_provider, frames, tmp_path):
    store = TimeSeriesStore(weight_provider)
    coordinator = ChartCoordinator(store, preferences=PreferenceStore(tmp_path / "prefs.json"),
                                   target_range_kg=(68.0, 72.0))
    store.refresh()
    assert wait_until(lambda: store.data_version == 1)
    coordinator.flush()
    coordinator.frame_ready.connect(frames.append)
    return coordinator


class TestEmptyInput:
    def test_every_stage_accepts_empty_input(self):
        assert ProgressiveWindower().window([], BASE_TIME, Span.YEAR) == []
        assert SegmentBuilder().segments([], Span.YEAR) == []
        assert SeriesNormalizer.normalize([], value_range([]), value_range([])) == []
        assert linear_trend([]) is None
        assert padded_domain([], 0.1) == (0.0, 1.0)

    def test_coordinator_produces_empty_frame(self, q_app):
        store = _published_store(MockWeightProvider())
        coordinator = ChartCoordinator(store, show_bmi=True)
        frame = coordinator.current_frame()
        assert frame.is_empty
        assert frame.weight_segments == []
        assert frame.bmi_segments == []
        assert frame.y_domain == (0.0, 1.0)
        assert frame.trend is None
        assert frame.scroll_anchor is None


def test_data_publish_anchors_to_latest_sample(coordinator, weight_provider):
    assert coordinator.model.scroll_anchor == weight_provider.weight[-1].timestamp


def test_burst_of_changes_emits_single_frame(coordinator, frames):
    coordinator.set_span(Span.MONTH)
    coordinator.set_span(Span.YEAR)
    coordinator.set_unit(WeightUnit.POUND)
    assert coordinator.update_debounce_timer.isActive()

    frame = coordinator.flush()
    assert frames == [frame]
    assert frame.span is Span.YEAR
    assert frame.unit is WeightUnit.POUND
    assert coordinator.flush() is None


def test_debounce_timer_fires_on_its_own(coordinator, frames):
    coordinator.set_span(Span.MONTH)
    assert wait_until(lambda: bool(frames))
    assert len(frames) == 1
    assert frames[0].span is Span.MONTH


def test_unit_change_converts_frame_and_target(coordinator, weight_provider):
    kilograms = coordinator.current_frame()
    coordinator.set_unit(WeightUnit.POUND)
    pounds = coordinator.current_frame()

    assert pounds.weight_segments[0][0].value == pytest.approx(kilograms.weight_segments[0][0].value * 2.20462)
    assert pounds.target_range == pytest.approx((68.0 * 2.20462, 72.0 * 2.20462))
    assert kilograms.target_range == (68.0, 72.0)


def test_unit_change_is_persisted(coordinator):
    coordinator.set_unit(WeightUnit.POUND)
    assert WeightUnit.load(coordinator.preferences) is WeightUnit.POUND


def test_unit_preference_is_loaded_at_startup(q_app, weight_provider, tmp_path):
    preferences = PreferenceStore(tmp_path / "prefs.json")
    WeightUnit.POUND.save(preferences)
    coordinator = ChartCoordinator(TimeSeriesStore(weight_provider), preferences=preferences)
    assert coordinator.model.unit is WeightUnit.POUND


def test_context_change_invalidates_cache(coordinator):
    coordinator.current_view()
    old_key = coordinator.current_key()
    assert old_key in coordinator.cache

    coordinator.set_unit(WeightUnit.POUND)
    new_key = coordinator.current_key()
    assert new_key != old_key
    assert coordinator.cache.get(new_key) is None

    coordinator.current_view()
    assert old_key not in coordinator.cache
    assert new_key in coordinator.cache


def test_scroll_within_bucket_reuses_view(coordinator):
    view = coordinator.current_view()
    coordinator.set_scroll_anchor(coordinator.model.scroll_anchor - timedelta(hours=1))
    assert coordinator.current_view() is view
    assert len(coordinator.cache) == 1

    coordinator.set_scroll_anchor(coordinator.model.scroll_anchor - timedelta(days=3))
    assert coordinator.current_view() is not view
    assert len(coordinator.cache) == 2


def test_scroll_anchor_is_clamped(coordinator, weight_provider):
    coordinator.set_scroll_anchor(BASE_TIME - timedelta(days=400))
    assert coordinator.model.scroll_anchor == weight_provider.weight[0].timestamp


def test_bmi_overlay_toggle(coordinator):
    assert coordinator.current_frame().bmi_segments == []
    coordinator.set_show_bmi(True)
    frame = coordinator.current_frame()
    assert frame.bmi_segments

    weight_values = [b.value for segment in frame.weight_segments for b in segment]
    low, high = min(weight_values), max(weight_values)
    for segment in frame.bmi_segments:
        assert all(low <= b.value <= high for b in segment)


def test_frame_contents(coordinator, weight_provider):
    frame = coordinator.current_frame()
    assert [b for segment in frame.weight_segments for b in segment] == weight_provider.weight
    assert frame.visible_duration == Span.WEEK.visible_length
    low, high = value_range(weight_provider.weight)
    assert frame.y_domain[0] < low and frame.y_domain[1] > high
    assert frame.trend is not None


def test_large_series_is_windowed(q_app):
    provider = MockWeightProvider(weight=daily_series(3650), bmi=daily_series(3650, value=lambda i: 22.0 + i % 5))
    coordinator = ChartCoordinator(_published_store(provider), show_bmi=True)
    coordinator.handle_data_published(1)
    coordinator.set_span(Span.YEAR)
    frame = coordinator.flush()

    points = [b for segment in frame.weight_segments for b in segment]
    assert 500 <= len(points) <= 2000
    assert points[-1] == provider.weight[-1]


def test_on_appear_skips_fetch_while_fresh(coordinator, weight_provider):
    calls = weight_provider.calls
    coordinator.on_appear()
    assert not coordinator.store.is_refreshing
    assert weight_provider.calls == calls
    assert coordinator.update_debounce_timer.isActive()


def test_padded_domain_for_flat_series():
    assert padded_domain(daily_series(5, value=lambda i: 70.0), 0.1) == (69.0, 71.0)
    low, high = padded_domain(daily_series(2, value=lambda i: [60.0, 70.0][i]), 0.1)
    assert (low, high) == pytest.approx((59.0, 71.0))


def test_shutdown_stops_pending_updates(coordinator, frames):
    coordinator.set_span(Span.YEAR)
    coordinator.shutdown()
    assert coordinator.flush() is None
    coordinator.set_span(Span.MONTH)
    coordinator.store.data_published.emit(2)
    assert not wait_until(lambda: bool(frames), timeout=0.2)
