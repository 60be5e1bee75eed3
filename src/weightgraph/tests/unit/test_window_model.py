"""
Unit tests for SpanWindowModel state handling and unit conversion.
"""
from datetime import timedelta

import pytest

from weightgraph.core.series import Metric, Span
from weightgraph.core.units import WeightUnit
from weightgraph.core.window_model import SpanWindowModel
from sample_data import BASE_TIME, daily_series


class FakeStore:
    def __init__(self, series=None):
        self.series = series or {}

    def series_for(self, span, metric):
        return tuple(self.series.get((span, metric), ()))


@pytest.fixture
def store():
    return FakeStore({
        (Span.WEEK, Metric.WEIGHT): daily_series(7, start=BASE_TIME + timedelta(days=100)),
        (Span.YEAR, Metric.WEIGHT): daily_series(365),
        (Span.YEAR, Metric.BMI): daily_series(365, value=lambda i: 22.0),
        (Span.MONTH, Metric.BMI): daily_series(30, start=BASE_TIME + timedelta(days=50)),
    })


def test_unset_anchor_moves_to_latest_sample(store):
    model = SpanWindowModel(store, span=Span.YEAR)
    model.clamp_anchor()
    assert model.scroll_anchor == BASE_TIME + timedelta(days=364)


def test_span_change_clamps_anchor_into_new_range(store):
    model = SpanWindowModel(store, span=Span.YEAR, scroll_anchor=BASE_TIME)
    model.set_span(Span.WEEK)
    assert model.scroll_anchor == BASE_TIME + timedelta(days=100)


def test_bmi_bounds_are_used_without_weight(store):
    model = SpanWindowModel(store, span=Span.YEAR, scroll_anchor=BASE_TIME)
    model.set_span(Span.MONTH)
    assert model.data_bounds() == (BASE_TIME + timedelta(days=50), BASE_TIME + timedelta(days=79))
    assert model.scroll_anchor == BASE_TIME + timedelta(days=50)


def test_anchor_untouched_when_span_has_no_data():
    model = SpanWindowModel(FakeStore(), scroll_anchor=BASE_TIME)
    model.set_span(Span.MONTH)
    assert model.scroll_anchor == BASE_TIME
    assert model.data_bounds() is None


def test_anchor_inside_range_is_kept(store):
    anchor = BASE_TIME + timedelta(days=200)
    model = SpanWindowModel(store, span=Span.YEAR, scroll_anchor=anchor)
    model.clamp_anchor()
    assert model.scroll_anchor == anchor


def test_weight_points_are_unit_converted(store):
    model = SpanWindowModel(store, span=Span.YEAR)
    kilograms = model.visible_points(Metric.WEIGHT)
    model.set_unit(WeightUnit.POUND)
    pounds = model.visible_points(Metric.WEIGHT)
    assert len(pounds) == len(kilograms) == 365
    assert pounds[0].value == pytest.approx(kilograms[0].value * 2.20462)
    assert pounds[0].timestamp == kilograms[0].timestamp


def test_bmi_is_never_unit_converted(store):
    model = SpanWindowModel(store, span=Span.YEAR, unit=WeightUnit.POUND)
    assert {b.value for b in model.visible_points(Metric.BMI)} == {22.0}


def test_full_series_is_exposed(store):
    model = SpanWindowModel(store, span=Span.YEAR)
    assert len(model.visible_points(Metric.WEIGHT)) == 365


def test_state_is_a_value_snapshot(store):
    model = SpanWindowModel(store)
    before = model.state
    model.set_unit(WeightUnit.POUND)
    assert before.unit is WeightUnit.KILOGRAM
    assert model.state.unit is WeightUnit.POUND
