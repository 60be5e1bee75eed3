"""
Smoke tests for the Matplotlib chart renderer.
"""
from datetime import timedelta

import pytest
from matplotlib.dates import date2num
from matplotlib.figure import Figure

from weightgraph import constants
from weightgraph.core.coordinator import ChartFrame
from weightgraph.core.series import Bin, Span
from weightgraph.core.trend import linear_trend
from weightgraph.core.units import WeightUnit
from weightgraph.views.chart.renderer import ChartRenderer
from sample_data import BASE_TIME, daily_series


@pytest.fixture
def renderer():
    return ChartRenderer(Figure())


def _frame(**overrides):
    weight = daily_series(5)
    lone = Bin(timestamp=BASE_TIME + timedelta(days=20), value=71.0)
    defaults = dict(
        span=Span.MONTH,
        unit=WeightUnit.KILOGRAM,
        scroll_anchor=BASE_TIME + timedelta(days=10),
        weight_segments=[weight, [lone]],
        y_domain=(69.0, 72.0),
        visible_duration=Span.MONTH.visible_length,
        trend=linear_trend(weight + [lone]),
        target_range=(70.0, 71.0),
    )
    defaults.update(overrides)
    return ChartFrame(**defaults)


def test_one_line_per_segment_plus_trend(renderer):
    renderer.render(_frame())
    lines = renderer.ax.get_lines()
    assert len(lines) == 3
    assert lines[0].get_linestyle() == "-"
    assert lines[1].get_linestyle() == "None"
    assert lines[2].get_linestyle() == constants.chart.TREND_LINESTYLE


def test_axis_limits_follow_frame(renderer):
    frame = _frame()
    renderer.render(frame)
    assert renderer.ax.get_ylim() == pytest.approx((69.0, 72.0))
    half = frame.visible_duration / 2
    expected = (date2num(frame.scroll_anchor - half), date2num(frame.scroll_anchor + half))
    assert renderer.ax.get_xlim() == pytest.approx(expected)


def test_target_band_is_drawn(renderer):
    renderer.render(_frame())
    assert len(renderer.ax.patches) == 1
    renderer.render(_frame(target_range=None))
    assert len(renderer.ax.patches) == 0


def test_bmi_segments_use_bmi_colour(renderer):
    bmi = daily_series(5, value=lambda i: 70.5)
    renderer.render(_frame(bmi_segments=[bmi], trend=None))
    colours = [line.get_color() for line in renderer.ax.get_lines()]
    assert colours.count(constants.chart.BMI_LINE_COLOR) == 1
    assert renderer.ax.get_legend() is not None


def test_empty_frame_shows_placeholder(renderer):
    renderer.render(ChartFrame(span=Span.WEEK, unit=WeightUnit.POUND, scroll_anchor=None))
    assert len(renderer.ax.get_lines()) == 0
    assert [t.get_text() for t in renderer.ax.texts] == [constants.chart.NO_DATA_MESSAGE]
    assert renderer.visible_window() is None


def test_unit_symbol_in_axis_label(renderer):
    renderer.render(_frame(unit=WeightUnit.POUND))
    assert renderer.ax.get_ylabel().endswith("(lb)")


def test_render_replaces_previous_drawing(renderer):
    renderer.render(_frame())
    renderer.render(_frame(weight_segments=[daily_series(3)], trend=None))
    assert len(renderer.ax.get_lines()) == 1
    assert renderer.last_frame.weight_segments[0] == daily_series(3)
