import logging
from typing import List, Optional

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.dates import date2num
import matplotlib.dates as mdates

from weightgraph import constants
from weightgraph.core.coordinator import ChartFrame
from weightgraph.core.series import Bin


class ChartRenderer:
    """
    Draws a `ChartFrame` onto a Matplotlib figure.

    Owns a single Axes. Each segment becomes its own line so gaps stay blank;
    a one-point segment is drawn as an isolated marker.
    """

    def __init__(self, figure: Optional[Figure] = None, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("WeightGraph.ChartRenderer")
        self.figure = figure or Figure(figsize=constants.chart.FIGURE_SIZE, dpi=constants.chart.FIGURE_DPI)
        self.ax: Axes = self.figure.add_subplot(111)
        self._last_frame: Optional[ChartFrame] = None

    @staticmethod
    def _segment_arrays(segment: List[Bin]):
        x = date2num([b.timestamp for b in segment])
        y = np.fromiter((b.value for b in segment), dtype=float, count=len(segment))
        return x, y

    def _draw_segments(self, segments: List[List[Bin]], color: str, label: str) -> int:
        """Plots each segment; returns the number of artists added."""
        drawn = 0
        for index, segment in enumerate(segments):
            x, y = self._segment_arrays(segment)
            self.ax.plot(
                x, y,
                color=color,
                linewidth=constants.chart.LINE_WIDTH,
                marker="o",
                markersize=constants.chart.MARKER_SIZE,
                linestyle="-" if len(segment) > 1 else "none",
                label=label if index == 0 else None,
            )
            drawn += 1
        return drawn

    def _x_limits(self, frame: ChartFrame):
        anchor = frame.scroll_anchor
        if anchor is None:
            return None
        half = frame.visible_duration / 2
        return date2num(anchor - half), date2num(anchor + half)

    def render(self, frame: ChartFrame) -> None:
        """Replaces the current drawing with `frame`."""
        self.ax.clear()
        self.ax.grid(True, alpha=constants.chart.GRID_ALPHA, linestyle=constants.chart.GRID_LINESTYLE)
        self.ax.set_ylabel(f"{constants.chart.WEIGHT_LABEL} ({frame.unit.symbol})")

        if frame.is_empty:
            self.ax.text(0.5, 0.5, constants.chart.NO_DATA_MESSAGE, transform=self.ax.transAxes,
                         ha="center", va="center")
            self._last_frame = frame
            self.figure.canvas.draw_idle()
            return

        if frame.target_range is not None:
            low, high = frame.target_range
            self.ax.axhspan(low, high, color=constants.chart.TARGET_BAND_COLOR,
                            alpha=constants.chart.TARGET_BAND_ALPHA, linewidth=0)

        weight_lines = self._draw_segments(frame.weight_segments, constants.chart.WEIGHT_LINE_COLOR,
                                           constants.chart.WEIGHT_LABEL)
        bmi_lines = self._draw_segments(frame.bmi_segments, constants.chart.BMI_LINE_COLOR,
                                        constants.chart.BMI_LABEL)

        if frame.trend is not None:
            self.ax.plot(
                date2num([frame.trend.start, frame.trend.end]),
                [frame.trend.start_value, frame.trend.end_value],
                color=constants.chart.TREND_LINE_COLOR,
                linestyle=constants.chart.TREND_LINESTYLE,
                linewidth=1.0,
            )

        self.ax.set_ylim(*frame.y_domain)
        x_limits = self._x_limits(frame)
        if x_limits is not None:
            self.ax.set_xlim(*x_limits)
        self.ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(self.ax.xaxis.get_major_locator()))
        if bmi_lines:
            self.ax.legend(loc="upper left")

        self.logger.debug("Rendered %d weight and %d BMI segments (span=%s)",
                          weight_lines, bmi_lines, frame.span.value)
        self._last_frame = frame
        self.figure.canvas.draw_idle()

    @property
    def last_frame(self) -> Optional[ChartFrame]:
        return self._last_frame

    def visible_window(self) -> Optional[tuple]:
        """Current x-axis limits as datetimes, or None before the first frame with data."""
        if self._last_frame is None or self._last_frame.scroll_anchor is None:
            return None
        low, high = self.ax.get_xlim()
        return mdates.num2date(low), mdates.num2date(high)
