"""
Main chart window: span/unit selectors, a BMI toggle, a scroll slider and the
Matplotlib canvas.

The window holds no pipeline state of its own. Every control forwards to the
`ChartCoordinator`, and the canvas is only redrawn from `frame_ready`.
"""

import logging
from datetime import datetime
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QCheckBox, QComboBox, QHBoxLayout, QLabel, QSlider, QVBoxLayout, QWidget
)
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas

from weightgraph import constants
from weightgraph.core.coordinator import ChartCoordinator, ChartFrame
from weightgraph.core.series import Span
from weightgraph.core.units import WeightUnit
from weightgraph.utils.helpers import format_weight
from weightgraph.views.chart.renderer import ChartRenderer


class ChartWindow(QWidget):
    """Top-level widget showing the weight chart for one coordinator."""

    def __init__(self, coordinator: ChartCoordinator, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.logger = logging.getLogger("WeightGraph.ChartWindow")
        self.coordinator = coordinator
        self.renderer = ChartRenderer()
        self.canvas = FigureCanvas(self.renderer.figure)
        self._updating_controls = False

        self.setWindowTitle(constants.chart.WINDOW_TITLE)
        self.resize(constants.chart.WINDOW_WIDTH, constants.chart.WINDOW_HEIGHT)
        self._init_ui()
        self._connect_signals()

    def _init_ui(self) -> None:
        self.span_combo = QComboBox(self)
        for span in Span:
            self.span_combo.addItem(span.label, span)
        self.span_combo.setCurrentIndex(list(Span).index(self.coordinator.model.span))

        self.unit_combo = QComboBox(self)
        for unit in WeightUnit:
            self.unit_combo.addItem(unit.symbol, unit)
        self.unit_combo.setCurrentIndex(list(WeightUnit).index(self.coordinator.model.unit))

        self.bmi_checkbox = QCheckBox(constants.chart.SHOW_BMI_LABEL, self)
        self.bmi_checkbox.setChecked(self.coordinator.show_bmi)

        self.latest_label = QLabel("", self)

        self.scroll_slider = QSlider(Qt.Orientation.Horizontal, self)
        self.scroll_slider.setRange(0, constants.chart.SCROLL_SLIDER_STEPS)
        self.scroll_slider.setValue(constants.chart.SCROLL_SLIDER_STEPS)

        controls = QHBoxLayout()
        controls.addWidget(self.span_combo)
        controls.addWidget(self.unit_combo)
        controls.addWidget(self.bmi_checkbox)
        controls.addStretch(1)
        controls.addWidget(self.latest_label)

        layout = QVBoxLayout(self)
        layout.addLayout(controls)
        layout.addWidget(self.canvas, 1)
        layout.addWidget(self.scroll_slider)

    def _connect_signals(self) -> None:
        self.span_combo.currentIndexChanged.connect(self._on_span_changed)
        self.unit_combo.currentIndexChanged.connect(self._on_unit_changed)
        self.bmi_checkbox.toggled.connect(self.coordinator.set_show_bmi)
        self.scroll_slider.valueChanged.connect(self._on_slider_moved)
        self.coordinator.frame_ready.connect(self._on_frame_ready)
        self.coordinator.store.refresh_failed.connect(self._on_refresh_failed)

    # --- Control handlers ---

    def _on_span_changed(self, index: int) -> None:
        self.coordinator.set_span(self.span_combo.itemData(index))

    def _on_unit_changed(self, index: int) -> None:
        self.coordinator.set_unit(self.unit_combo.itemData(index))

    def _on_slider_moved(self, value: int) -> None:
        if self._updating_controls:
            return
        anchor = self.anchor_for_slider(value)
        if anchor is not None:
            self.coordinator.set_scroll_anchor(anchor)

    def anchor_for_slider(self, value: int) -> Optional[datetime]:
        """Maps a slider position linearly onto the active span's data range."""
        bounds = self.coordinator.model.data_bounds()
        if bounds is None:
            return None
        first, last = bounds
        fraction = value / constants.chart.SCROLL_SLIDER_STEPS
        return first + (last - first) * fraction

    def slider_for_anchor(self, anchor: Optional[datetime]) -> int:
        bounds = self.coordinator.model.data_bounds()
        if anchor is None or bounds is None or bounds[1] <= bounds[0]:
            return constants.chart.SCROLL_SLIDER_STEPS
        first, last = bounds
        fraction = (anchor - first) / (last - first)
        return round(fraction * constants.chart.SCROLL_SLIDER_STEPS)

    # --- Coordinator callbacks ---

    def _on_frame_ready(self, frame: ChartFrame) -> None:
        self.renderer.render(frame)
        self._updating_controls = True
        try:
            self.scroll_slider.setValue(self.slider_for_anchor(frame.scroll_anchor))
        finally:
            self._updating_controls = False
        self.latest_label.setText(self._latest_text(frame))

    @staticmethod
    def _latest_text(frame: ChartFrame) -> str:
        if not frame.weight_segments:
            return ""
        latest = frame.weight_segments[-1][-1]
        return format_weight(latest.value, frame.unit)

    def _on_refresh_failed(self, message: str) -> None:
        self.logger.warning("Refresh failed, keeping previous chart: %s", message)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.coordinator.on_appear()

    def closeEvent(self, event) -> None:
        self.coordinator.shutdown()
        super().closeEvent(event)
