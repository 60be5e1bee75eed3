"""
Constants for drawing the weight chart.
"""
from typing import Final, Tuple

class ChartConstants:
    """Defines constants for the chart window and Matplotlib renderer."""
    # --- Sizing and Layout ---
    FIGURE_SIZE: Final[Tuple[float, float]] = (8, 3)
    FIGURE_DPI: Final[int] = 100
    WINDOW_WIDTH: Final[int] = 820
    WINDOW_HEIGHT: Final[int] = 380
    SCROLL_SLIDER_STEPS: Final[int] = 1000

    # --- Plotting and Theming ---
    WEIGHT_LINE_COLOR: Final[str] = "#1f77b4"
    BMI_LINE_COLOR: Final[str] = "#2ca02c"
    TREND_LINE_COLOR: Final[str] = "#7f7f7f"
    TARGET_BAND_COLOR: Final[str] = "#ffbf00"
    TARGET_BAND_ALPHA: Final[float] = 0.15
    LINE_WIDTH: Final[float] = 1.5
    MARKER_SIZE: Final[float] = 3.0
    TREND_LINESTYLE: Final[str] = "--"
    GRID_ALPHA: Final[float] = 0.5
    GRID_LINESTYLE: Final[str] = ":"

    # --- Text and Labels ---
    WINDOW_TITLE: Final[str] = "WeightGraph"
    WEIGHT_LABEL: Final[str] = "Weight"
    BMI_LABEL: Final[str] = "BMI"
    SHOW_BMI_LABEL: Final[str] = "Show BMI"
    NO_DATA_MESSAGE: Final[str] = "No data"

    def __init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.WINDOW_TITLE:
            raise ValueError("WINDOW_TITLE must not be empty")
        if not (0.0 <= self.TARGET_BAND_ALPHA <= 1.0):
            raise ValueError("TARGET_BAND_ALPHA must be between 0 and 1")
        if self.SCROLL_SLIDER_STEPS <= 0:
            raise ValueError("SCROLL_SLIDER_STEPS must be positive")

# Singleton instance for easy access
chart = ChartConstants()
