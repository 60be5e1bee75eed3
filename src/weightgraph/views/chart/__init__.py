from .renderer import ChartRenderer
from .window import ChartWindow

__all__ = ["ChartRenderer", "ChartWindow"]
