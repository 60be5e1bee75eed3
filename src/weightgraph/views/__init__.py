"""
Views submodule for WeightGraph.

Contains the Qt chart window and its Matplotlib renderer.
"""

from .chart import ChartRenderer, ChartWindow

__all__ = ["ChartRenderer", "ChartWindow"]
