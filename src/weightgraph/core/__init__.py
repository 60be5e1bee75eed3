"""
Core submodule for WeightGraph.

Contains the time-series store and the windowing pipeline that turns raw
samples into the segments the chart draws.
"""

from weightgraph.core.series import Bin, Metric, Span, sanitize_bins
from weightgraph.core.units import WeightUnit
from weightgraph.core.policy import PipelinePolicy
from weightgraph.core.store import FetchFailure, TimeSeriesStore
from weightgraph.core.windowing import ProgressiveWindower
from weightgraph.core.segments import SegmentBuilder
from weightgraph.core.normalizer import SeriesNormalizer
from weightgraph.core.view_cache import CacheKey, CachedView, DerivedViewCache
from weightgraph.core.coordinator import ChartCoordinator, ChartFrame

__all__ = [
    "Bin",
    "Metric",
    "Span",
    "sanitize_bins",
    "WeightUnit",
    "PipelinePolicy",
    "FetchFailure",
    "TimeSeriesStore",
    "ProgressiveWindower",
    "SegmentBuilder",
    "SeriesNormalizer",
    "CacheKey",
    "CachedView",
    "DerivedViewCache",
    "ChartCoordinator",
    "ChartFrame",
]
