"""
Memoisation of derived chart views.

One keyed LRU replaces the loose per-view caches (weight domain, BMI
normalisation, ...) that would otherwise each need clearing on every state
change. The key carries everything a view depends on, and a change of span,
unit or data version clears the whole cache.
"""

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from weightgraph.core.series import Bin, Span
from weightgraph.core.trend import TrendLine
from weightgraph.core.units import WeightUnit


def scroll_bucket(anchor: datetime, bucket: timedelta) -> int:
    """Discretises an anchor to the nearest multiple of `bucket`."""
    return int(math.floor(anchor.timestamp() / bucket.total_seconds() + 0.5))


def bucket_anchor(bucket_index: int, bucket: timedelta, like: datetime) -> datetime:
    """The representative anchor of a bucket, in the same timezone flavour as `like`."""
    seconds = bucket_index * bucket.total_seconds()
    if like.tzinfo is not None:
        return datetime.fromtimestamp(seconds, tz=like.tzinfo)
    return datetime.fromtimestamp(seconds)


@dataclass(frozen=True)
class CacheKey:
    """
    Identifies one derived view.

    Attributes:
        span: The active span.
        unit: The active weight unit.
        data_version: Store version the view was derived from.
        scroll_bucket: Discretised scroll anchor.
    """
    span: Span
    unit: WeightUnit
    data_version: int
    scroll_bucket: int

    def __post_init__(self):
        """Validate key parameters."""
        if not isinstance(self.span, Span):
            raise TypeError(f"span must be Span, got {type(self.span)}")
        if not isinstance(self.unit, WeightUnit):
            raise TypeError(f"unit must be WeightUnit, got {type(self.unit)}")
        if not isinstance(self.data_version, int) or self.data_version < 0:
            raise ValueError(f"data_version must be non-negative int, got {self.data_version}")
        if not isinstance(self.scroll_bucket, int):
            raise TypeError(f"scroll_bucket must be int, got {type(self.scroll_bucket)}")


@dataclass
class CachedView:
    """Everything derived for one cache key."""
    weight_points: List[Bin] = field(default_factory=list)
    weight_segments: List[List[Bin]] = field(default_factory=list)
    bmi_points: List[Bin] = field(default_factory=list)
    bmi_segments: List[List[Bin]] = field(default_factory=list)
    y_domain: Tuple[float, float] = (0.0, 1.0)
    trend: Optional[TrendLine] = None


class DerivedViewCache:
    """
    Bounded LRU of `CachedView` objects keyed by `CacheKey`.

    Only the UI thread mutates the cache.
    """

    def __init__(self, max_entries: int) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self.logger = logging.getLogger("WeightGraph.DerivedViewCache")
        self._entries: "OrderedDict[CacheKey, CachedView]" = OrderedDict()
        self._context: Optional[Tuple[Span, WeightUnit, int]] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> Optional[CachedView]:
        view = self._entries.get(key)
        if view is not None:
            self._entries.move_to_end(key)
        return view

    def put(self, key: CacheKey, view: CachedView) -> None:
        self._entries[key] = view
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self.logger.debug("Evicted least recently used view %s", evicted)

    def invalidate(self, predicate: Callable[[CacheKey], bool]) -> int:
        """Removes every entry whose key matches `predicate`; returns how many were removed."""
        doomed = [key for key in self._entries if predicate(key)]
        for key in doomed:
            del self._entries[key]
        if doomed:
            self.logger.debug("Invalidated %d cached views", len(doomed))
        return len(doomed)

    def clear(self) -> None:
        self.invalidate(lambda key: True)

    def sync(self, span: Span, unit: WeightUnit, data_version: int) -> bool:
        """
        Records the current (span, unit, data_version) context.

        Returns:
            bool: True when the context changed and the whole cache was dropped.
        """
        context = (span, unit, data_version)
        if context == self._context:
            return False
        previous, self._context = self._context, context
        if previous is not None:
            self.logger.debug("View context changed from %s to %s, clearing cache", previous, context)
        self.clear()
        return True
