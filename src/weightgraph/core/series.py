"""
Value types for the weight time series.

Defines the `Bin` sample, the `Span` and `Metric` enumerations, and the
ingestion-boundary sanitiser that every provider result passes through before
it reaches the windowing pipeline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

import numpy as np


logger = logging.getLogger("WeightGraph.Series")

_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class Bin:
    """
    One aggregated sample of a metric.

    Attributes:
        timestamp: Start of the aggregation bucket. Two bins with the same
                   timestamp occupy the same slot of a series.
        value: The aggregated value (kilograms for weight, kg/m^2 for BMI).
    """
    timestamp: datetime
    value: float

    @property
    def id(self) -> datetime:
        return self.timestamp


Series = Tuple[Bin, ...]


class Span(Enum):
    """A chart time span."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def visible_length(self) -> timedelta:
        """The duration that fits in one visible chart screen."""
        return _VISIBLE_LENGTH[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_VISIBLE_LENGTH = {
    Span.WEEK: 7 * _DAY,
    Span.MONTH: 30 * _DAY,
    Span.YEAR: 365 * _DAY,
}

class Metric(Enum):
    """A named series held by the store."""
    WEIGHT = "weight"
    BMI = "bmi"


def to_epoch_array(bins: Sequence[Bin]) -> np.ndarray:
    """Returns the bin timestamps as a float64 array of POSIX seconds."""
    return np.fromiter((b.timestamp.timestamp() for b in bins), dtype=float, count=len(bins))


def to_value_array(bins: Sequence[Bin]) -> np.ndarray:
    """Returns the bin values as a float64 array."""
    return np.fromiter((b.value for b in bins), dtype=float, count=len(bins))


def sanitize_bins(bins: Iterable[Bin]) -> Series:
    """
    Brings raw provider output into the shape the pipeline relies on.

    Non-finite values are dropped, the result is sorted ascending by timestamp
    and duplicate timestamps are collapsed with the last occurrence winning.
    """
    incoming: List[Bin] = list(bins)
    finite = [b for b in incoming
              if isinstance(b.value, (int, float)) and not isinstance(b.value, bool) and math.isfinite(b.value)]

    by_slot = {}
    for b in finite:
        by_slot[b.timestamp] = b
    cleaned = tuple(sorted(by_slot.values(), key=lambda b: b.timestamp))

    dropped = len(incoming) - len(cleaned)
    if dropped:
        logger.warning("Dropped %d of %d samples during sanitisation (non-finite or duplicate).",
                       dropped, len(incoming))
    return cleaned
