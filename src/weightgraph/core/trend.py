"""
Least-squares trend line over the visible weight points.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from weightgraph.core.series import Bin, to_epoch_array, to_value_array


@dataclass(frozen=True)
class TrendLine:
    """Straight line between the fitted values at the first and last point."""
    start: datetime
    start_value: float
    end: datetime
    end_value: float

    @property
    def slope_per_day(self) -> float:
        days = (self.end - self.start).total_seconds() / 86400.0
        return (self.end_value - self.start_value) / days if days else 0.0


def linear_trend(points: Sequence[Bin]) -> Optional[TrendLine]:
    """Ordinary least-squares fit of value against time; None with fewer than two points."""
    if len(points) < 2:
        return None

    epochs = to_epoch_array(points)
    values = to_value_array(points)
    # Centre x on the first sample to keep the fit well conditioned.
    x = epochs - epochs[0]
    if np.ptp(x) == 0:
        return None
    slope, intercept = np.polyfit(x, values, 1)

    return TrendLine(
        start=points[0].timestamp,
        start_value=float(intercept),
        end=points[-1].timestamp,
        end_value=float(slope * x[-1] + intercept),
    )
