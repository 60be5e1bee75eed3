"""
Provider contract for raw samples, plus the synthetic provider used by the
demo shell.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Protocol, runtime_checkable

import numpy as np

from weightgraph.core.series import Bin, Span


@runtime_checkable
class StatisticsProvider(Protocol):
    """
    Source of aggregated samples for one span.

    Both methods may block and may raise; a failure aborts only the refresh
    that called them. Results should be sorted ascending with unique
    timestamps, though the store re-sorts defensively.
    """

    def bins(self, span: Span) -> List[Bin]:
        """Returns aggregated weight bins (kilograms) for `span`."""
        ...

    def bmi_bins(self, span: Span) -> List[Bin]:
        """Returns aggregated BMI bins for `span`."""
        ...


class SyntheticProvider:
    """
    Generates daily weight and BMI history with realistic holes.

    Every span receives the same daily history, as the health-data facade does
    for demos. Output is reproducible for a given seed and end date.
    """

    def __init__(self, days: int = 3 * 365, seed: int = 7, end: Optional[datetime] = None) -> None:
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")
        self.days = days
        self.seed = seed
        self.end = (end or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)

    def _day(self, index: int) -> datetime:
        return self.end - timedelta(days=index)

    def bins(self, span: Span) -> List[Bin]:
        rng = np.random.default_rng([self.seed, 0])
        noise = rng.uniform(-10.0, 10.0, size=self.days)
        result = []
        for idx in range(self.days):
            # Regular missing days, plus a four-day hole every month.
            if idx % 7 == 0 or idx % 8 == 0:
                continue
            if 10 <= idx % 30 <= 13:
                continue
            result.append(Bin(timestamp=self._day(idx), value=70.0 + float(noise[idx])))
        return sorted(result, key=lambda b: b.timestamp)

    def bmi_bins(self, span: Span) -> List[Bin]:
        rng = np.random.default_rng([self.seed, 1])
        noise = rng.uniform(-3.0, 8.0, size=self.days)
        result = []
        for idx in range(self.days):
            # Every sixth day missing, plus a three-day hole every three weeks.
            if idx % 6 == 0:
                continue
            if 5 <= idx % 21 <= 7:
                continue
            result.append(Bin(timestamp=self._day(idx), value=22.0 + float(noise[idx])))
        return sorted(result, key=lambda b: b.timestamp)
