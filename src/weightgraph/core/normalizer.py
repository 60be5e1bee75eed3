"""
Linear rescaling of a secondary series onto the primary series' vertical range,
used to overlay BMI on the weight axis.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from weightgraph.core.series import Bin, to_value_array

ValueRange = Tuple[float, float]


def value_range(points: Sequence[Bin]) -> Optional[ValueRange]:
    """Returns (min, max) of the point values, or None for an empty sequence."""
    if not points:
        return None
    values = to_value_array(points)
    return float(np.min(values)), float(np.max(values))


class SeriesNormalizer:
    """Maps secondary values linearly from their range onto the primary range."""

    @staticmethod
    def normalize(secondary: Sequence[Bin], primary_range: Optional[ValueRange],
                  secondary_range: Optional[ValueRange]) -> List[Bin]:
        """
        Rescales `secondary` from `secondary_range` to `primary_range`.

        A missing or zero-width range on either side yields an empty list.
        Points outside the secondary range, and mapped values that land outside
        the primary range through rounding, are dropped.
        """
        if not secondary or primary_range is None or secondary_range is None:
            return []

        primary_min, primary_max = primary_range
        secondary_min, secondary_max = secondary_range
        if primary_max <= primary_min or secondary_max <= secondary_min:
            return []

        values = to_value_array(secondary)
        mapped = primary_min + (values - secondary_min) * (primary_max - primary_min) / (secondary_max - secondary_min)

        keep = (
            (values >= secondary_min) & (values <= secondary_max)
            & (mapped >= primary_min) & (mapped <= primary_max)
        )
        return [
            Bin(timestamp=point.timestamp, value=float(value))
            for point, value, kept in zip(secondary, mapped, keep)
            if kept
        ]
