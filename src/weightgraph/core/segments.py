"""
Gap segmentation: splits a series into runs that are drawn as one connected line.
"""

import logging
from typing import List, Sequence

import numpy as np

from weightgraph.core.policy import DEFAULT_POLICY, PipelinePolicy
from weightgraph.core.series import Bin, Span, to_epoch_array


class SegmentBuilder:
    """
    Breaks an ordered point sequence wherever neighbouring points are further
    apart than the span's maximum gap, so missing weeks are left blank instead
    of being interpolated across.
    """

    def __init__(self, policy: PipelinePolicy = DEFAULT_POLICY) -> None:
        self.policy = policy
        self.logger = logging.getLogger("WeightGraph.SegmentBuilder")

    def segments(self, points: Sequence[Bin], span: Span) -> List[List[Bin]]:
        """
        Partitions `points` into maximal gap-free runs.

        The segments concatenate back to `points` exactly. A run of one point is
        a valid segment and is drawn as an isolated marker.
        """
        if not points:
            return []

        max_gap = self.policy.max_gap(span).total_seconds()
        gaps = np.diff(to_epoch_array(points)) > max_gap
        # A split starts at the point following each oversized gap.
        split_indices = (np.flatnonzero(gaps) + 1).tolist()

        bounds = [0] + split_indices + [len(points)]
        result = [list(points[start:end]) for start, end in zip(bounds[:-1], bounds[1:])]

        if split_indices:
            self.logger.debug("Split %d points into %d segments (span=%s)", len(points), len(result), span.value)
        return result
