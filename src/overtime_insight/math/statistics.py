"""Descriptive statistics over commit-time samples: means, spreads, percentiles."""

import math
from typing import Sequence

import numpy as np


class Statistics:
    """Statistical helpers shared by the analyzers."""

    @staticmethod
    def round_half_up(x: float) -> int:
        """Round to the nearest integer, halves toward +infinity.

        Python's ``round`` uses banker's rounding (``round(2.5) == 2``); the
        index and confidence formulas expect ``2.5 -> 3`` and ``-2.5 -> -2``.
        """
        return math.floor(x + 0.5)

    @staticmethod
    def mean(values: Sequence[float]) -> float:
        """Compute arithmetic mean."""
        if len(values) == 0:
            return 0.0
        return float(np.mean(values))

    @staticmethod
    def median(values: Sequence[float]) -> float:
        """Compute median (average of the two middle values for even lengths)."""
        if len(values) == 0:
            return 0.0
        return float(np.median(values))

    @staticmethod
    def population_stdev(values: Sequence[float]) -> float:
        """Compute population standard deviation (divides by n).

        Returns 0.0 for fewer than two values.
        """
        if len(values) < 2:
            return 0.0
        return float(np.std(values, ddof=0))

    @staticmethod
    def percentile(sorted_values: Sequence[float], p: float) -> float:
        """
        Linear-interpolated percentile over an ascending sequence.

        The rank is ``(p / 100) * (n - 1)``; fractional ranks blend the two
        neighbouring values.

        Args:
            sorted_values: Values sorted ascending
            p: Percentile in [0, 100]

        Returns:
            Percentile value, 0.0 for empty input
        """
        if len(sorted_values) == 0:
            return 0.0
        return float(np.percentile(sorted_values, p))

    @staticmethod
    def nearest_rank_quantile(sorted_values: Sequence[float], q: float) -> float:
        """Quantile by nearest lower rank: ``sorted_values[floor((n - 1) * q)]``."""
        if len(sorted_values) == 0:
            raise ValueError("nearest_rank_quantile requires at least one value")
        return float(np.quantile(sorted_values, q, method="lower"))
