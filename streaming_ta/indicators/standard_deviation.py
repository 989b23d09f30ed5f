"""Population standard deviation over a sliding time window."""

import math
from typing import Sequence

from ..core.accumulators import Accumulator, SumAccumulator, SumOfSquaresAccumulator
from .base import WindowIndicator


def population_std(total: float, total_sq: float, count: int) -> float:
    """
    sqrt((Σx² − Σx·mean) / n) from running sums.

    Float cancellation can leave a tiny negative variance; that is reported
    as 0.0 rather than NaN.
    """
    if count == 0:
        return 0.0
    mean = total / count
    variance = (total_sq - total * mean) / count
    return math.sqrt(variance) if variance > 0.0 else 0.0


class StandardDeviation(WindowIndicator):
    """Population standard deviation of the samples in the window. O(1) per update."""

    short_name = "SD"
    inclusive_eviction = True

    def _make_accumulators(self) -> Sequence[Accumulator]:
        return (SumAccumulator(), SumOfSquaresAccumulator())

    @property
    def mean(self) -> float:
        n = len(self._window)
        return self._window.accumulator("sum").value / n if n else 0.0

    def _reduce(self) -> float:
        return population_std(
            self._window.accumulator("sum").value,
            self._window.accumulator("sum_sq").value,
            len(self._window),
        )
