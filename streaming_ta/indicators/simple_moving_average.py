"""Simple Moving Average over a sliding time window."""

from typing import Sequence

from ..core.accumulators import Accumulator, SumAccumulator
from .base import WindowIndicator


class SimpleMovingAverage(WindowIndicator):
    """
    Arithmetic mean of the samples retained in the window.

    O(1) per update: the window keeps a running sum.

    Example:
        sma = SimpleMovingAverage(timedelta(seconds=4))
        sma.next(t0, 4.0)  # 4.0
        sma.next(t0 + timedelta(seconds=1), 5.0)  # 4.5
    """

    short_name = "SMA"
    inclusive_eviction = True

    def _make_accumulators(self) -> Sequence[Accumulator]:
        return (SumAccumulator(),)

    def _reduce(self) -> float:
        n = len(self._window)
        if n == 0:
            return 0.0
        return self._window.accumulator("sum").value / n
