"""
Incremental accumulators for sliding windows.

Each accumulator keeps one running aggregate that is updated in O(1) when a
value enters or leaves the window. Order statistics (max, min, drawdown) are
not associative under removal and rescan the window instead.
"""

from typing import Any, Dict


class Accumulator:
    """
    Running aggregate updated symmetrically on add/remove.

    Subclasses implement ``_contribution``; ``add`` and ``remove`` apply it with
    opposite signs so an evicted value is removed exactly the way it was added.
    """

    __slots__ = ('_total',)

    name = "accumulator"

    def __init__(self):
        self._total = 0.0

    def _contribution(self, value: float) -> float:
        raise NotImplementedError

    def add(self, value: float) -> None:
        """Account for a value entering the window."""
        self._total += self._contribution(value)

    def remove(self, value: float) -> None:
        """Account for a value leaving the window."""
        self._total -= self._contribution(value)

    @property
    def value(self) -> float:
        """Current running aggregate."""
        return self._total

    def reset(self) -> None:
        self._total = 0.0

    def state(self) -> Dict[str, Any]:
        return {"total": self._total}

    def restore(self, state: Dict[str, Any]) -> None:
        self._total = float(state["total"])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._total!r})"


class SumAccumulator(Accumulator):
    """Running sum of values (Σx)."""

    __slots__ = ()

    name = "sum"

    def _contribution(self, value: float) -> float:
        return value


class SumOfSquaresAccumulator(Accumulator):
    """Running sum of squared values (Σx²)."""

    __slots__ = ()

    name = "sum_sq"

    def _contribution(self, value: float) -> float:
        return value * value
