"""
Max Drawdown / Max Drawup over a sliding time window.

Both are single forward scans over the window:

    drawdown: running peak,   step ratio (peak - v) / peak
    drawup:   running trough, step ratio (v - trough) / trough

and report 100 x the largest step ratio. A step whose peak (trough) is zero
contributes 0.
"""

from typing import Iterable

from .base import WindowIndicator


def max_drawdown_ratio(values: Iterable[float]) -> float:
    """Largest peak-to-value decline as a fraction of the peak."""
    peak = None
    worst = 0.0
    for value in values:
        if peak is None or value > peak:
            peak = value
        ratio = (peak - value) / peak if peak != 0.0 else 0.0
        if ratio > worst:
            worst = ratio
    return worst


def max_drawup_ratio(values: Iterable[float]) -> float:
    """Largest trough-to-value rise as a fraction of the trough."""
    trough = None
    best = 0.0
    for value in values:
        if trough is None or value < trough:
            trough = value
        ratio = (value - trough) / trough if trough != 0.0 else 0.0
        if ratio > best:
            best = ratio
    return best


class MaxDrawdown(WindowIndicator):
    """Maximum drawdown in percent within the window."""

    short_name = "MaxDrawdown"
    inclusive_eviction = False

    def _reduce(self) -> float:
        return 100.0 * max_drawdown_ratio(sample.value for sample in self._window)


class MaxDrawup(WindowIndicator):
    """Maximum drawup in percent within the window."""

    short_name = "MaxDrawup"
    inclusive_eviction = False

    def _reduce(self) -> float:
        return 100.0 * max_drawup_ratio(sample.value for sample in self._window)
