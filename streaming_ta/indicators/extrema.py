"""Running maximum and minimum over a sliding time window."""

from .base import WindowIndicator


class Maximum(WindowIndicator):
    """
    Highest value in the window.

    Rescans the window on every update (O(window)). Entries exactly one
    duration old are evicted.
    """

    short_name = "MAX"
    inclusive_eviction = True

    def _reduce(self) -> float:
        return max(sample.value for sample in self._window)


class Minimum(WindowIndicator):
    """
    Lowest value in the window.

    Rescans the window on every update (O(window)). Only entries strictly
    older than one duration are evicted.
    """

    short_name = "MIN"
    inclusive_eviction = False

    def _reduce(self) -> float:
        return min(sample.value for sample in self._window)
