"""
Bollinger Bands over a sliding time window.

    average = Σx / n
    upper   = average + multiplier * sd
    lower   = average - multiplier * sd

with sd the population standard deviation of the same window. Both running
sums live on a single window, so the bands and the average always describe
the same samples.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from ..config import DEFAULT_CONFIG
from ..core.accumulators import Accumulator, SumAccumulator, SumOfSquaresAccumulator
from ..core.data_types import DurationLike
from .base import WindowIndicator, format_duration, format_number
from .standard_deviation import population_std


@dataclass(frozen=True)
class BollingerBandsOutput:
    """Band values for one update."""

    average: float
    upper: float
    lower: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


class BollingerBands(WindowIndicator):
    """Mean and +/- multiplier x standard deviation bands."""

    short_name = "BB"
    inclusive_eviction = True

    def __init__(self, duration: Optional[DurationLike] = None, multiplier: Optional[float] = None):
        if multiplier is None:
            multiplier = DEFAULT_CONFIG.defaults.bollinger_multiplier
        self._multiplier = float(multiplier)
        super().__init__(duration)

    @property
    def multiplier(self) -> float:
        return self._multiplier

    def _make_accumulators(self) -> Sequence[Accumulator]:
        return (SumAccumulator(), SumOfSquaresAccumulator())

    def _reduce(self) -> BollingerBandsOutput:
        n = len(self._window)
        total = self._window.accumulator("sum").value
        average = total / n if n else 0.0
        sd = population_std(total, self._window.accumulator("sum_sq").value, n)
        return BollingerBandsOutput(
            average=average,
            upper=average + sd * self._multiplier,
            lower=average - sd * self._multiplier,
        )

    def __str__(self) -> str:
        return (
            f"{self.short_name}({format_duration(self._window.duration_us)}, "
            f"{format_number(self._multiplier)})"
        )

    def _params(self) -> Dict[str, Any]:
        return {"duration_us": self._window.duration_us, "multiplier": self._multiplier}

    @classmethod
    def _from_params(cls, params: Dict[str, Any]) -> "BollingerBands":
        return cls(timedelta(microseconds=int(params["duration_us"])), float(params["multiplier"]))
