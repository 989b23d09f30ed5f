"""Exponential Moving Average with elapsed-time decay."""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from ..config import DEFAULT_CONFIG
from ..core.data_types import DurationLike, TimestampLike
from ..core.smoother import TimeWeightedExponentialSmoother
from .base import Indicator, format_duration

logger = logging.getLogger(__name__)


class ExponentialMovingAverage(Indicator):
    """
    EMA over ``period`` nominal periods of ``period_duration`` each.

    Samples may arrive at any cadence; the decay applied per update scales
    with the elapsed time (see ``TimeWeightedExponentialSmoother``). A sample
    at exactly the previous timestamp replaces the previous one.

    Example:
        ema = ExponentialMovingAverage(3, timedelta(days=1))
        ema.next(t0, 2.0)                      # 2.0
        ema.next(t0 + timedelta(days=1), 5.0)  # 3.5
    """

    short_name = "EMA"

    def __init__(
        self,
        period: Optional[int] = None,
        period_duration: Optional[DurationLike] = None,
    ):
        defaults = DEFAULT_CONFIG.defaults
        if period is None:
            period = defaults.period
        if period_duration is None:
            period_duration = defaults.period_duration
        self._smoother = TimeWeightedExponentialSmoother(period, period_duration)

    @property
    def period(self) -> int:
        return self._smoother.period

    @property
    def period_duration(self) -> timedelta:
        return timedelta(microseconds=self._smoother.period_us)

    @property
    def value(self) -> float:
        return self._smoother.value

    def next(self, timestamp: TimestampLike, value: float) -> float:
        return self._smoother.next(timestamp, value)

    def reset(self) -> None:
        logger.debug(f"Resetting {self}")
        self._smoother.reset()

    def __str__(self) -> str:
        return f"{self.short_name}({self.period} x {format_duration(self._smoother.period_us)})"

    def _params(self) -> Dict[str, Any]:
        return {"period": self._smoother.period, "period_duration_us": self._smoother.period_us}

    @classmethod
    def _from_params(cls, params: Dict[str, Any]) -> "ExponentialMovingAverage":
        return cls(int(params["period"]), timedelta(microseconds=int(params["period_duration_us"])))

    def _state(self) -> Dict[str, Any]:
        return {"smoother": self._smoother.state()}

    def _restore(self, state: Dict[str, Any]) -> None:
        self._smoother.restore(state["smoother"])
