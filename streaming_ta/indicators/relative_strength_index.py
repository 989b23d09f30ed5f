"""
Relative Strength Index built from two time-weighted smoothers.

Each price change is scaled by the elapsed fraction of a nominal period and
fed as a gain (up smoother) or a loss (down smoother):

    RSI = 100 - 100 / (1 + avg_gain / avg_loss)

Sentinels:
    avg_gain == avg_loss == 0   -> 50.0  (no movement)
    avg_loss == 0 < avg_gain    -> 100.0 (only gains)
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from ..config import DEFAULT_CONFIG
from ..core.data_types import DurationLike, TimestampLike, to_timestamp_us
from ..core.smoother import TimeWeightedExponentialSmoother
from .base import Indicator, format_duration

logger = logging.getLogger(__name__)

NEUTRAL_RSI = 50.0
MAX_RSI = 100.0


def rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    """Combine smoothed gain/loss into a [0, 100] oscillator value."""
    if avg_loss == 0.0:
        return MAX_RSI if avg_gain > 0.0 else NEUTRAL_RSI
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


class RelativeStrengthIndex(Indicator):
    """
    RSI over ``period`` nominal periods of ``period_duration`` each.

    A sample at exactly the previous timestamp is a replacement: both
    smoothers receive 0 at that instant and their replacement algebra
    re-derives the estimate; the reference price is kept.
    """

    short_name = "RSI"

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

        self._up = TimeWeightedExponentialSmoother(period, period_duration)
        self._down = TimeWeightedExponentialSmoother(period, period_duration)
        self._prev_value: Optional[float] = None
        self._prev_timestamp: Optional[int] = None

    @property
    def period(self) -> int:
        return self._up.period

    @property
    def period_duration(self) -> timedelta:
        return timedelta(microseconds=self._up.period_us)

    @property
    def average_gain(self) -> float:
        return self._up.value

    @property
    def average_loss(self) -> float:
        return self._down.value

    def next(self, timestamp: TimestampLike, value: float) -> float:
        ts = to_timestamp_us(timestamp)
        value = float(value)
        gain = loss = 0.0

        if self._prev_timestamp is None:
            self._prev_value = value
            self._prev_timestamp = ts
        elif ts != self._prev_timestamp:
            if ts < self._prev_timestamp:
                logger.debug(
                    f"Out-of-order sample (previous {self._prev_timestamp}us)",
                    extra={"timestamp_us": ts},
                )
            time_factor = (ts - self._prev_timestamp) / self._up.period_us
            change = value - self._prev_value
            if change > 0:
                gain = change * time_factor
            else:
                loss = (self._prev_value - value) * time_factor
            self._prev_value = value
            self._prev_timestamp = ts

        avg_gain = self._up.next_us(ts, gain)
        avg_loss = self._down.next_us(ts, loss)
        return rsi_from_averages(avg_gain, avg_loss)

    def reset(self) -> None:
        logger.debug(f"Resetting {self}")
        self._up.reset()
        self._down.reset()
        self._prev_value = None
        self._prev_timestamp = None

    def __str__(self) -> str:
        return f"{self.short_name}({format_duration(self._up.period * self._up.period_us)})"

    def _params(self) -> Dict[str, Any]:
        return {"period": self._up.period, "period_duration_us": self._up.period_us}

    @classmethod
    def _from_params(cls, params: Dict[str, Any]) -> "RelativeStrengthIndex":
        return cls(int(params["period"]), timedelta(microseconds=int(params["period_duration_us"])))

    def _state(self) -> Dict[str, Any]:
        return {
            "up": self._up.state(),
            "down": self._down.state(),
            "prev_value": self._prev_value,
            "prev_timestamp": self._prev_timestamp,
        }

    def _restore(self, state: Dict[str, Any]) -> None:
        self._up.restore(state["up"])
        self._down.restore(state["down"])
        prev_value = state["prev_value"]
        prev_ts = state["prev_timestamp"]
        self._prev_value = float(prev_value) if prev_value is not None else None
        self._prev_timestamp = int(prev_ts) if prev_ts is not None else None
