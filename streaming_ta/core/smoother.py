"""
Time-weighted exponential smoother.

A fixed-k EMA assumes one sample per nominal period. Here the per-period
decay is compounded over the actual elapsed fraction of a period:

    periods    = elapsed / period_duration
    adjusted_k = 1 - (1 - k) ** periods        with k = 2 / (N + 1)
    estimate   = adjusted_k * value + (1 - adjusted_k) * estimate

Feeding minute bars into a 14-day smoother therefore decays by the right
amount per minute, and at matching cadence (periods == 1) the result is the
classic EMA.

A second sample at exactly the same instant replaces the first one: the last
blend is undone algebraically and redone with the new value.
"""

import logging
from typing import Any, Dict, Optional

from ..errors import InvalidParameter
from .data_types import DurationLike, TimestampLike, to_duration_us, to_timestamp_us

logger = logging.getLogger(__name__)


class TimeWeightedExponentialSmoother:
    """
    Exponentially decaying running estimate with elapsed-time decay.

    Args:
        period: Number of nominal periods N (k = 2 / (N + 1))
        period_duration: Length of one nominal period P
    """

    __slots__ = (
        '_period', '_period_us', '_k',
        '_estimate', '_initialized', '_last_value', '_last_timestamp', '_last_decay',
    )

    def __init__(self, period: int, period_duration: DurationLike):
        if isinstance(period, bool) or int(period) != period or period <= 0:
            logger.warning(f"Rejecting smoother period {period!r}")
            raise InvalidParameter("period", period)
        period_us = to_duration_us(period_duration)
        if period_us <= 0:
            logger.warning(f"Rejecting smoother period duration {period_duration!r}")
            raise InvalidParameter("period_duration", period_duration)

        self._period = int(period)
        self._period_us = period_us
        self._k = 2.0 / (self._period + 1.0)
        self.reset()

    @property
    def period(self) -> int:
        return self._period

    @property
    def period_us(self) -> int:
        return self._period_us

    @property
    def k(self) -> float:
        """Base decay constant for one nominal period."""
        return self._k

    @property
    def value(self) -> float:
        """Current estimate (0.0 before the first sample)."""
        return self._estimate

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def last_decay(self) -> float:
        return self._last_decay

    @property
    def last_timestamp_us(self) -> Optional[int]:
        return self._last_timestamp

    def next(self, timestamp: TimestampLike, value: float) -> float:
        """Blend a sample into the estimate and return the new estimate."""
        return self.next_us(to_timestamp_us(timestamp), value)

    def next_us(self, timestamp_us: int, value: float) -> float:
        """``next`` for an already normalised timestamp."""
        value = float(value)

        if not self._initialized:
            self._estimate = value
            self._last_timestamp = timestamp_us
            self._last_value = value
            self._last_decay = 1.0
            self._initialized = True
            return self._estimate

        if timestamp_us == self._last_timestamp:
            self._replace_last(value)
            return self._estimate

        elapsed_us = timestamp_us - self._last_timestamp
        if elapsed_us < 0:
            logger.debug(
                f"Ignoring out-of-order sample (last {self._last_timestamp}us)",
                extra={"timestamp_us": timestamp_us},
            )
            return self._estimate

        periods_elapsed = elapsed_us / self._period_us
        adjusted_k = 1.0 - (1.0 - self._k) ** periods_elapsed

        self._estimate = adjusted_k * value + (1.0 - adjusted_k) * self._estimate
        self._last_timestamp = timestamp_us
        self._last_value = value
        self._last_decay = adjusted_k
        return self._estimate

    def _replace_last(self, value: float) -> None:
        decay = self._last_decay
        if decay == 1.0:
            self._estimate = value
        elif 0.0 < decay < 1.0:
            previous = (self._estimate - decay * self._last_value) / (1.0 - decay)
            self._estimate = decay * value + (1.0 - decay) * previous
        # decay == 0: the last sample carried no weight, estimate unchanged
        self._last_value = value

    def reset(self) -> None:
        """Return to the uninitialized state. N, P and k are kept."""
        self._estimate = 0.0
        self._initialized = False
        self._last_value = 0.0
        self._last_timestamp: Optional[int] = None
        self._last_decay = 0.0

    def state(self) -> Dict[str, Any]:
        return {
            "estimate": self._estimate,
            "initialized": self._initialized,
            "last_value": self._last_value,
            "last_timestamp": self._last_timestamp,
            "last_decay": self._last_decay,
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self._estimate = float(state["estimate"])
        self._initialized = bool(state["initialized"])
        self._last_value = float(state["last_value"])
        last_ts = state["last_timestamp"]
        self._last_timestamp = int(last_ts) if last_ts is not None else None
        self._last_decay = float(state["last_decay"])

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(period={self._period}, period_us={self._period_us}, "
            f"estimate={self._estimate!r})"
        )
