"""
Base classes for streaming indicators.

Every indicator exposes the same surface:

    indicator.next(timestamp, value) -> output
    indicator.reset()
    str(indicator)                   -> "SMA(7s)", "EMA(14 x 1 days)", ...
    indicator.to_dict() / Indicator.from_dict(payload)

Window-based indicators share ``WindowIndicator``, which owns a
``SlidingWindow`` and only asks subclasses for their accumulators, their
eviction boundary and their reducer.
"""

import copy
import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG
from ..core.accumulators import Accumulator
from ..core.data_types import MICROS_PER_SECOND, BucketingMode, DurationLike, TimestampLike
from ..core.rolling_window import SlidingWindow
from ..errors import SerializationError

logger = logging.getLogger(__name__)

SERIAL_VERSION = 1

# Largest whole unit first
_DURATION_UNITS = (
    (86_400, "days"),
    (3_600, "hours"),
    (60, "minutes"),
)


def format_number(value: float) -> str:
    """Render 3.0 as "3" and 2.5 as "2.5"."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def format_duration(duration_us: int) -> str:
    """
    Human-readable duration in the largest unit that divides it evenly.

    Examples:
        7s -> "7s", 10 days -> "10 days", 90 minutes -> "90 minutes"
    """
    if duration_us % MICROS_PER_SECOND:
        return f"{format_number(duration_us / MICROS_PER_SECOND)}s"

    seconds = duration_us // MICROS_PER_SECOND
    for unit_seconds, label in _DURATION_UNITS:
        if seconds % unit_seconds == 0:
            return f"{seconds // unit_seconds} {label}"
    return f"{seconds}s"


class Indicator(ABC):
    """Streaming indicator fed one ``(timestamp, value)`` sample at a time."""

    short_name: str = ""

    @abstractmethod
    def next(self, timestamp: TimestampLike, value: float) -> Any:
        """Consume a sample and return the updated indicator value."""

    @abstractmethod
    def reset(self) -> None:
        """Return to the post-construction, pre-data state."""

    @abstractmethod
    def __str__(self) -> str:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @abstractmethod
    def _params(self) -> Dict[str, Any]:
        """Constructor parameters, JSON-compatible."""

    @classmethod
    @abstractmethod
    def _from_params(cls, params: Dict[str, Any]) -> "Indicator":
        ...

    @abstractmethod
    def _state(self) -> Dict[str, Any]:
        """Full mutable state, JSON-compatible."""

    @abstractmethod
    def _restore(self, state: Dict[str, Any]) -> None:
        ...

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot parameters and full internal state."""
        return {
            "type": type(self).__name__,
            "version": SERIAL_VERSION,
            "params": self._params(),
            "state": self._state(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Indicator":
        """Rebuild an indicator from ``to_dict`` output."""
        if not isinstance(payload, dict):
            raise SerializationError("Indicator payload must be a mapping", payload)
        if payload.get("type") != cls.__name__:
            raise SerializationError(
                f"Payload type {payload.get('type')!r} does not match {cls.__name__}", payload
            )
        if payload.get("version") != SERIAL_VERSION:
            raise SerializationError(
                f"Unsupported payload version {payload.get('version')!r}", payload
            )

        try:
            indicator = cls._from_params(payload["params"])
            indicator._restore(payload["state"])
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(f"Malformed {cls.__name__} payload: {e}", payload) from e

        logger.debug(f"Restored {indicator}")
        return indicator

    def clone(self) -> "Indicator":
        """Independent copy carrying the same state."""
        return type(self).from_dict(copy.deepcopy(self.to_dict()))


class WindowIndicator(Indicator):
    """
    Indicator reduced over a sliding time window.

    Subclasses set ``inclusive_eviction`` (whether entries exactly one
    duration old are dropped), provide accumulators if they need running sums,
    and implement ``_reduce``.
    """

    inclusive_eviction: bool = True

    def __init__(self, duration: Optional[DurationLike] = None):
        if duration is None:
            duration = DEFAULT_CONFIG.defaults.duration
        self._window = SlidingWindow(
            duration,
            accumulators=self._make_accumulators(),
            inclusive_eviction=self.inclusive_eviction,
        )
        logger.debug(f"Created {self} ({self._window.bucketer.mode.name})")

    def _make_accumulators(self) -> Sequence[Accumulator]:
        return ()

    @abstractmethod
    def _reduce(self) -> Any:
        """Compute the output from the current window."""

    @property
    def duration(self) -> timedelta:
        return timedelta(microseconds=self._window.duration_us)

    @property
    def bucketing_mode(self) -> BucketingMode:
        return self._window.bucketer.mode

    @property
    def window(self) -> List[Tuple[int, float]]:
        """Copy of the retained samples as ``(timestamp_us, value)``, oldest first."""
        return [sample.as_tuple() for sample in self._window.samples()]

    def next(self, timestamp: TimestampLike, value: float) -> Any:
        self._window.push(timestamp, value)
        return self._reduce()

    def reset(self) -> None:
        self._window.reset()

    def __str__(self) -> str:
        return f"{self.short_name}({format_duration(self._window.duration_us)})"

    def _params(self) -> Dict[str, Any]:
        return {"duration_us": self._window.duration_us}

    @classmethod
    def _from_params(cls, params: Dict[str, Any]) -> "WindowIndicator":
        return cls(timedelta(microseconds=int(params["duration_us"])))

    def _state(self) -> Dict[str, Any]:
        return {"window": self._window.state()}

    def _restore(self, state: Dict[str, Any]) -> None:
        self._window.restore(state["window"])
