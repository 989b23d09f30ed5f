"""
Temporal Bucketer - decides whether a sample replaces the latest one.

The mode is chosen once, from the indicator's characteristic duration D:

    D < 5min         -> SECOND_BUCKET  (samples in the same second collapse)
    5min <= D < 1day -> MINUTE_BUCKET  (samples in the same minute collapse)
    D >= 1day        -> DAILY_GAP      (a new slot needs 3h24m since the last one)

The 3h24m gap keeps exactly two points (open, close) for half-day (~3.5h) and
full-day (~6.5h) sessions, while minute-by-minute intraday updates keep
replacing the most recent point.

USAGE:
    bucketer = TemporalBucketer(timedelta(days=14))
    if bucketer.should_replace(ts):
        window.pop()
    window.append((ts, value))
"""

import logging
import warnings
from typing import Any, Dict, Optional

from ..config import DEFAULT_CONFIG, BucketingConfig
from ..errors import InvalidParameter
from .data_types import (
    BucketingMode,
    DurationLike,
    TimestampLike,
    to_duration_us,
    to_timestamp_us,
)

logger = logging.getLogger(__name__)


def select_mode(duration_us: int, config: Optional[BucketingConfig] = None) -> BucketingMode:
    """Pick the bucketing mode for a characteristic duration (microseconds)."""
    cfg = config or DEFAULT_CONFIG.bucketing
    if duration_us < to_duration_us(cfg.second_bucket_limit):
        return BucketingMode.SECOND_BUCKET
    if duration_us < to_duration_us(cfg.minute_bucket_limit):
        return BucketingMode.MINUTE_BUCKET
    return BucketingMode.DAILY_GAP


class TemporalBucketer:
    """
    Classifies each incoming timestamp as "replace current slot" or "new slot".

    Must be called exactly once per timestamp, in timestamp order.
    """

    __slots__ = ('_duration_us', '_mode', '_width_us', '_gap_us', '_last_slot_key', '_last_slot_start')

    def __init__(self, duration: DurationLike, config: Optional[BucketingConfig] = None):
        cfg = config or DEFAULT_CONFIG.bucketing
        duration_us = to_duration_us(duration)
        if duration_us <= 0:
            logger.warning(f"Rejecting bucketer duration {duration!r}")
            raise InvalidParameter("duration", duration)

        self._duration_us = duration_us
        self._mode = select_mode(duration_us, cfg)

        if self._mode is BucketingMode.SECOND_BUCKET:
            self._width_us: Optional[int] = to_duration_us(cfg.second_bucket_width)
        elif self._mode is BucketingMode.MINUTE_BUCKET:
            self._width_us = to_duration_us(cfg.minute_bucket_width)
        else:
            self._width_us = None
        self._gap_us = to_duration_us(cfg.daily_gap)

        self._last_slot_key: Optional[int] = None
        self._last_slot_start: Optional[int] = None

        logger.debug(f"Bucketer for duration {duration_us}us selected", extra={"mode": self._mode})

    @property
    def mode(self) -> BucketingMode:
        return self._mode

    @property
    def duration_us(self) -> int:
        return self._duration_us

    @property
    def last_slot_key(self) -> Optional[int]:
        return self._last_slot_key

    @property
    def last_slot_start(self) -> Optional[int]:
        return self._last_slot_start

    def should_replace(self, timestamp: TimestampLike) -> bool:
        """True if ``timestamp`` falls in the current slot and should replace it."""
        return self.classify_us(to_timestamp_us(timestamp))

    def classify_us(self, timestamp_us: int) -> bool:
        """``should_replace`` for an already normalised timestamp."""
        if self._width_us is not None:
            key = timestamp_us // self._width_us
            replace = key == self._last_slot_key
            self._last_slot_key = key
            return replace

        if self._last_slot_start is not None:
            delta = timestamp_us - self._last_slot_start
            if 0 < delta < self._gap_us:
                return True
        self._last_slot_start = timestamp_us
        return False

    def reset(self) -> None:
        """Forget the current slot. The mode is kept."""
        self._last_slot_key = None
        self._last_slot_start = None

    def state(self) -> Dict[str, Any]:
        return {
            "last_slot_key": self._last_slot_key,
            "last_slot_start": self._last_slot_start,
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self._last_slot_key = state.get("last_slot_key")
        self._last_slot_start = state.get("last_slot_start")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self._mode.name}, duration_us={self._duration_us})"


class AdaptiveTimeDetector(TemporalBucketer):
    """
    DEPRECATED: use TemporalBucketer.

    The detector used to learn the data frequency from the first few samples.
    Slot selection is now fixed by the declared duration; this name is kept so
    existing call sites keep working. ``detection_samples`` is ignored.
    """

    __slots__ = ()

    def __init__(
        self,
        duration: DurationLike,
        detection_samples: Optional[int] = None,
        config: Optional[BucketingConfig] = None,
    ):
        warnings.warn(
            "AdaptiveTimeDetector is deprecated, use TemporalBucketer",
            DeprecationWarning,
            stacklevel=2,
        )
        super().__init__(duration, config)

    @classmethod
    def with_samples(cls, duration: DurationLike, detection_samples: int) -> "AdaptiveTimeDetector":
        return cls(duration, detection_samples)

    @property
    def frequency(self) -> BucketingMode:
        return self._mode

    def is_detected(self) -> bool:
        return True
