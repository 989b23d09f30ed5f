"""
Core data types for streaming indicators.

These are the atomic units flowing through the system. Every timestamp and
duration handed to an indicator is normalised to an integer number of
microseconds, so slot keys, eviction cut-offs and same-instant checks are exact.
"""

import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Union

import pytz

MICROS_PER_SECOND = 1_000_000

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)

# datetime (naive = UTC), pandas.Timestamp, or epoch seconds
TimestampLike = Union[datetime, float, int]
# timedelta, pandas.Timedelta, or seconds
DurationLike = Union[timedelta, float, int]


# =============================================================================
# CONVERSIONS
# =============================================================================


def to_timestamp_us(timestamp: TimestampLike) -> int:
    """
    Normalise a timestamp to epoch microseconds.

    Naive datetimes are taken as UTC; aware ones are converted to UTC.
    Numbers are epoch seconds.
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = pytz.utc.localize(timestamp)
        else:
            timestamp = timestamp.astimezone(pytz.utc)
        return (timestamp - EPOCH) // _ONE_MICROSECOND
    if isinstance(timestamp, bool) or not isinstance(timestamp, numbers.Real):
        raise TypeError(f"Unsupported timestamp type: {type(timestamp).__name__}")
    if isinstance(timestamp, numbers.Integral):
        return int(timestamp) * MICROS_PER_SECOND
    return int(round(float(timestamp) * MICROS_PER_SECOND))


def to_duration_us(duration: DurationLike) -> int:
    """Normalise a duration (timedelta or seconds) to microseconds."""
    if isinstance(duration, timedelta):
        return duration // _ONE_MICROSECOND
    if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
        raise TypeError(f"Unsupported duration type: {type(duration).__name__}")
    if isinstance(duration, numbers.Integral):
        return int(duration) * MICROS_PER_SECOND
    return int(round(float(duration) * MICROS_PER_SECOND))


def from_timestamp_us(timestamp_us: int) -> datetime:
    """Convert epoch microseconds back to an aware UTC datetime."""
    return EPOCH + timedelta(microseconds=timestamp_us)


# =============================================================================
# SAMPLES AND MODES
# =============================================================================


@dataclass(slots=True, frozen=True)
class Sample:
    """Single observation held in a window."""

    timestamp_us: int
    value: float

    @property
    def timestamp(self) -> datetime:
        return from_timestamp_us(self.timestamp_us)

    def as_tuple(self) -> tuple[int, float]:
        return (self.timestamp_us, self.value)


class BucketingMode(Enum):
    """How a bucketer groups timestamps into slots. Fixed at construction."""

    SECOND_BUCKET = "second_bucket"  # 1s buckets
    MINUTE_BUCKET = "minute_bucket"  # 60s buckets
    DAILY_GAP = "daily_gap"  # minimum-gap enforcement, no fixed width

    @property
    def is_bucketed(self) -> bool:
        return self is not BucketingMode.DAILY_GAP
