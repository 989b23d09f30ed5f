"""
Temporal core shared by all indicators.

```
(timestamp, value)
        ↓
TemporalBucketer  ── replace latest slot / start new slot
        ↓
SlidingWindow     ── evict stale, replace-or-append, keep accumulators
        ↓
indicator reducer (mean, std, max, min, drawdown, bands)

(timestamp, value)
        ↓
TimeWeightedExponentialSmoother ── EMA, RSI gain/loss averages
```
"""

from .accumulators import Accumulator, SumAccumulator, SumOfSquaresAccumulator
from .bucketer import AdaptiveTimeDetector, TemporalBucketer, select_mode
from .data_types import (
    MICROS_PER_SECOND,
    BucketingMode,
    DurationLike,
    Sample,
    TimestampLike,
    from_timestamp_us,
    to_duration_us,
    to_timestamp_us,
)
from .rolling_window import SlidingWindow
from .smoother import TimeWeightedExponentialSmoother

__all__ = [
    "Accumulator",
    "SumAccumulator",
    "SumOfSquaresAccumulator",
    "AdaptiveTimeDetector",
    "TemporalBucketer",
    "select_mode",
    "MICROS_PER_SECOND",
    "BucketingMode",
    "DurationLike",
    "Sample",
    "TimestampLike",
    "from_timestamp_us",
    "to_duration_us",
    "to_timestamp_us",
    "SlidingWindow",
    "TimeWeightedExponentialSmoother",
]
