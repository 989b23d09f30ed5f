"""
Sliding time window shared by every window-based indicator.

Update protocol for each sample:

    1. ask the bucketer whether the sample replaces the latest slot
    2. evict entries older than the window (before the replace decision is applied)
    3. on replace, drop the latest entry
    4. append the sample

Accumulators follow every eviction, removal and append, so sum-based reducers
stay O(1). Order-statistic reducers read the window directly.

The window assumes samples arrive in time order. Out-of-order samples are
appended at the back, so they are evicted only once everything ahead of them
is stale.
"""

import logging
from collections import deque
from datetime import timedelta
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..config import BucketingConfig
from ..errors import InvalidParameter
from .accumulators import Accumulator
from .bucketer import TemporalBucketer
from .data_types import DurationLike, Sample, TimestampLike, to_duration_us, to_timestamp_us

logger = logging.getLogger(__name__)


class SlidingWindow:
    """
    Time-bounded window of samples with bucketer-driven de-duplication.

    Example:
        window = SlidingWindow(timedelta(seconds=4), accumulators=[SumAccumulator()])
        window.push(ts, 4.0)
        mean = window.accumulator("sum").value / len(window)

    Args:
        duration: Window length (timedelta or seconds)
        accumulators: Running aggregates kept in sync with the window
        inclusive_eviction: Evict entries exactly ``duration`` old (``<=``);
            when False only strictly older entries are evicted (``<``)
        bucketing: Optional bucketing thresholds
    """

    def __init__(
        self,
        duration: DurationLike,
        accumulators: Sequence[Accumulator] = (),
        inclusive_eviction: bool = True,
        bucketing: Optional[BucketingConfig] = None,
    ):
        duration_us = to_duration_us(duration)
        if duration_us <= 0:
            logger.warning(f"Rejecting window duration {duration!r}")
            raise InvalidParameter("duration", duration)

        self._duration_us = duration_us
        self._inclusive = inclusive_eviction
        self._bucketer = TemporalBucketer(timedelta(microseconds=duration_us), bucketing)
        self._accumulators: Dict[str, Accumulator] = {acc.name: acc for acc in accumulators}
        self._items: deque[Sample] = deque()

    @property
    def duration_us(self) -> int:
        return self._duration_us

    @property
    def inclusive_eviction(self) -> bool:
        return self._inclusive

    @property
    def bucketer(self) -> TemporalBucketer:
        return self._bucketer

    def accumulator(self, name: str) -> Accumulator:
        return self._accumulators[name]

    def push(self, timestamp: TimestampLike, value: float) -> bool:
        """
        Add a sample. Returns True if it replaced the latest entry.
        """
        return self.push_us(to_timestamp_us(timestamp), value)

    def push_us(self, timestamp_us: int, value: float) -> bool:
        """``push`` for an already normalised timestamp."""
        value = float(value)
        replace = self._bucketer.classify_us(timestamp_us)

        # Eviction always runs first, even when replacing
        self._evict_old(timestamp_us)

        replaced = False
        if replace and self._items:
            old = self._items.pop()
            for acc in self._accumulators.values():
                acc.remove(old.value)
            replaced = True

        self._items.append(Sample(timestamp_us, value))
        for acc in self._accumulators.values():
            acc.add(value)

        return replaced

    def _evict_old(self, current_us: int) -> int:
        """
        Remove entries that fell out of the window. Returns count removed.

        Eviction is best-effort for out-of-order input. Samples are kept in
        arrival order and only the head is checked, so an out-of-order sample
        appended behind newer ones survives past the cutoff until every entry
        ahead of it has been evicted.
        """
        cutoff = current_us - self._duration_us
        removed = 0

        while self._items and self._is_stale(self._items[0].timestamp_us, cutoff):
            old = self._items.popleft()
            for acc in self._accumulators.values():
                acc.remove(old.value)
            removed += 1

        return removed

    def _is_stale(self, timestamp_us: int, cutoff_us: int) -> bool:
        if self._inclusive:
            return timestamp_us <= cutoff_us
        return timestamp_us < cutoff_us

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Sample]:
        """Iterate from oldest to newest."""
        return iter(self._items)

    def values(self) -> List[float]:
        return [item.value for item in self._items]

    def samples(self) -> List[Sample]:
        """Snapshot of the retained samples in insertion order."""
        return list(self._items)

    def newest(self) -> Optional[Sample]:
        return self._items[-1] if self._items else None

    def oldest(self) -> Optional[Sample]:
        return self._items[0] if self._items else None

    @property
    def span_us(self) -> int:
        """Time span of data in window (newest - oldest)."""
        if len(self._items) < 2:
            return 0
        return self._items[-1].timestamp_us - self._items[0].timestamp_us

    def reset(self) -> None:
        """Clear window, accumulators and bucketer slot state."""
        logger.debug(f"Resetting window of {self._duration_us}us ({len(self._items)} samples)")
        self._items.clear()
        for acc in self._accumulators.values():
            acc.reset()
        self._bucketer.reset()

    def state(self) -> Dict[str, Any]:
        return {
            "items": [[item.timestamp_us, item.value] for item in self._items],
            "accumulators": {name: acc.state() for name, acc in self._accumulators.items()},
            "bucketer": self._bucketer.state(),
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self._items = deque(Sample(int(ts), float(v)) for ts, v in state["items"])
        for name, acc_state in state.get("accumulators", {}).items():
            self._accumulators[name].restore(acc_state)
        self._bucketer.restore(state["bucketer"])
