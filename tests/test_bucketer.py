"""
Tests for the temporal bucketer.

Tests:
- Mode selection from the characteristic duration
- Second/minute bucket keys and the unconditional key update
- Daily gap enforcement at its boundaries
- Reset keeps the mode
- Deprecated AdaptiveTimeDetector alias
"""

from datetime import datetime, timedelta

import pytest

from streaming_ta.config import BucketingConfig
from streaming_ta.core.bucketer import AdaptiveTimeDetector, TemporalBucketer, select_mode
from streaming_ta.core.data_types import BucketingMode, to_duration_us
from streaming_ta.errors import InvalidParameter

GAP = timedelta(hours=3, minutes=24)


class TestModeSelection:
    """Mode is a function of the declared duration only."""

    @pytest.mark.parametrize(
        "duration, expected",
        [
            (timedelta(milliseconds=500), BucketingMode.SECOND_BUCKET),
            (timedelta(seconds=1), BucketingMode.SECOND_BUCKET),
            (timedelta(seconds=299), BucketingMode.SECOND_BUCKET),
            (timedelta(minutes=5), BucketingMode.MINUTE_BUCKET),
            (timedelta(hours=23, minutes=59, seconds=59), BucketingMode.MINUTE_BUCKET),
            (timedelta(days=1), BucketingMode.DAILY_GAP),
            (timedelta(days=14), BucketingMode.DAILY_GAP),
        ],
    )
    def test_mode_thresholds(self, duration, expected):
        assert TemporalBucketer(duration).mode is expected
        assert select_mode(to_duration_us(duration)) is expected

    def test_numeric_duration_is_seconds(self):
        assert TemporalBucketer(4).mode is BucketingMode.SECOND_BUCKET
        assert TemporalBucketer(900).mode is BucketingMode.MINUTE_BUCKET
        assert TemporalBucketer(86400).mode is BucketingMode.DAILY_GAP

    def test_zero_duration_rejected(self):
        with pytest.raises(InvalidParameter):
            TemporalBucketer(timedelta(0))
        with pytest.raises(ValueError):
            TemporalBucketer(0)

    def test_negative_duration_rejected(self):
        with pytest.raises(InvalidParameter) as exc_info:
            TemporalBucketer(timedelta(seconds=-1))
        assert exc_info.value.parameter == "duration"


class TestBucketedModes:
    """SECOND_BUCKET / MINUTE_BUCKET compare floor(ts / width) with the previous key."""

    def test_first_call_never_replaces(self, base_time):
        bucketer = TemporalBucketer(timedelta(seconds=5))
        assert bucketer.should_replace(base_time) is False

    def test_same_second_replaces(self, base_time):
        bucketer = TemporalBucketer(timedelta(seconds=5))
        assert bucketer.should_replace(base_time + timedelta(milliseconds=200)) is False
        assert bucketer.should_replace(base_time + timedelta(milliseconds=900)) is True
        assert bucketer.should_replace(base_time + timedelta(seconds=1)) is False

    def test_consecutive_seconds_never_replace(self, seconds):
        bucketer = TemporalBucketer(timedelta(seconds=4))
        results = [bucketer.should_replace(seconds(i)) for i in range(7)]
        assert results == [False] * 7

    def test_same_minute_replaces(self, market_open):
        bucketer = TemporalBucketer(timedelta(minutes=15))
        assert bucketer.mode is BucketingMode.MINUTE_BUCKET
        assert bucketer.should_replace(market_open) is False
        assert bucketer.should_replace(market_open + timedelta(seconds=30)) is True
        assert bucketer.should_replace(market_open + timedelta(seconds=59)) is True
        assert bucketer.should_replace(market_open + timedelta(minutes=1)) is False

    def test_key_updated_even_when_not_replacing(self, base_time):
        """A -> B -> A never replaces: the key always tracks the latest call."""
        bucketer = TemporalBucketer(timedelta(seconds=10))
        a = base_time
        b = base_time + timedelta(seconds=1)
        assert bucketer.should_replace(a) is False
        assert bucketer.should_replace(b) is False
        assert bucketer.should_replace(a) is False
        assert bucketer.should_replace(a) is True

    def test_epoch_seconds_input(self):
        bucketer = TemporalBucketer(60)
        assert bucketer.should_replace(1_700_000_000.1) is False
        assert bucketer.should_replace(1_700_000_000.7) is True
        assert bucketer.last_slot_key == 1_700_000_000


class TestDailyGap:
    """DAILY_GAP: a new slot needs 3h24m since the start of the current slot."""

    def test_intraday_updates_replace(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=1))
        assert bucketer.should_replace(market_open) is False
        assert bucketer.should_replace(market_open + timedelta(minutes=1)) is True
        assert bucketer.should_replace(market_open + timedelta(minutes=30)) is True
        assert bucketer.should_replace(market_open + timedelta(minutes=180)) is True
        assert bucketer.should_replace(market_open + timedelta(minutes=205)) is False

    def test_gap_boundaries(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=3))
        bucketer.should_replace(market_open)

        assert bucketer.should_replace(market_open + GAP - timedelta(microseconds=1)) is True
        # Replacements do not move the slot start
        assert bucketer.should_replace(market_open + GAP) is False
        assert bucketer.last_slot_start is not None

    def test_slot_start_not_moved_by_replacements(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=2))
        bucketer.should_replace(market_open)
        start = bucketer.last_slot_start
        for minute in range(1, 100):
            assert bucketer.should_replace(market_open + timedelta(minutes=minute)) is True
        assert bucketer.last_slot_start == start

    def test_same_instant_opens_new_slot(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=1))
        assert bucketer.should_replace(market_open) is False
        assert bucketer.should_replace(market_open) is False

    def test_earlier_timestamp_opens_new_slot(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=1))
        bucketer.should_replace(market_open)
        earlier = market_open - timedelta(minutes=10)
        assert bucketer.should_replace(earlier) is False
        assert bucketer.should_replace(earlier + timedelta(minutes=1)) is True

    def test_open_close_sessions_keep_both(self, market_open):
        """Full-day (6.5h) and half-day (3.5h) sessions keep open and close."""
        bucketer = TemporalBucketer(timedelta(days=5))
        assert bucketer.should_replace(market_open) is False
        assert bucketer.should_replace(market_open + timedelta(hours=6, minutes=30)) is False
        next_open = market_open + timedelta(days=1)
        assert bucketer.should_replace(next_open) is False
        assert bucketer.should_replace(next_open + timedelta(hours=3, minutes=30)) is False

    def test_custom_gap(self, market_open):
        bucketer = TemporalBucketer(
            timedelta(days=1), BucketingConfig(daily_gap=timedelta(hours=1))
        )
        bucketer.should_replace(market_open)
        assert bucketer.should_replace(market_open + timedelta(minutes=59)) is True
        assert bucketer.should_replace(market_open + timedelta(minutes=60)) is False


class TestReset:
    """reset() clears slot state only."""

    def test_reset_forgets_slot(self, base_time):
        bucketer = TemporalBucketer(timedelta(seconds=5))
        bucketer.should_replace(base_time)
        bucketer.reset()
        assert bucketer.last_slot_key is None
        assert bucketer.should_replace(base_time) is False
        assert bucketer.mode is BucketingMode.SECOND_BUCKET

    def test_reset_daily(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=1))
        bucketer.should_replace(market_open)
        bucketer.reset()
        assert bucketer.last_slot_start is None
        assert bucketer.should_replace(market_open + timedelta(minutes=1)) is False
        assert bucketer.mode is BucketingMode.DAILY_GAP

    def test_state_roundtrip(self, market_open):
        bucketer = TemporalBucketer(timedelta(days=1))
        bucketer.should_replace(market_open)
        other = TemporalBucketer(timedelta(days=1))
        other.restore(bucketer.state())
        ts = market_open + timedelta(minutes=5)
        assert other.should_replace(ts) is bucketer.should_replace(ts) is True


class TestAdaptiveTimeDetectorAlias:
    """The learning detector survives only as a deprecated name."""

    def test_construction_warns(self):
        with pytest.warns(DeprecationWarning):
            detector = AdaptiveTimeDetector(timedelta(days=1))
        assert isinstance(detector, TemporalBucketer)
        assert detector.is_detected() is True
        assert detector.frequency is BucketingMode.DAILY_GAP

    def test_detection_samples_ignored(self):
        with pytest.warns(DeprecationWarning):
            detector = AdaptiveTimeDetector.with_samples(timedelta(minutes=15), 10)
        assert detector.frequency is BucketingMode.MINUTE_BUCKET

    def test_no_learning_period(self):
        """Behaves like TemporalBucketer from the very first sample."""
        start = datetime(2024, 1, 1, 10, 0, 0)
        with pytest.warns(DeprecationWarning):
            detector = AdaptiveTimeDetector(timedelta(seconds=5))
        assert detector.should_replace(start) is False
        assert detector.should_replace(start + timedelta(milliseconds=100)) is True
