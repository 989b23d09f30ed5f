"""
End-to-end replacement behaviour across sampling cadences.

Tests:
- Daily open/close bars are both kept
- Intraday minute and tick data collapse within their bucket
- Warm-up on daily bars followed by live intraday updates
- Half-day session replay keeps exactly two points
- Out-of-order input is deterministic
"""

from datetime import datetime, timedelta

import pytest

from streaming_ta.core.data_types import to_timestamp_us
from streaming_ta.indicators import (
    ExponentialMovingAverage,
    Maximum,
    SimpleMovingAverage,
    StandardDeviation,
)


def minutes(n):
    return timedelta(minutes=n)


class TestDailyBars:
    """Open and close of the same session are distinct points."""

    def test_daily_ohlc_no_replacement(self, market_open):
        sma = SimpleMovingAverage(timedelta(days=3))
        day1_close = datetime(2024, 1, 1, 16, 0)
        day2_open = datetime(2024, 1, 2, 9, 30)
        day2_close = datetime(2024, 1, 2, 16, 0)

        assert sma.next(market_open, 100.0) == 100.0
        assert sma.next(day1_close, 105.0) == 102.5
        assert sma.next(day2_open, 110.0) == 105.0
        assert sma.next(day2_close, 108.0) == 105.75
        assert len(sma.window) == 4

    def test_weekly_data(self):
        sma = SimpleMovingAverage(timedelta(days=21))
        weeks = [datetime(2024, 1, 1) + timedelta(weeks=i) for i in range(4)]

        assert sma.next(weeks[0], 100.0) == 100.0
        assert sma.next(weeks[1], 110.0) == 105.0
        assert sma.next(weeks[2], 120.0) == 110.0
        # First week is exactly 21 days old and drops out
        assert sma.next(weeks[3], 115.0) == 115.0


class TestIntraday:
    """Sub-day windows bucket by second or minute."""

    def test_minute_bars_in_distinct_minutes(self, market_open):
        sma = SimpleMovingAverage(timedelta(minutes=15))

        assert sma.next(market_open, 100.0) == 100.0
        assert sma.next(market_open + minutes(5), 101.0) == 100.5
        assert sma.next(market_open + minutes(10), 102.0) == 101.0
        assert sma.next(market_open + minutes(11), 103.0) == 101.5
        # The 9:30 bar is exactly 15 minutes old and drops out
        assert sma.next(market_open + minutes(15), 104.0) == 102.5

    def test_update_within_minute_replaces(self):
        sd = StandardDeviation(timedelta(hours=1))
        start = datetime(2024, 1, 1, 10, 0)

        sd.next(start, 10.0)
        sd.next(start + minutes(1), 12.0)
        sd.next(start + minutes(2), 11.0)
        sd.next(start + minutes(2) + timedelta(seconds=30), 11.5)
        result = sd.next(start + minutes(3), 10.5)

        assert [value for _, value in sd.window] == [10.0, 12.0, 11.5, 10.5]
        assert result == pytest.approx(0.7906, abs=1e-4)

    def test_minute_bar_replacement(self):
        sma = SimpleMovingAverage(timedelta(minutes=5))
        start = datetime(2024, 1, 1, 10, 0)

        sma.next(start, 100.0)
        assert sma.next(start + timedelta(seconds=30), 100.5) == 100.5
        assert sma.next(start + minutes(1), 101.0) == 100.75
        assert sma.next(start + minutes(2), 102.0) == pytest.approx(101.1666, abs=1e-4)
        assert len(sma.window) == 3

    def test_high_frequency_ticks_collapse_per_second(self):
        sma = SimpleMovingAverage(timedelta(seconds=5))
        start = datetime(2024, 1, 1, 10, 0)

        for i, price in enumerate([100.0, 100.1, 100.2, 100.3]):
            sma.next(start + timedelta(milliseconds=100 * i), price)
        result = sma.next(start + timedelta(milliseconds=400), 100.4)

        assert result == 100.4
        assert len(sma.window) == 1

    def test_tick_in_next_second_appends(self):
        maximum = Maximum(timedelta(seconds=5))
        start = datetime(2024, 1, 1, 10, 0)

        maximum.next(start + timedelta(milliseconds=900), 7.0)
        assert maximum.next(start + timedelta(milliseconds=1100), 3.0) == 7.0
        assert len(maximum.window) == 2


class TestMixedCadence:
    """Daily warm-up followed by live intraday updates."""

    def test_transition_from_warmup_to_live(self, market_open):
        sma = SimpleMovingAverage(timedelta(days=2))
        day1_close = datetime(2024, 1, 1, 16, 0)
        day2_open = datetime(2024, 1, 2, 9, 30)

        sma.next(market_open, 100.0)
        sma.next(day1_close, 102.0)
        assert sma.next(day2_open, 104.0) == 102.0

        # 30 minutes into the day-two slot: replaces the open
        result = sma.next(datetime(2024, 1, 2, 10, 0), 105.0)
        assert result == (100.0 + 102.0 + 105.0) / 3.0

    def test_half_day_session_keeps_two_points(self, market_open):
        sma = SimpleMovingAverage(timedelta(days=1))
        for minute in range(211):
            sma.next(market_open + minutes(minute), 100.0 + minute)

        timestamps = [ts for ts, _ in sma.window]
        assert timestamps == [
            to_timestamp_us(market_open + minutes(203)),
            to_timestamp_us(market_open + minutes(210)),
        ]
        assert sma.next(market_open + minutes(210), 310.0) == (303.0 + 310.0) / 2

        bucketer = sma._window.bucketer
        assert bucketer.last_slot_start == to_timestamp_us(market_open + minutes(204))

    def test_intraday_updates_move_daily_ema_smoothly(self, market_open):
        ema = ExponentialMovingAverage(14, timedelta(days=1))
        ema.next(market_open - timedelta(days=1), 100.0)

        previous = ema.value
        for minute in range(0, 390, 5):
            current = ema.next(market_open + minutes(minute), 110.0)
            assert previous < current < 110.0
            previous = current


class TestOutOfOrder:
    """Earlier samples are handled deterministically."""

    def test_daily_window_accepts_earlier_sample(self, market_open):
        sma = SimpleMovingAverage(timedelta(days=3))
        sma.next(market_open + timedelta(days=1), 10.0)
        # Earlier than the slot start: opens a new slot
        assert sma.next(market_open, 20.0) == 15.0
        assert len(sma.window) == 2

    def test_ema_ignores_earlier_sample(self, market_open):
        ema = ExponentialMovingAverage(3, timedelta(days=1))
        ema.next(market_open, 2.0)
        ema.next(market_open + timedelta(days=1), 5.0)
        assert ema.next(market_open, 100.0) == 3.5
