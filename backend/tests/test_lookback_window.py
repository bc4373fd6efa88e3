"""
Lookback window addressing: push/resolve across startup, wraparound and
eviction.
"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from candlemind.models.candles import Candle
from candlemind.services.candlestick import CandleLike, CandleStick
from candlemind.services.lookback_window import WINDOW_CAPACITY, LookbackWindow, new_window


def make_bars(n):
    return [Candle.from_ohlcv(100.0 + i, 101.0 + i, 99.0 + i, 100.5 + i, t=i) for i in range(n)]


# ──────────────────────────────────────────────
# Empty & startup states
# ──────────────────────────────────────────────

class TestEmptyWindow:
    def test_capacity_is_five(self):
        window = new_window()
        assert WINDOW_CAPACITY == 5
        assert window.capacity == 5

    def test_nothing_available(self):
        window = new_window()
        assert len(window) == 0
        assert window.pushed == 0
        assert window.current() is None
        for n in range(WINDOW_CAPACITY + 2):
            assert window.previous(n) is None
            assert window.resolve(n) is None

    def test_negative_offset_unavailable(self):
        window = new_window().push(make_bars(1)[0])
        assert window.resolve(-1) is None


class TestStartup:
    def test_single_push(self):
        bar = make_bars(1)[0]
        window = new_window().push(bar)
        assert window.current() is bar
        assert window.previous(1) is None
        assert len(window) == 1

    def test_push_is_chainable(self):
        a, b = make_bars(2)
        window = new_window()
        assert window.push(a).push(b) is window
        assert window.current() is b
        assert window.previous(1) is a

    @pytest.mark.parametrize("count", range(1, WINDOW_CAPACITY + 1))
    def test_partial_fill_distinguishes_never_written(self, count):
        bars = make_bars(count)
        window = new_window()
        for bar in bars:
            window.push(bar)
        for k in range(count):
            assert window.resolve(k) is bars[-1 - k]
        for k in range(count, WINDOW_CAPACITY):
            assert window.resolve(k) is None


# ──────────────────────────────────────────────
# Wraparound & eviction
# ──────────────────────────────────────────────

class TestWraparound:
    def test_offsets_beyond_capacity_always_unavailable(self):
        window = new_window()
        for bar in make_bars(17):
            window.push(bar)
            assert window.resolve(WINDOW_CAPACITY) is None
            assert window.resolve(WINDOW_CAPACITY + 3) is None

    def test_sixth_push_evicts_first(self):
        bars = make_bars(WINDOW_CAPACITY + 1)
        window = new_window()
        for bar in bars:
            window.push(bar)
        assert window.previous(WINDOW_CAPACITY - 1) is bars[1]
        assert all(window.resolve(k) is not bars[0] for k in range(WINDOW_CAPACITY))
        assert len(window) == WINDOW_CAPACITY
        assert window.pushed == WINDOW_CAPACITY + 1

    @pytest.mark.parametrize("count", [5, 6, 9, 10, 11, 23])
    def test_addressing_after_many_wraps(self, count):
        bars = make_bars(count)
        window = new_window()
        for bar in bars:
            window.push(bar)
        for k in range(WINDOW_CAPACITY):
            assert window.resolve(k) is bars[-1 - k]
        assert window.current() is bars[-1]
        assert window.previous(1) is bars[-2]
        assert window.previous(2) is bars[-3]

    def test_repeated_overwrites_of_same_bar(self):
        bar = make_bars(1)[0]
        window = new_window()
        for _ in range(12):
            window.push(bar)
        assert all(window.resolve(k) is bar for k in range(WINDOW_CAPACITY))


# ──────────────────────────────────────────────
# Read-only queries
# ──────────────────────────────────────────────

class TestQueriesAreReadOnly:
    def test_queries_do_not_move_the_window(self):
        bars = make_bars(3)
        window = new_window()
        for bar in bars:
            window.push(bar)
        before = (window.pushed, len(window), window.current())
        window.is_morning_star()
        window.is_bullish_engulfing()
        window.resolve(2)
        assert (window.pushed, len(window), window.current()) == before

    def test_window_does_not_copy_candles(self):
        bar = make_bars(1)[0]
        window: LookbackWindow = LookbackWindow()
        window.push(bar)
        assert window.current() is bar


# ──────────────────────────────────────────────
# Any candle-like bar
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Bar(CandleStick):
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class TestOtherBarTypes:
    def test_dataclass_bar_is_candle_like(self):
        assert isinstance(Bar(101.0, 102.0, 99.5, 100.5), CandleLike)

    def test_dataclass_bars_form_patterns(self):
        window = new_window()
        window.push(Bar(101.0, 102.0, 99.5, 100.5)).push(Bar(99.0, 103.0, 98.5, 102.5))
        assert window.is_bullish_engulfing()
        assert not window.is_bearish_harami()

    def test_dataclass_bars_are_addressed_like_candles(self):
        bars = [Bar(100.0 + i, 101.0 + i, 99.0 + i, 100.5 + i) for i in range(WINDOW_CAPACITY + 2)]
        window = new_window()
        for bar in bars:
            window.push(bar)
        assert window.current() is bars[-1]
        assert window.previous(WINDOW_CAPACITY - 1) is bars[2]
