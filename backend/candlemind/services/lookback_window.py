from __future__ import annotations

from typing import Generic, List, Optional, Tuple, TypeVar

from candlemind.services.candlestick import CandleLike
from candlemind.services.utils import midpoint

WINDOW_CAPACITY = 5

T = TypeVar("T", bound=CandleLike)


class LookbackWindow(Generic[T]):
    """
    Ring buffer of the last few candles plus the multi-candle pattern checks.

    Candles are pushed one at a time as each period closes and the window is
    queried after every push:

        window = new_window()
        window.push(prev).push(curr)
        if window.is_bullish_engulfing():
            ...

    The window keeps references to the caller's candles; it never copies or
    modifies them. Every `is_*` query is read-only and returns False when
    there is not enough history yet, so "no match" and "too early to tell"
    look the same to the caller.
    """

    capacity: int = WINDOW_CAPACITY

    def __init__(self) -> None:
        self._slots: List[Optional[T]] = [None] * self.capacity
        self._cursor = 0
        self._pushed = 0

    def __len__(self) -> int:
        return min(self._pushed, self.capacity)

    def __repr__(self) -> str:
        return f"LookbackWindow(pushed={self._pushed}, cursor={self._cursor})"

    @property
    def pushed(self) -> int:
        """Total number of candles pushed since creation, evicted ones included."""
        return self._pushed

    def push(self, candle: T) -> "LookbackWindow[T]":
        """Append a candle, evicting the oldest once the window is full."""
        self._slots[self._cursor] = candle
        self._cursor = (self._cursor + 1) % self.capacity
        self._pushed += 1
        return self

    def resolve(self, k: int) -> Optional[T]:
        """The candle pushed k pushes before the latest one (k=0 is the latest)."""
        if k < 0 or k >= self.capacity:
            return None
        # A slot can still hold nothing (or be aliased) until k+1 pushes happened.
        if k + 1 > self._pushed:
            return None
        return self._slots[(self._cursor - 1 - k) % self.capacity]

    def current(self) -> Optional[T]:
        return self.resolve(0)

    def previous(self, n: int) -> Optional[T]:
        """The candle n bars before the current one; previous(1) is the one right before."""
        return self.resolve(n)

    def _pair(self) -> Optional[Tuple[T, T]]:
        curr, prev = self.current(), self.previous(1)
        if curr is None or prev is None:
            return None
        return curr, prev

    def _triple(self) -> Optional[Tuple[T, T, T]]:
        curr, prev1, prev2 = self.current(), self.previous(1), self.previous(2)
        if curr is None or prev1 is None or prev2 is None:
            return None
        return curr, prev1, prev2

    # ---------- two-candle patterns ----------

    def is_bullish_doji_star(self) -> bool:
        """Bearish candle followed by a doji gapping below its low."""
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return p.is_bearish() and c.is_doji() and c.high < p.low

    def is_bearish_doji_star(self) -> bool:
        """Bullish candle followed by a doji gapping above its high."""
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return p.is_bullish() and c.is_doji() and c.low > p.high

    def is_bullish_engulfing(self) -> bool:
        """
        Bearish candle whose body is swallowed by the next, bullish body
        (open below the prior close, close above the prior open).
        """
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return (
            p.is_bearish()
            and c.is_bullish()
            and c.open < p.close
            and c.close > p.open
        )

    def is_bearish_engulfing(self) -> bool:
        """
        Bullish candle whose body is swallowed by the next, bearish body
        (open above the prior close, close below the prior open).
        """
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return (
            p.is_bullish()
            and c.is_bearish()
            and c.open > p.close
            and c.close < p.open
        )

    def is_bullish_harami(self) -> bool:
        """Small bullish body that opens above the prior bearish close and closes below its open."""
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return (
            p.is_bearish()
            and c.is_bullish()
            and c.open > p.close
            and c.close < p.open
        )

    def is_bearish_harami(self) -> bool:
        """Small bearish body that opens below the prior bullish close and closes above its open."""
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return (
            p.is_bullish()
            and c.is_bearish()
            and c.open < p.close
            and c.close > p.open
        )

    def is_dark_cloud_cover(self) -> bool:
        """
        Bearish candle opening above the prior bullish close and closing
        below the midpoint of the prior body.
        """
        pair = self._pair()
        if pair is None:
            return False
        c, p = pair
        return (
            c.is_bearish()
            and p.is_bullish()
            and c.open > p.close
            and c.close < midpoint(p.open, p.close)
        )

    # ---------- three-candle patterns ----------

    def is_evening_star(self) -> bool:
        """
        Top reversal:
          1. a bullish candle,
          2. a small star (doji, or a small rising body),
          3. a bearish candle closing below the midpoint of the first body.
        """
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bullish()
            and (p1.is_doji() or p1.open < p1.close)
            and c.is_bearish()
            and c.close < midpoint(p2.open, p2.close)
        )

    def is_evening_star_doji(self) -> bool:
        """Evening star whose middle candle is a doji."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bullish()
            and p1.is_doji()
            and c.is_bearish()
            and c.close < midpoint(p2.open, p2.close)
        )

    def is_morning_star(self) -> bool:
        """
        Bottom reversal:
          1. a bearish candle,
          2. a small star (doji, or a small rising body),
          3. a bullish candle closing above the midpoint of the first body.
        """
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bearish()
            and (p1.is_doji() or p1.open < p1.close)
            and c.is_bullish()
            and c.close > midpoint(p2.open, p2.close)
        )

    def is_morning_star_doji(self) -> bool:
        """Morning star whose middle candle is a doji."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bearish()
            and p1.is_doji()
            and c.is_bullish()
            and c.close > midpoint(p2.open, p2.close)
        )

    def is_three_white_soldiers(self) -> bool:
        """Three rising bullish candles, each opening and closing above the prior close."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bullish()
            and p1.is_bullish()
            and p1.open > p2.close
            and p1.close > p2.close
            and c.is_bullish()
            and c.open > p1.close
            and c.close > p1.close
        )

    def is_three_black_crows(self) -> bool:
        """Three falling bearish candles, each opening and closing below the prior close."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bearish()
            and p1.is_bearish()
            and p1.open < p2.close
            and p1.close < p2.close
            and c.is_bearish()
            and c.open < p1.close
            and c.close < p1.close
        )

    def is_three_inside_up(self) -> bool:
        """Bullish harami confirmed by a third, non-doji bullish candle closing higher."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bearish()
            and p1.is_bullish()
            and p1.open > p2.close
            and p1.close < p2.open
            and c.is_bullish()
            and c.close > p1.close
            and not c.is_doji()
        )

    def is_three_inside_down(self) -> bool:
        """Bearish harami confirmed by a third, non-doji bearish candle closing lower."""
        triple = self._triple()
        if triple is None:
            return False
        c, p1, p2 = triple
        return (
            p2.is_bullish()
            and p1.is_bearish()
            and p1.open < p2.close
            and p1.close > p2.open
            and c.is_bearish()
            and c.close < p1.close
            and not c.is_doji()
        )


def new_window() -> LookbackWindow:
    """An empty window holding up to WINDOW_CAPACITY candles."""
    return LookbackWindow()
