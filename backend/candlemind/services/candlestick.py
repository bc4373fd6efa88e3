from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

from candlemind.models.thresholds import DEFAULT_THRESHOLDS, CandleThresholds

# Floors keep the ratio math finite for flat candles (high == low, open == close).
MIN_RANGE = 0.001
MIN_BODY = 0.0001


@runtime_checkable
class CandleLike(Protocol):
    """What the lookback window needs from a candle."""

    @property
    def open(self) -> float: ...

    @property
    def high(self) -> float: ...

    @property
    def low(self) -> float: ...

    @property
    def close(self) -> float: ...

    @property
    def volume(self) -> float: ...

    def is_bullish(self) -> bool: ...

    def is_bearish(self) -> bool: ...

    def is_doji(self) -> bool: ...


class CandleStick:
    """
    Single-candle shape analysis.

    Subclasses provide `open`, `high`, `low`, `close` and `volume`; every
    ratio and `is_*` predicate below is derived from those five values and
    from the `thresholds` attribute when the subclass defines one (the
    defaults otherwise).

    Ratios:
      - range: high - low (floored at MIN_RANGE)
      - body:  |open - close| (floored at MIN_BODY)
      - wick:  upper shadow, high - max(open, close)
      - tail:  lower shadow, min(open, close) - low
    """

    def _thresholds(self) -> CandleThresholds:
        return getattr(self, "thresholds", None) or DEFAULT_THRESHOLDS

    # ---------- geometry ----------

    def ohlc(self) -> Tuple[float, float, float, float]:
        return (self.open, self.high, self.low, self.close)

    def range(self) -> float:
        return max(self.high - self.low, MIN_RANGE)

    def body(self) -> float:
        return max(abs(self.open - self.close), MIN_BODY)

    def wick(self) -> float:
        return self.high - max(self.open, self.close)

    def tail(self) -> float:
        return min(self.open, self.close) - self.low

    def wick_range_ratio(self) -> float:
        return self.wick() / self.range()

    def wick_body_ratio(self) -> float:
        return self.wick() / self.body()

    def body_range_ratio(self) -> float:
        return self.body() / self.range()

    def tail_range_ratio(self) -> float:
        return self.tail() / self.range()

    def tail_body_ratio(self) -> float:
        return self.tail() / self.body()

    # ---------- direction ----------

    def is_bullish(self) -> bool:
        return self.open < self.close

    def is_bearish(self) -> bool:
        return self.open > self.close

    # ---------- marubozu ----------

    def is_marubozu(self) -> bool:
        """Body with (almost) no shadows on either side."""
        ratio = self._thresholds().marubozu_ratio
        return self.wick_body_ratio() < ratio and self.tail_body_ratio() < ratio

    def is_bullish_marubozu(self) -> bool:
        return self.is_bullish() and self.is_marubozu()

    def is_bearish_marubozu(self) -> bool:
        return self.is_bearish() and self.is_marubozu()

    # ---------- hammer family ----------

    def is_hammer(self) -> bool:
        """Small body near the top with a long lower shadow."""
        th = self._thresholds()
        return (
            self.body_range_ratio() < th.hammer_body_ratio
            and self.wick_range_ratio() < th.hammer_wick_ratio
            and self.tail_range_ratio() > th.hammer_tail_ratio
        )

    def is_inverted_hammer(self) -> bool:
        """Small body near the bottom with a long upper shadow."""
        th = self._thresholds()
        return (
            self.body_range_ratio() < th.hammer_body_ratio
            and self.wick_range_ratio() > th.hammer_tail_ratio
            and self.tail_range_ratio() < th.hammer_wick_ratio
        )

    # Same shape as the hammer / inverted hammer. Telling them apart needs the
    # preceding trend, which a single candle does not carry.
    def is_hanging_man(self) -> bool:
        return self.is_hammer()

    def is_shooting_star(self) -> bool:
        return self.is_inverted_hammer()

    def is_spinning_top(self) -> bool:
        th = self._thresholds()
        return (
            self.body_range_ratio() < th.spinning_top_body_ratio
            and self.wick_range_ratio() > th.spinning_top_shadow_ratio
            and self.tail_range_ratio() > th.spinning_top_shadow_ratio
        )

    # ---------- doji family ----------

    def is_doji(self) -> bool:
        return self.body_range_ratio() < self._thresholds().doji_body_ratio

    def is_long_legged_doji(self) -> bool:
        th = self._thresholds()
        return (
            self.is_doji()
            and self.tail_range_ratio() > th.doji_long_leg_ratio
            and self.wick_range_ratio() > th.doji_long_leg_ratio
        )

    def is_dragonfly_doji(self) -> bool:
        th = self._thresholds()
        return (
            self.is_doji()
            and self.tail_range_ratio() > th.doji_tail_ratio
            and self.wick_range_ratio() < th.doji_min_ratio
        )

    def is_gravestone_doji(self) -> bool:
        th = self._thresholds()
        return (
            self.is_doji()
            and self.wick_range_ratio() > th.doji_wick_ratio
            and self.tail_range_ratio() < th.doji_min_ratio
        )

    # ---------- price helpers ----------

    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3.0

    def raw_money_flow(self) -> float:
        return self.typical_price() * self.volume
