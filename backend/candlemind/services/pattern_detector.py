from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from candlemind.services.candlestick import CandleStick
from candlemind.services.lookback_window import LookbackWindow, new_window

# (name, predicate) pairs, in the order names are reported.
SINGLE_BAR_PATTERNS: Tuple[Tuple[str, Callable[[CandleStick], bool]], ...] = (
    ("doji", CandleStick.is_doji),
    ("long_legged_doji", CandleStick.is_long_legged_doji),
    ("dragonfly_doji", CandleStick.is_dragonfly_doji),
    ("gravestone_doji", CandleStick.is_gravestone_doji),
    ("hammer", CandleStick.is_hammer),
    ("inverted_hammer", CandleStick.is_inverted_hammer),
    ("hanging_man", CandleStick.is_hanging_man),
    ("shooting_star", CandleStick.is_shooting_star),
    ("spinning_top", CandleStick.is_spinning_top),
    ("marubozu", CandleStick.is_marubozu),
    ("bullish_marubozu", CandleStick.is_bullish_marubozu),
    ("bearish_marubozu", CandleStick.is_bearish_marubozu),
)

MULTI_BAR_PATTERNS: Tuple[Tuple[str, Callable[[LookbackWindow], bool]], ...] = (
    ("bullish_doji_star", LookbackWindow.is_bullish_doji_star),
    ("bearish_doji_star", LookbackWindow.is_bearish_doji_star),
    ("bullish_engulfing", LookbackWindow.is_bullish_engulfing),
    ("bearish_engulfing", LookbackWindow.is_bearish_engulfing),
    ("bullish_harami", LookbackWindow.is_bullish_harami),
    ("bearish_harami", LookbackWindow.is_bearish_harami),
    ("dark_cloud_cover", LookbackWindow.is_dark_cloud_cover),
    ("evening_star", LookbackWindow.is_evening_star),
    ("evening_star_doji", LookbackWindow.is_evening_star_doji),
    ("morning_star", LookbackWindow.is_morning_star),
    ("morning_star_doji", LookbackWindow.is_morning_star_doji),
    ("three_white_soldiers", LookbackWindow.is_three_white_soldiers),
    ("three_black_crows", LookbackWindow.is_three_black_crows),
    ("three_inside_up", LookbackWindow.is_three_inside_up),
    ("three_inside_down", LookbackWindow.is_three_inside_down),
)

PATTERN_NAMES: Tuple[str, ...] = tuple(
    name for name, _ in SINGLE_BAR_PATTERNS + MULTI_BAR_PATTERNS
)


def direction(candle: CandleStick) -> str:
    if candle.is_bullish():
        return "bullish"
    if candle.is_bearish():
        return "bearish"
    return "neutral"


def detect_single_patterns(candle: CandleStick) -> List[str]:
    return [name for name, check in SINGLE_BAR_PATTERNS if check(candle)]


def detect_patterns(window: LookbackWindow) -> List[str]:
    """Names of every multi-candle pattern that holds for the window's latest state."""
    return [name for name, check in MULTI_BAR_PATTERNS if check(window)]


def classify_candle(latest: CandleStick, previous: Optional[CandleStick] = None) -> List[str]:
    """
    Pattern names for a single candle, optionally using the previous candle.

    - direction first: bullish / bearish / neutral
    - single-candle shapes: doji family, hammer family, spinning top, marubozu
    - with `previous`: the two-candle patterns (engulfing, harami, doji star,
      dark cloud cover)
    """
    patterns: List[str] = [direction(latest)]
    patterns.extend(detect_single_patterns(latest))

    if previous is not None:
        window = new_window().push(previous).push(latest)
        patterns.extend(detect_patterns(window))

    return patterns
