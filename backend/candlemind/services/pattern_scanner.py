from __future__ import annotations

import logging
from datetime import timezone
from typing import Dict, Iterable, List, Optional

import pandas as pd

from candlemind.config import settings
from candlemind.models.candles import Candle, CandleWithPatterns
from candlemind.models.thresholds import DEFAULT_THRESHOLDS, CandleThresholds
from candlemind.services.lookback_window import LookbackWindow, new_window
from candlemind.services.pattern_detector import (
    detect_patterns,
    detect_single_patterns,
    direction,
)
from candlemind.services.utils import REQUIRED_COLUMNS, normalize_ohlcv_frame

logger = logging.getLogger(__name__)


class PatternScanner:
    """
    Runs candles through lookback windows and reports the patterns that hold
    after every push.

    `scan` works on a whole series with a fresh window; `feed` keeps one
    window per symbol for live candles arriving one at a time. A scanner is
    meant to be driven from a single task.

    Candles built without thresholds are re-bound to the scanner's thresholds
    (the configured ones unless given explicitly); candles that were given
    thresholds keep them, even when those equal the defaults.
    """

    def __init__(
        self,
        resolution: str = "1",
        thresholds: Optional[CandleThresholds] = None,
    ) -> None:
        self.resolution = resolution
        self.thresholds = thresholds or settings.thresholds()
        self._windows: Dict[str, LookbackWindow] = {}
        self._last_ts: Dict[str, int] = {}

    def _prepare(self, candle: Candle) -> Candle:
        if "thresholds" not in candle.model_fields_set and self.thresholds != DEFAULT_THRESHOLDS:
            return candle.model_copy(update={"thresholds": self.thresholds})
        return candle

    def _report(self, symbol: str, window: LookbackWindow) -> CandleWithPatterns:
        latest = window.current()
        patterns = [direction(latest)]
        patterns.extend(detect_single_patterns(latest))
        patterns.extend(detect_patterns(window))
        return CandleWithPatterns(
            symbol=symbol,
            resolution=self.resolution,
            candle=latest,
            patterns=patterns,
        )

    def scan(self, candles: Iterable[Candle], symbol: str = "") -> List[CandleWithPatterns]:
        """Patterns for every candle of an ordered series (oldest first)."""
        symbol = symbol.upper()
        window = new_window()
        results: List[CandleWithPatterns] = []
        for candle in candles:
            window.push(self._prepare(candle))
            results.append(self._report(symbol, window))

        matched = sum(1 for r in results if len(r.patterns) > 1)
        logger.info(f"[SCAN] {symbol or '-'} res={self.resolution}: {len(results)} candles, {matched} with patterns")
        return results

    def scan_frame(self, df: pd.DataFrame, symbol: str = "") -> List[CandleWithPatterns]:
        """
        Scan an OHLCV DataFrame (one row per candle, oldest first).

        Rows with a missing OHLC value are dropped. A DatetimeIndex becomes
        the candle timestamp; any other index leaves `t` unset.
        """
        frame = normalize_ohlcv_frame(df, symbol or None)
        dropped = len(frame)
        frame = frame.dropna(subset=REQUIRED_COLUMNS)
        dropped -= len(frame)
        if dropped:
            logger.warning(f"[FRAME] Dropped {dropped} incomplete rows for {symbol or '-'}")

        candles: List[Candle] = []
        for ts, row in frame.iterrows():
            t = None
            if isinstance(ts, pd.Timestamp):
                ts_dt = ts.to_pydatetime()
                if ts_dt.tzinfo is None:
                    ts_dt = ts_dt.replace(tzinfo=timezone.utc)
                t = int(ts_dt.timestamp())
            volume = row["Volume"]
            candles.append(
                Candle(
                    t=t,
                    o=float(row["Open"]),
                    h=float(row["High"]),
                    l=float(row["Low"]),
                    c=float(row["Close"]),
                    v=0.0 if pd.isna(volume) else float(volume),
                )
            )
        logger.debug(f"[FRAME] Built {len(candles)} candles for {symbol or '-'}")
        return self.scan(candles, symbol)

    def feed(self, symbol: str, candle: Candle) -> Optional[CandleWithPatterns]:
        """
        Push one closed candle for `symbol` and return the patterns that now hold.

        Returns None (and leaves the window untouched) when the candle is not
        newer than the last one accepted for the symbol.
        """
        symbol = symbol.upper()
        last_ts = self._last_ts.get(symbol)
        if candle.t is not None and last_ts is not None and candle.t <= last_ts:
            logger.debug(f"[STREAM] Ignoring stale candle for {symbol} at {candle.t} (last={last_ts})")
            return None

        window = self._windows.get(symbol)
        if window is None:
            window = self._windows[symbol] = new_window()
            logger.info(f"[STREAM] Opened window for {symbol}")

        window.push(self._prepare(candle))
        if candle.t is not None:
            self._last_ts[symbol] = candle.t

        report = self._report(symbol, window)
        logger.debug(f"[STREAM] {symbol} t={candle.t}: {report.patterns}")
        return report

    def reset(self, symbol: str) -> None:
        """Forget the window and last timestamp for a symbol."""
        symbol = symbol.upper()
        self._windows.pop(symbol, None)
        self._last_ts.pop(symbol, None)
        logger.info(f"[STREAM] Reset window for {symbol}")

    def symbols(self) -> List[str]:
        return sorted(self._windows)
