from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["Open", "High", "Low", "Close"]


class CandleDataError(ValueError):
    pass


def midpoint(a: float, b: float) -> float:
    return (a + b) / 2.0


def normalize_ohlcv_frame(df: pd.DataFrame, symbol: Optional[str] = None) -> pd.DataFrame:
    """
    Bring an OHLCV DataFrame to flat 'Open','High','Low','Close','Volume' columns.

    Handles both:
      - normal columns:  'Open','High','Low','Close','Volume' (any case)
      - MultiIndex:      ('Open','AAPL'), ('Close','AAPL'), ... as yfinance returns them

    Raises CandleDataError when the OHLC columns cannot be found.
    """
    if isinstance(df.columns, pd.MultiIndex):
        logger.debug(f"[FRAME] MultiIndex columns for {symbol} {df.columns}")
        if symbol is None:
            raise CandleDataError("A symbol is required to select from MultiIndex columns")
        sym = symbol.upper()
        names = list(df.columns.names)

        if "Ticker" in names:
            df = df.xs(sym, axis=1, level=names.index("Ticker"))
        else:
            # Fallback: find a level that contains our symbol
            for lvl in range(df.columns.nlevels):
                if sym in df.columns.get_level_values(lvl):
                    logger.debug(f"[FRAME] Using MultiIndex level {lvl} for ticker {sym}")
                    df = df.xs(sym, axis=1, level=lvl)
                    break
            else:
                raise CandleDataError(f"Ticker {sym} not found in MultiIndex columns")

    df = df.rename(columns={col: str(col).strip().title() for col in df.columns})

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise CandleDataError(f"Missing required columns {missing}, got {list(df.columns)}")

    if "Volume" not in df.columns:
        df = df.assign(Volume=0.0)

    return df[REQUIRED_COLUMNS + ["Volume"]]
