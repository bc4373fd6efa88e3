from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from candlemind.models.thresholds import DEFAULT_THRESHOLDS, CandleThresholds
from candlemind.services.candlestick import CandleStick


class Candle(CandleStick, BaseModel):
    """
    One OHLCV bar. Wire names stay short (t, o, h, l, c, v); the long
    accessors (open, high, ...) are what the pattern code reads.
    """

    model_config = ConfigDict(frozen=True)

    t: Optional[int] = None
    o: float
    h: float
    l: float
    c: float
    v: float = 0.0

    thresholds: CandleThresholds = Field(
        default=DEFAULT_THRESHOLDS, exclude=True, repr=False
    )

    @classmethod
    def from_ohlcv(
        cls,
        open: float,
        high: float,
        low: float,
        close: float,
        volume: float = 0.0,
        t: Optional[int] = None,
        thresholds: Optional[CandleThresholds] = None,
    ) -> "Candle":
        data: Dict[str, Any] = {"t": t, "o": open, "h": high, "l": low, "c": close, "v": volume}
        if thresholds is not None:
            data["thresholds"] = thresholds
        return cls(**data)

    def with_thresholds(self, **overrides: float) -> "Candle":
        """Copy of this candle with some thresholds replaced (validated)."""
        merged = {**self.thresholds.model_dump(), **overrides}
        return self.model_copy(update={"thresholds": CandleThresholds(**merged)})

    @property
    def open(self) -> float:
        return self.o

    @property
    def high(self) -> float:
        return self.h

    @property
    def low(self) -> float:
        return self.l

    @property
    def close(self) -> float:
        return self.c

    @property
    def volume(self) -> float:
        return self.v


class CandleWithPatterns(BaseModel):
    symbol: str
    resolution: str
    candle: Candle
    patterns: List[str]


class ClassifyRequest(BaseModel):
    candle: Candle
    previous: Optional[Candle] = None
    thresholds: Optional[CandleThresholds] = None


class ClassifyResponse(BaseModel):
    patterns: List[str]


class PatternScanRequest(BaseModel):
    symbol: str = Field(..., min_length=1)
    resolution: str = "1"
    candles: List[Candle]
    thresholds: Optional[CandleThresholds] = None


class PatternScanResponse(BaseModel):
    symbol: str
    resolution: str
    count: int
    results: List[CandleWithPatterns]
