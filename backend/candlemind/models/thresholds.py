from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CandleThresholds(BaseModel):
    """
    Ratio thresholds used by the single-candle classifier.

    Every candle carries one of these; override a field to tune a single
    formation without touching the others.
    """

    model_config = ConfigDict(frozen=True)

    hammer_body_ratio: float = Field(0.3, gt=0)
    hammer_wick_ratio: float = Field(0.2, gt=0)
    hammer_tail_ratio: float = Field(0.6, gt=0)

    spinning_top_body_ratio: float = Field(0.2, gt=0)
    spinning_top_shadow_ratio: float = Field(0.3, gt=0)

    doji_body_ratio: float = Field(0.1, gt=0)
    doji_long_leg_ratio: float = Field(0.3, gt=0)
    doji_tail_ratio: float = Field(0.3, gt=0)
    doji_wick_ratio: float = Field(0.3, gt=0)
    doji_min_ratio: float = Field(0.05, gt=0)

    marubozu_ratio: float = Field(0.2, gt=0)


DEFAULT_THRESHOLDS = CandleThresholds()
