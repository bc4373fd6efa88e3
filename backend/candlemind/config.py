"""
CandleMind configuration

Pydantic Settings: loads from the environment (CANDLEMIND_*) or a .env file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from candlemind.models.thresholds import DEFAULT_THRESHOLDS, CandleThresholds


def _ratio(name: str):
    # default and bound mirror CandleThresholds
    return Field(getattr(DEFAULT_THRESHOLDS, name), gt=0)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CANDLEMIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Core ──
    app_name: str = "CandleMind API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173"]

    # ── Single-candle thresholds ──
    hammer_body_ratio: float = _ratio("hammer_body_ratio")
    hammer_wick_ratio: float = _ratio("hammer_wick_ratio")
    hammer_tail_ratio: float = _ratio("hammer_tail_ratio")
    spinning_top_body_ratio: float = _ratio("spinning_top_body_ratio")
    spinning_top_shadow_ratio: float = _ratio("spinning_top_shadow_ratio")
    doji_body_ratio: float = _ratio("doji_body_ratio")
    doji_long_leg_ratio: float = _ratio("doji_long_leg_ratio")
    doji_tail_ratio: float = _ratio("doji_tail_ratio")
    doji_wick_ratio: float = _ratio("doji_wick_ratio")
    doji_min_ratio: float = _ratio("doji_min_ratio")
    marubozu_ratio: float = _ratio("marubozu_ratio")

    def thresholds(self) -> CandleThresholds:
        """Threshold record built from the configured ratios."""
        return CandleThresholds(
            **{name: getattr(self, name) for name in CandleThresholds.model_fields}
        )


@lru_cache
def get_settings() -> Settings:
    """Cached singleton; call this instead of constructing Settings directly."""
    return Settings()


settings = get_settings()
