# candlemind/routers/patternRoute.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from candlemind.models.candles import (
    ClassifyRequest,
    ClassifyResponse,
    PatternScanRequest,
    PatternScanResponse,
)
from candlemind.services.pattern_detector import PATTERN_NAMES, classify_candle
from candlemind.services.pattern_scanner import PatternScanner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patterns", tags=["patterns"])


@router.get("", response_model=List[str])
async def list_patterns():
    """Every pattern name the classifier and the lookback window can report."""
    return list(PATTERN_NAMES)


@router.post("/classify", response_model=ClassifyResponse)
async def classify(request: ClassifyRequest):
    """
    Classify one candle, optionally against the candle before it.

    Thresholds in the request apply to both candles.
    """
    latest = request.candle
    previous = request.previous
    if request.thresholds is not None:
        latest = latest.model_copy(update={"thresholds": request.thresholds})
        if previous is not None:
            previous = previous.model_copy(update={"thresholds": request.thresholds})

    return ClassifyResponse(patterns=classify_candle(latest, previous))


@router.post("/scan", response_model=PatternScanResponse)
async def scan(request: PatternScanRequest):
    """
    Run an ordered candle series (oldest first) through a lookback window and
    return the patterns holding after each candle.
    """
    timestamps = [c.t for c in request.candles if c.t is not None]
    if any(later <= earlier for earlier, later in zip(timestamps, timestamps[1:])):
        logger.warning(f"[SCAN] Rejected unordered series for {request.symbol}")
        raise HTTPException(status_code=400, detail="candles must be ordered by strictly increasing t")

    scanner = PatternScanner(resolution=request.resolution, thresholds=request.thresholds)
    results = scanner.scan(request.candles, request.symbol)

    return PatternScanResponse(
        symbol=request.symbol.upper(),
        resolution=request.resolution,
        count=len(results),
        results=results,
    )
