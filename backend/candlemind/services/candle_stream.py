from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from candlemind.models.candles import Candle
from candlemind.services.pattern_scanner import PatternScanner

logger = logging.getLogger(__name__)


async def stream_patterns_to_websocket(
        websocket: WebSocket,
        symbol: str,
        resolution: str = "1",
    ) -> None:
    """
    Reads closed candles ({t, o, h, l, c, v}) from the client WebSocket, pushes
    each into the symbol's lookback window and answers with the patterns that
    hold after the push.

    Stale candles (not newer than the last one) are answered with
    {"type": "ignored"}; malformed messages with {"error": ...}. Both keep the
    stream open. WebSocketDisconnect propagates to the caller.
    """
    symbol = symbol.upper()

    # One window per connection
    scanner = PatternScanner(resolution=resolution)
    logger.info(f"[STREAM] Client connected for {symbol}, res={resolution}")

    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))

        text = message.get("text")
        if text is None:
            logger.warning(f"[STREAM] Non-text frame for {symbol}")
            await websocket.send_json({"error": "Invalid candle", "details": ["Expected a JSON text frame"]})
            continue

        try:
            candle = Candle.model_validate_json(text)
        except ValidationError as e:
            logger.warning(f"[STREAM] Invalid candle for {symbol}: {e.error_count()} errors")
            await websocket.send_json({"error": "Invalid candle", "details": [err["msg"] for err in e.errors()]})
            continue

        report = scanner.feed(symbol, candle)
        if report is None:
            await websocket.send_json({"type": "ignored", "symbol": symbol, "t": candle.t})
            continue

        await websocket.send_json({"type": "patterns", **report.model_dump()})
