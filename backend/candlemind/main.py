from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Query
from fastapi.middleware.cors import CORSMiddleware

from candlemind.config import settings
from candlemind.routers.patternRoute import router as patternsRoute
from candlemind.services.candle_stream import stream_patterns_to_websocket

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)
app.include_router(patternsRoute)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": settings.app_version}


@app.websocket("/ws/patterns/{symbol}")
async def patterns_ws(
    websocket: WebSocket,
    symbol: str,
    resolution: str = Query("1"),
) -> None:

    await websocket.accept()
    try:
        await stream_patterns_to_websocket(
            websocket=websocket,
            symbol=symbol,
            resolution=resolution,
        )
    except WebSocketDisconnect:
        logger.info(f"Websocket disconnected for {symbol}")
    except Exception as e:
        logger.exception(f"Websocket error for {symbol}: {e}")
        await websocket.close(code=1011)  # 1011: Internal Error
