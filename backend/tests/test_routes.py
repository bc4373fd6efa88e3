"""
API tests: health, classify/scan endpoints and the patterns websocket.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from candlemind.main import app
from candlemind.services.pattern_detector import PATTERN_NAMES

client = TestClient(app)

PREV = {"t": 1_700_000_000, "o": 101.0, "h": 102.0, "l": 99.5, "c": 100.5, "v": 0.0}
CURR = {"t": 1_700_000_060, "o": 99.0, "h": 103.0, "l": 98.5, "c": 102.5, "v": 0.0}


# ──────────────────────────────────────────────
# Health
# ──────────────────────────────────────────────

class TestHealthEndpoint:
    def test_health_returns_200(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


# ──────────────────────────────────────────────
# Classify
# ──────────────────────────────────────────────

class TestClassifyEndpoint:
    def test_list_patterns(self):
        resp = client.get("/patterns")
        assert resp.status_code == 200
        assert resp.json() == list(PATTERN_NAMES)

    def test_single_candle(self):
        resp = client.post("/patterns/classify", json={"candle": {"o": 100.0, "h": 105.0, "l": 95.0, "c": 100.0}})
        assert resp.status_code == 200
        patterns = resp.json()["patterns"]
        assert patterns[0] == "neutral"
        assert "doji" in patterns

    def test_with_previous(self):
        resp = client.post("/patterns/classify", json={"candle": CURR, "previous": PREV})
        assert resp.status_code == 200
        assert "bullish_engulfing" in resp.json()["patterns"]

    def test_threshold_override(self):
        body = {"candle": CURR, "thresholds": {"doji_body_ratio": 0.8}}
        resp = client.post("/patterns/classify", json=body)
        assert resp.status_code == 200
        assert "doji" in resp.json()["patterns"]

    def test_missing_field_is_422(self):
        resp = client.post("/patterns/classify", json={"candle": {"o": 1.0, "h": 2.0, "l": 0.5}})
        assert resp.status_code == 422


# ──────────────────────────────────────────────
# Scan
# ──────────────────────────────────────────────

class TestScanEndpoint:
    def test_scan_series(self):
        resp = client.post("/patterns/scan", json={"symbol": "aapl", "resolution": "5", "candles": [PREV, CURR]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["symbol"] == "AAPL"
        assert data["count"] == 2
        assert "bullish_engulfing" not in data["results"][0]["patterns"]
        assert "bullish_engulfing" in data["results"][1]["patterns"]
        assert data["results"][1]["candle"] == CURR

    def test_unordered_series_is_400(self):
        resp = client.post("/patterns/scan", json={"symbol": "AAPL", "candles": [CURR, PREV]})
        assert resp.status_code == 400

    def test_empty_symbol_is_422(self):
        resp = client.post("/patterns/scan", json={"symbol": "", "candles": [PREV]})
        assert resp.status_code == 422

    def test_scan_thresholds(self):
        body = {"symbol": "AAPL", "candles": [CURR], "thresholds": {"doji_body_ratio": 0.8}}
        resp = client.post("/patterns/scan", json=body)
        assert resp.status_code == 200
        assert "doji" in resp.json()["results"][0]["patterns"]


# ──────────────────────────────────────────────
# Websocket
# ──────────────────────────────────────────────

class TestPatternsWebsocket:
    def test_patterns_after_each_push(self):
        with client.websocket_connect("/ws/patterns/aapl?resolution=5") as ws:
            ws.send_json(PREV)
            first = ws.receive_json()
            assert first["type"] == "patterns"
            assert first["symbol"] == "AAPL"
            assert first["resolution"] == "5"

            ws.send_json(CURR)
            second = ws.receive_json()
            assert "bullish_engulfing" in second["patterns"]

    def test_stale_candle_ignored(self):
        with client.websocket_connect("/ws/patterns/AAPL") as ws:
            ws.send_json(CURR)
            ws.receive_json()
            ws.send_json(PREV)
            assert ws.receive_json() == {"type": "ignored", "symbol": "AAPL", "t": PREV["t"]}

    def test_invalid_message_keeps_stream_open(self):
        with client.websocket_connect("/ws/patterns/AAPL") as ws:
            ws.send_text("not json")
            error = ws.receive_json()
            assert error["error"] == "Invalid candle"

            ws.send_json(PREV)
            assert ws.receive_json()["type"] == "patterns"

    def test_binary_frame_keeps_stream_open(self):
        with client.websocket_connect("/ws/patterns/AAPL") as ws:
            ws.send_bytes(b'{"o": 1.0, "h": 2.0, "l": 0.5, "c": 1.5}')
            error = ws.receive_json()
            assert error["error"] == "Invalid candle"

            ws.send_json(PREV)
            assert ws.receive_json()["type"] == "patterns"
