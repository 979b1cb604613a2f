"""Real-time fan-out over WebSocket connections."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket

from logsim.contracts.timefmt import iso_ts, utc_now
from logsim.streaming.base import BaseSink

log = logging.getLogger(__name__)

POLICY_VIOLATION = 1008


class WebSocketBroadcaster(BaseSink):
    """Manage WebSocket connections for real-time log streaming."""

    name = "websocket"

    def __init__(self, max_connections: int = 100) -> None:
        self.max_connections = max_connections
        self.active_connections: set[WebSocket] = set()
        self.dropped_clients = 0

    async def connect(self, websocket: WebSocket) -> bool:
        await websocket.accept()
        if len(self.active_connections) >= self.max_connections:
            log.warning("Rejecting WebSocket client: %d connections open", self.max_connections)
            await websocket.close(code=POLICY_VIOLATION, reason="Max connections reached")
            return False
        self.active_connections.add(websocket)
        log.info("WebSocket client connected (%d open)", len(self.active_connections))
        await websocket.send_json(
            {
                "type": "connected",
                "message": "Connected to log simulator WebSocket",
                "timestamp": iso_ts(utc_now()),
            }
        )
        return True

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.discard(websocket)
            log.info("WebSocket client disconnected (%d open)", len(self.active_connections))

    async def handle_message(self, websocket: WebSocket, raw: str) -> None:
        """Answer one client command; malformed input never closes the session."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            data = None
        if not isinstance(data, dict):
            await websocket.send_json({"type": "error", "message": "Invalid message format"})
            return

        action = data.get("action")
        if action == "ping":
            await websocket.send_json({"type": "pong", "timestamp": iso_ts(utc_now())})
        elif action == "subscribe":
            await websocket.send_json({"type": "subscribed", "filters": data.get("filters")})
        else:
            await websocket.send_json({"type": "error", "message": "Unknown action"})

    async def broadcast(self, kind: str, payload: dict[str, Any]) -> int:
        """Push *payload* to every client; return how many received it.

        A client whose send fails is dropped from the set and not retried.
        """
        if not self.active_connections:
            return 0
        message = json.dumps(payload, ensure_ascii=False)
        sent = 0
        for ws in list(self.active_connections):
            try:
                await ws.send_text(message)
                sent += 1
            except Exception as exc:
                log.debug("Dropping WebSocket client after failed %s send: %s", kind, exc)
                self.dropped_clients += 1
                self.disconnect(ws)
        return sent

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        await self.broadcast(kind, payload)
        return True

    async def close(self) -> None:
        for ws in list(self.active_connections):
            try:
                await ws.close(code=1001, reason="Server shutting down")
            except Exception as exc:
                log.debug("Close of WebSocket client failed: %s", exc)
        self.active_connections.clear()
        log.info("WebSocket broadcaster closed")

    def status(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "connections": len(self.active_connections),
            "max_connections": self.max_connections,
        }
