"""FastAPI application: REST query façade + WebSocket live stream."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logsim import __version__
from logsim.api.routes import router
from logsim.runtime import Simulator
from logsim.shared.errors import StorageError
from logsim.streaming.websocket import POLICY_VIOLATION

log = logging.getLogger(__name__)


def create_app(simulator: Simulator) -> FastAPI:
    app = FastAPI(
        title="logsim",
        version=__version__,
        description="Synthetic application/access log simulator",
    )
    app.state.simulator = simulator
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "internal error"})

    @app.exception_handler(HTTPException)
    async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "internal error"})

    @app.websocket("/ws")
    async def live_stream(websocket: WebSocket) -> None:
        broadcaster = simulator.broadcaster
        if broadcaster is None:
            await websocket.accept()
            await websocket.close(code=POLICY_VIOLATION, reason="WebSocket streaming disabled")
            return
        if not await broadcaster.connect(websocket):
            return
        try:
            while True:
                raw = await websocket.receive_text()
                await broadcaster.handle_message(websocket, raw)
        except WebSocketDisconnect:
            pass
        finally:
            broadcaster.disconnect(websocket)

    return app
