"""HTTP/WebSocket surface of the simulator."""

from logsim.api.app import create_app

__all__ = ["create_app"]
