"""Redis Streams publisher (redis-py asyncio client)."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from logsim.shared.errors import SinkError
from logsim.shared.settings import RedisSettings
from logsim.streaming.base import BaseSink

log = logging.getLogger(__name__)


class RedisStreamPublisher(BaseSink):
    """``XADD`` of every wire payload with approximate ``MAXLEN`` trimming."""

    name = "redis"

    def __init__(
        self,
        settings: RedisSettings,
        client_factory: Callable[..., Any] = Redis,
    ) -> None:
        self.settings = settings
        self._factory = client_factory
        self._client: Any = None
        self.connected = False

    async def start(self) -> None:
        s = self.settings
        self._client = self._factory(host=s.host, port=s.port, decode_responses=True)
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            log.error("Redis at %s:%d unreachable, publisher disabled: %s", s.host, s.port, exc)
            self.connected = False
            return
        self.connected = True
        log.info("Redis connected to %s:%d (stream %s)", s.host, s.port, s.stream)

    async def publish(self, kind: str, payload: dict[str, Any]) -> bool:
        if not self.connected:
            return False
        try:
            await self._client.xadd(
                self.settings.stream,
                {"message": json.dumps(payload, ensure_ascii=False)},
                maxlen=self.settings.max_len,
                approximate=True,
            )
        except (RedisError, OSError) as exc:
            log.warning("Redis XADD of %s record failed: %s", kind, exc)
            return False
        return True

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        if not self.connected:
            raise SinkError(self.name, "publisher disabled")
        return await self.publish(kind, payload)

    async def close(self) -> None:
        if self._client is None:
            return
        try:
            await self._client.aclose()
        except (RedisError, OSError) as exc:
            log.warning("Redis close failed: %s", exc)
        finally:
            self._client = None
            self.connected = False
        log.info("Redis disconnected")

    def status(self) -> dict[str, Any]:
        return {"name": self.name, "connected": self.connected, "stream": self.settings.stream}
