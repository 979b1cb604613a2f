"""Kafka publisher (kafka-python)."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from kafka import KafkaProducer
from kafka.errors import KafkaError

from logsim.shared.errors import SinkError
from logsim.shared.settings import KafkaSettings
from logsim.streaming.base import BaseSink

log = logging.getLogger(__name__)

SEND_TIMEOUT_SEC = 10.0


class KafkaPublisher(BaseSink):
    """Publishes wire payloads to one topic, keyed by record kind.

    kafka-python is blocking, so connecting, acknowledging and closing all
    run in worker threads.  A broker that cannot be reached at startup
    disables the publisher for the rest of the run.
    """

    name = "kafka"

    def __init__(
        self,
        settings: KafkaSettings,
        producer_factory: Callable[..., Any] = KafkaProducer,
    ) -> None:
        self.settings = settings
        self._factory = producer_factory
        self._producer: Any = None
        self.connected = False

    async def start(self) -> None:
        try:
            self._producer = await asyncio.to_thread(
                self._factory,
                bootstrap_servers=list(self.settings.brokers),
                client_id=self.settings.client_id,
                compression_type="gzip",
                retries=8,
                key_serializer=lambda k: k.encode("utf-8"),
                value_serializer=lambda v: json.dumps(v, ensure_ascii=False).encode("utf-8"),
            )
        except (KafkaError, OSError) as exc:
            log.error(
                "Failed to connect to Kafka at %s, publisher disabled: %s",
                ",".join(self.settings.brokers),
                exc,
            )
            self.connected = False
            return
        self.connected = True
        log.info("Kafka producer connected to %s", ",".join(self.settings.brokers))

    async def publish(self, kind: str, payload: dict[str, Any]) -> bool:
        if not self.connected:
            return False
        try:
            future = self._producer.send(self.settings.topic, key=kind, value=payload)
            await asyncio.to_thread(future.get, timeout=SEND_TIMEOUT_SEC)
        except KafkaError as exc:
            log.warning("Kafka send to %s failed: %s", self.settings.topic, exc)
            return False
        return True

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        if not self.connected:
            raise SinkError(self.name, "publisher disabled")
        return await self.publish(kind, payload)

    async def close(self) -> None:
        if self._producer is None:
            return
        try:
            await asyncio.to_thread(self._producer.close, 5)
        except KafkaError as exc:
            log.warning("Kafka producer close failed: %s", exc)
        finally:
            self._producer = None
            self.connected = False
        log.info("Kafka producer disconnected")

    def status(self) -> dict[str, Any]:
        return {"name": self.name, "connected": self.connected, "topic": self.settings.topic}
