"""Simulator runtime: fixed-rate driver + ordered shutdown.

Everything runs on one asyncio loop: the driver task, one worker per live
sink, the retention sweeper and (when served) the HTTP/WebSocket app.
"""

from __future__ import annotations

import asyncio
import logging
import random as _random_mod
import time
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from logsim.contracts.events import EventPair
from logsim.contracts.timefmt import iso_ts, utc_now
from logsim.emulator.campaigns import CampaignStateMachine
from logsim.emulator.synthesizer import EventSynthesizer
from logsim.emulator.traffic import traffic_multiplier
from logsim.emulator.writers import LogFileWriter
from logsim.shared.errors import InvariantViolation
from logsim.shared.seed import init_rng
from logsim.shared.settings import Settings
from logsim.storage.history import HistoryStore
from logsim.storage.retention import RetentionSweeper
from logsim.streaming.base import BaseSink
from logsim.streaming.distributor import Distributor, PairWriter
from logsim.streaming.kafka import KafkaPublisher
from logsim.streaming.redis_stream import RedisStreamPublisher
from logsim.streaming.websocket import WebSocketBroadcaster

log = logging.getLogger(__name__)

_DEFAULT = object()


class Simulator:
    """Owns the synthesizer, the sinks and the driver task.

    Components are built from *settings*; tests pass ``store``, ``sinks``
    or ``writers`` explicitly to replace the configured ones.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        rng: _random_mod.Random | None = None,
        store: HistoryStore | None | Any = _DEFAULT,
        sinks: Sequence[BaseSink] | None = None,
        writers: Sequence[PairWriter] | None = None,
    ) -> None:
        self.settings = s = settings or Settings()
        self.rng = rng or init_rng(s.generator.seed)
        self.campaigns = CampaignStateMachine(self.rng)
        self.synthesizer = EventSynthesizer(
            self.rng,
            generator=s.generator,
            attacks=s.attacks,
            patterns=s.patterns,
            campaigns=self.campaigns,
        )

        if store is _DEFAULT:
            store = HistoryStore(s.storage.path) if s.storage.enabled else None
        self.store: HistoryStore | None = store

        self.broadcaster: WebSocketBroadcaster | None = None
        if sinks is None:
            sinks = self._configured_sinks()
        else:
            self.broadcaster = next(
                (x for x in sinks if isinstance(x, WebSocketBroadcaster)), None
            )
        self.sinks = list(sinks)

        if writers is None:
            writers = [LogFileWriter(s.files)] if s.files.enabled else []

        self.distributor = Distributor(
            store=self.store,
            sinks=self.sinks,
            writers=writers,
            queue_size=s.streaming.queue_size,
        )
        self.sweeper = (
            RetentionSweeper(self.store, s.storage.retention, s.storage.sweep_interval_sec)
            if self.store is not None
            else None
        )

        self.ticks = 0
        self.started_at: float | None = None
        self.fatal: BaseException | None = None
        self._task: asyncio.Task[None] | None = None

    def _configured_sinks(self) -> list[BaseSink]:
        st = self.settings.streaming
        sinks: list[BaseSink] = []
        if st.websocket.enabled:
            self.broadcaster = WebSocketBroadcaster(st.websocket.max_connections)
            sinks.append(self.broadcaster)
        if st.kafka.enabled:
            sinks.append(KafkaPublisher(st.kafka))
        if st.redis.enabled:
            sinks.append(RedisStreamPublisher(st.redis))
        return sinks

    # ── driving ─────────────────────────────────────────────────────────

    def step(self, now: datetime | None = None) -> EventPair:
        """One synthesize-and-distribute step."""
        pair = self.synthesizer.tick(now)
        self.distributor.distribute(pair)
        self.ticks += 1
        return pair

    def multiplier(self, now: datetime | None = None) -> float:
        return traffic_multiplier(now, self.settings.patterns.business_hours)

    def interval(self, now: datetime | None = None) -> float:
        """Seconds between ticks at the current effective rate."""
        return 1.0 / (self.settings.generator.log_rate * self.multiplier(now))

    async def _drive(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        try:
            while True:
                self.step()
                next_at += self.interval()
                delay = next_at - loop.time()
                if delay < 0:
                    # fell behind: resume the cadence from now instead of bursting
                    next_at = loop.time()
                    delay = 0.0
                await asyncio.sleep(delay)
        except InvariantViolation as exc:
            self.fatal = exc
            log.critical("Invariant violated after %d ticks: %s", self.ticks, exc, exc_info=True)
        except Exception as exc:
            self.fatal = exc
            log.critical("Driver crashed after %d ticks", self.ticks, exc_info=True)

    # ── lifecycle ───────────────────────────────────────────────────────

    async def start(self) -> None:
        for sink in self.sinks:
            await sink.start()
        self.distributor.start()
        if self.sweeper is not None:
            self.sweeper.start()
        self.started_at = time.monotonic()
        self._task = asyncio.create_task(self._drive(), name="driver")
        log.info(
            "Simulator started: %.1f events/s (x%.1f), attacks %s, campaigns %s",
            self.settings.generator.log_rate,
            self.multiplier(),
            "on" if self.settings.attacks.enabled else "off",
            "on" if self.settings.attacks.campaigns else "off",
        )

    @property
    def driver(self) -> asyncio.Task[None] | None:
        return self._task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def stop(self) -> None:
        """Stop ticking, drain live sinks within the grace period, release resources."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        if self.sweeper is not None:
            await self.sweeper.stop()
        await self.distributor.close(self.settings.streaming.shutdown_grace_sec)
        # publishers first, then the broadcaster's sockets
        for sink in sorted(self.sinks, key=lambda x: isinstance(x, WebSocketBroadcaster)):
            try:
                await sink.close()
            except Exception as exc:
                log.warning("Closing %s failed: %s", sink.name, exc)
        if self.store is not None:
            self.store.close()
        log.info("Simulator stopped after %d ticks", self.ticks)

    # ── inspection ──────────────────────────────────────────────────────

    def status(self) -> dict[str, Any]:
        s = self.settings
        uptime = time.monotonic() - self.started_at if self.started_at is not None else 0.0
        return {
            "timestamp": iso_ts(utc_now()),
            "simulator": {
                "running": self.running,
                "ticks": self.ticks,
                "uptime_sec": round(uptime, 1),
                "log_rate": s.generator.log_rate,
                "traffic_multiplier": self.multiplier(),
                "error_rate": s.generator.error_rate,
                "warning_rate": s.generator.warning_rate,
                "attack_simulation": s.attacks.enabled,
                "campaigns": self.campaigns.snapshot(),
                "generated": self.synthesizer.stats(),
            },
            "streaming": {
                "sinks": [sink.status() for sink in self.sinks],
                "delivery": self.distributor.stats(),
                "pending": self.distributor.pending(),
            },
            "storage": {
                "enabled": self.store is not None,
                "path": s.storage.path if self.store is not None else None,
                "retention_hours": s.storage.retention_hours,
            },
        }
