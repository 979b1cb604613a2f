"""Fan-out of every synthesized pair to all configured sinks.

Local sinks (history store, on-disk writers) are called synchronously, so
their outcome is known before ``distribute`` returns.  Every live sink gets
its own bounded ``asyncio.Queue`` and worker task: per-sink FIFO, no
ordering across sinks.  A full queue drops the message; the driver is
never slowed down by a lagging sink.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from logsim.contracts.events import EventPair
from logsim.contracts.record import StoredRecord
from logsim.shared.errors import SinkError
from logsim.storage.history import HistoryStore
from logsim.streaming.base import BaseSink

log = logging.getLogger(__name__)

HISTORY = "history"


class PairWriter(Protocol):
    name: str

    def write(self, pair: EventPair) -> None: ...


@dataclass(slots=True)
class SinkStats:
    delivered: int = 0
    failed: int = 0
    dropped: int = 0


class Distributor:
    def __init__(
        self,
        store: HistoryStore | None = None,
        sinks: Sequence[BaseSink] = (),
        writers: Sequence[PairWriter] = (),
        queue_size: int = 1000,
    ) -> None:
        self.store = store
        self.sinks = list(sinks)
        self.writers = list(writers)
        self._queues: dict[str, asyncio.Queue[tuple[str, dict[str, Any]]]] = {
            s.name: asyncio.Queue(maxsize=queue_size) for s in self.sinks
        }
        self._workers: list[asyncio.Task[None]] = []
        self._stats: dict[str, SinkStats] = {s.name: SinkStats() for s in self.sinks}
        for w in self.writers:
            self._stats[w.name] = SinkStats()
        if store is not None:
            self._stats[HISTORY] = SinkStats()
        self._closed = False

    # ── lifecycle ───────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn one worker per live sink (needs a running event loop)."""
        if self._workers:
            return
        for sink in self.sinks:
            task = asyncio.create_task(self._worker(sink), name=f"sink-{sink.name}")
            self._workers.append(task)
        log.info(
            "Distributor started: history=%s, writers=%s, live sinks=%s",
            "on" if self.store is not None else "off",
            [w.name for w in self.writers] or "-",
            [s.name for s in self.sinks] or "-",
        )

    async def close(self, grace: float = 5.0) -> None:
        """Drain live queues for at most *grace* seconds, then stop workers."""
        self._closed = True
        if self._workers:
            joins = [q.join() for q in self._queues.values()]
            try:
                await asyncio.wait_for(asyncio.gather(*joins), timeout=grace)
            except TimeoutError:
                left = sum(q.qsize() for q in self._queues.values())
                log.warning("Shutdown grace of %.1fs elapsed, %d messages abandoned", grace, left)
            for task in self._workers:
                task.cancel()
            await asyncio.gather(*self._workers, return_exceptions=True)
            self._workers.clear()
        log.info("Distributor closed: %s", self.stats())

    # ── delivery ────────────────────────────────────────────────────────

    def distribute(self, pair: EventPair) -> None:
        if self._closed:
            return
        records = (
            StoredRecord.from_event(pair.application),
            StoredRecord.from_event(pair.access),
        )

        for writer in self.writers:
            stats = self._stats[writer.name]
            try:
                writer.write(pair)
            except Exception as exc:
                stats.failed += 2
                log.warning("Writer %s failed: %s", writer.name, exc)
            else:
                stats.delivered += 2

        if self.store is not None:
            stats = self._stats[HISTORY]
            for rec in records:
                try:
                    rid = self.store.append(rec)
                except Exception as exc:
                    rid = None
                    log.warning("History append raised: %s", exc)
                if rid is None:
                    stats.failed += 1
                else:
                    stats.delivered += 1

        for sink in self.sinks:
            queue = self._queues[sink.name]
            for rec in records:
                try:
                    queue.put_nowait((rec.kind.value, rec.wire_payload()))
                except asyncio.QueueFull:
                    self._stats[sink.name].dropped += 1
                    log.debug("Queue for %s full, message dropped", sink.name)

    async def _worker(self, sink: BaseSink) -> None:
        queue = self._queues[sink.name]
        stats = self._stats[sink.name]
        while True:
            kind, payload = await queue.get()
            try:
                ok = await sink.send(kind, payload)
            except SinkError as exc:
                stats.failed += 1
                log.debug("Sink %s refused message: %s", sink.name, exc)
            except Exception as exc:
                stats.failed += 1
                log.warning("Sink %s failed: %s", sink.name, exc)
            else:
                if ok:
                    stats.delivered += 1
                else:
                    stats.failed += 1
            finally:
                queue.task_done()

    # ── inspection ──────────────────────────────────────────────────────

    def stats(self) -> dict[str, dict[str, int]]:
        return {name: asdict(s) for name, s in self._stats.items()}

    def pending(self) -> dict[str, int]:
        return {name: q.qsize() for name, q in self._queues.items()}
