"""Periodic retention sweep for the history store."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from logsim.storage.history import HistoryStore

log = logging.getLogger(__name__)


class RetentionSweeper:
    """Runs ``HistoryStore.sweep`` every *interval_sec* on its own task.

    The SQLite work happens in a worker thread, so the event loop (and the
    generation driver on it) keeps ticking while a sweep runs.  The first
    sweep happens one interval after ``start()``.
    """

    def __init__(
        self,
        store: HistoryStore,
        retention: timedelta,
        interval_sec: float = 3600.0,
    ) -> None:
        self.store = store
        self.retention = retention
        self.interval_sec = interval_sec
        self.runs = 0
        self.removed = 0
        self._task: asyncio.Task[None] | None = None

    async def run_once(self) -> int:
        deleted = await asyncio.to_thread(self.store.sweep, self.retention)
        self.runs += 1
        self.removed += deleted
        return deleted

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_sec)
            await self.run_once()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop(), name="retention-sweeper")
            log.info(
                "Retention sweeper started: keep %.1fh, every %.0fs",
                self.retention.total_seconds() / 3600,
                self.interval_sec,
            )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("Retention sweeper stopped after %d runs (%d removed)", self.runs, self.removed)
