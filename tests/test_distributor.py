"""Tests for logsim.streaming.distributor — fan-out and sink isolation."""

from __future__ import annotations

import asyncio
from typing import Any

from logsim.streaming.base import BaseSink
from logsim.streaming.distributor import HISTORY, Distributor
from tests.conftest import make_pair, ts_offset


class RecordingSink(BaseSink):
    def __init__(self, name: str = "recording", delay: float = 0.0) -> None:
        self.name = name
        self.delay = delay
        self.received: list[tuple[str, dict[str, Any]]] = []

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.received.append((kind, payload))
        return True


class FailingSink(BaseSink):
    name = "failing"

    def __init__(self) -> None:
        self.calls = 0

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        self.calls += 1
        raise ConnectionError("peer went away")


class RefusingSink(BaseSink):
    name = "refusing"

    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        return False


class RecordingWriter:
    name = "files"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.pairs = []

    def write(self, pair) -> None:
        if self.fail:
            raise OSError("disk full")
        self.pairs.append(pair)


class BrokenStore:
    def append(self, record):
        raise RuntimeError("boom")


async def _run(dist: Distributor, pairs, grace: float = 1.0) -> None:
    dist.start()
    for pair in pairs:
        dist.distribute(pair)
    await dist.close(grace)


# ═══════════════════════════════════════════════════════════════════════════
#  Delivery
# ═══════════════════════════════════════════════════════════════════════════


class TestDelivery:
    def test_every_sink_gets_both_records_in_order(self, memory_store):
        sink = RecordingSink()
        writer = RecordingWriter()
        dist = Distributor(store=memory_store, sinks=[sink], writers=[writer])
        pairs = [make_pair(ts_offset(seconds=i)) for i in range(3)]
        asyncio.run(_run(dist, pairs))

        kinds = [k for k, _ in sink.received]
        assert kinds == ["application", "access"] * 3
        assert [p["timestamp"] for _, p in sink.received][::2] == [
            ts_offset(seconds=i) for i in range(3)
        ]
        assert set(sink.received[0][1]) == {"kind", "timestamp", "data"}
        assert memory_store.count() == 6
        assert len(writer.pairs) == 3

        stats = dist.stats()
        assert stats["recording"] == {"delivered": 6, "failed": 0, "dropped": 0}
        assert stats[HISTORY]["delivered"] == 6
        assert stats["files"]["delivered"] == 6

    def test_failing_sink_does_not_block_others(self, memory_store):
        good = RecordingSink("good")
        bad = FailingSink()
        dist = Distributor(store=memory_store, sinks=[bad, good])
        asyncio.run(_run(dist, [make_pair(ts_offset(seconds=i)) for i in range(5)]))

        assert len(good.received) == 10
        assert bad.calls == 10
        stats = dist.stats()
        assert stats["failing"]["failed"] == 10
        assert stats["good"]["delivered"] == 10
        assert memory_store.count() == 10

    def test_false_result_counts_as_failure(self):
        dist = Distributor(sinks=[RefusingSink()])
        asyncio.run(_run(dist, [make_pair()]))
        assert dist.stats()["refusing"] == {"delivered": 0, "failed": 2, "dropped": 0}

    def test_writer_failure_is_isolated(self, memory_store):
        sink = RecordingSink()
        dist = Distributor(store=memory_store, sinks=[sink], writers=[RecordingWriter(fail=True)])
        asyncio.run(_run(dist, [make_pair()]))
        assert dist.stats()["files"]["failed"] == 2
        assert len(sink.received) == 2
        assert memory_store.count() == 2

    def test_store_failure_is_isolated(self):
        sink = RecordingSink()
        dist = Distributor(store=BrokenStore(), sinks=[sink])
        asyncio.run(_run(dist, [make_pair()]))
        assert dist.stats()[HISTORY]["failed"] == 2
        assert len(sink.received) == 2

    def test_no_sinks(self):
        dist = Distributor()
        asyncio.run(_run(dist, [make_pair()]))
        assert dist.stats() == {}


# ═══════════════════════════════════════════════════════════════════════════
#  Back-pressure and shutdown
# ═══════════════════════════════════════════════════════════════════════════


class TestQueueing:
    def test_full_queue_drops(self):
        sink = RecordingSink()
        dist = Distributor(sinks=[sink], queue_size=4)

        async def scenario() -> None:
            dist.start()
            # no await between distribute calls, so the worker cannot drain
            for i in range(5):
                dist.distribute(make_pair(ts_offset(seconds=i)))
            await dist.close(1.0)

        asyncio.run(scenario())
        stats = dist.stats()["recording"]
        assert stats["delivered"] == 4
        assert stats["dropped"] == 6

    def test_close_abandons_after_grace(self):
        slow = RecordingSink("slow", delay=0.5)
        dist = Distributor(sinks=[slow])

        async def scenario() -> None:
            dist.start()
            for i in range(10):
                dist.distribute(make_pair(ts_offset(seconds=i)))
            await dist.close(grace=0.1)

        asyncio.run(scenario())
        assert len(slow.received) < 20
        assert dist.pending()["slow"] > 0

    def test_distribute_after_close_is_ignored(self):
        sink = RecordingSink()
        dist = Distributor(sinks=[sink])

        async def scenario() -> None:
            await _run(dist, [make_pair()])
            dist.distribute(make_pair())

        asyncio.run(scenario())
        assert dist.pending()["recording"] == 0
        assert len(sink.received) == 2
