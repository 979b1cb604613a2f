"""Tests for logsim.storage — HistoryStore and RetentionSweeper."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
import time
from datetime import timedelta

import pytest

from logsim.contracts.enums import RecordKind
from logsim.shared.errors import StorageError
from logsim.storage.history import HistoryStore
from logsim.storage.retention import RetentionSweeper
from tests.conftest import at, make_record, ts_offset

BASE = "2026-02-26T10:00:00.000Z"


def _fill(store: HistoryStore, n: int = 10) -> None:
    """One application + one access record per second, starting at BASE."""
    for i in range(n):
        store.append(make_record(ts_offset(BASE, i), RecordKind.APPLICATION))
        store.append(make_record(ts_offset(BASE, i), RecordKind.ACCESS))


# ═══════════════════════════════════════════════════════════════════════════
#  append / query
# ═══════════════════════════════════════════════════════════════════════════


class TestAppendQuery:
    def test_append_returns_increasing_ids(self, memory_store):
        a = memory_store.append(make_record())
        b = memory_store.append(make_record())
        assert a is not None and b is not None
        assert b > a

    def test_query_newest_first(self, memory_store):
        _fill(memory_store, 5)
        records = memory_store.query()
        assert len(records) == 10
        stamps = [r.timestamp for r in records]
        assert stamps == sorted(stamps, reverse=True)
        # equal timestamps: higher id first
        assert records[0].id > records[1].id
        assert records[0].timestamp == records[1].timestamp

    def test_inclusive_bounds(self, memory_store):
        _fill(memory_store, 10)
        records = memory_store.query(start=ts_offset(BASE, 2), end=ts_offset(BASE, 4))
        assert {r.timestamp for r in records} == {ts_offset(BASE, s) for s in (2, 3, 4)}
        assert len(records) == 6

    def test_bounds_are_normalized(self, memory_store):
        _fill(memory_store, 10)
        # 12:00:03+02:00 == 10:00:03Z
        records = memory_store.query(start="2026-02-26T12:00:03+02:00", kind="access")
        assert len(records) == 7

    def test_kind_filter(self, memory_store):
        _fill(memory_store, 3)
        assert {r.kind for r in memory_store.query(kind="application")} == {RecordKind.APPLICATION}
        assert len(memory_store.query(kind=RecordKind.ACCESS)) == 3
        assert len(memory_store.query(kind="all")) == 6

    def test_unknown_kind_rejected(self, memory_store):
        with pytest.raises(ValueError):
            memory_store.query(kind="metrics")

    def test_invalid_bound_rejected(self, memory_store):
        with pytest.raises(ValueError):
            memory_store.query(start="not-a-date")

    def test_pagination_after_ordering(self, memory_store):
        _fill(memory_store, 10)
        everything = memory_store.query(kind="application")
        page = memory_store.query(kind="application", limit=3, offset=2)
        assert [r.id for r in page] == [r.id for r in everything[2:5]]
        tail = memory_store.query(kind="application", offset=8)
        assert [r.id for r in tail] == [r.id for r in everything[8:]]

    def test_payload_roundtrip(self, memory_store):
        rec = make_record(BASE, RecordKind.ACCESS)
        memory_store.append(rec)
        (got,) = memory_store.query()
        assert got.payload == rec.payload
        assert got.data["ip"] == "203.0.113.10"


class TestCountAggregate:
    def test_count(self, memory_store):
        _fill(memory_store, 4)
        assert memory_store.count() == 8
        assert memory_store.count(kind="access") == 4
        assert memory_store.count(start=ts_offset(BASE, 3)) == 2

    def test_aggregate_zero_fills(self, memory_store):
        memory_store.append(make_record(BASE, RecordKind.ACCESS))
        agg = memory_store.aggregate()
        assert agg.total == 1
        assert agg.by_kind == {"application": 0, "access": 1}
        assert agg.to_dict() == {"total": 1, "by_kind": {"application": 0, "access": 1}}

    def test_aggregate_window(self, memory_store):
        _fill(memory_store, 10)
        agg = memory_store.aggregate(start=ts_offset(BASE, 5), end=ts_offset(BASE, 5))
        assert agg.total == 2


# ═══════════════════════════════════════════════════════════════════════════
#  sweep
# ═══════════════════════════════════════════════════════════════════════════


class TestSweep:
    def test_removes_exactly_expired(self, memory_store):
        _fill(memory_store, 10)
        # cutoff = BASE + 5s; strictly older rows go
        deleted = memory_store.sweep(timedelta(hours=1), now=at(BASE, 3600 + 5))
        assert deleted == 10
        remaining = memory_store.query()
        assert min(r.timestamp for r in remaining) == ts_offset(BASE, 5)

    def test_idempotent(self, memory_store):
        _fill(memory_store, 10)
        now = at(BASE, 3600 + 5)
        memory_store.sweep(timedelta(hours=1), now=now)
        assert memory_store.sweep(timedelta(hours=1), now=now) == 0
        assert memory_store.count() == 10

    def test_nothing_expired(self, memory_store):
        _fill(memory_store, 3)
        assert memory_store.sweep(timedelta(hours=48), now=at(BASE, 60)) == 0

    def test_deletes_in_batches(self):
        store = HistoryStore(":memory:", sweep_batch=3)
        try:
            _fill(store, 10)
            assert store.sweep(timedelta(hours=1), now=at(BASE, 3600 + 5)) == 10
            assert store.count() == 10
        finally:
            store.close()


# ═══════════════════════════════════════════════════════════════════════════
#  lifecycle / files / threads
# ═══════════════════════════════════════════════════════════════════════════


class TestLifecycle:
    def test_file_store_persists(self, tmp_path):
        path = tmp_path / "nested" / "logs.db"
        store = HistoryStore(path)
        _fill(store, 2)
        store.close()
        reopened = HistoryStore(path)
        try:
            assert reopened.count() == 4
        finally:
            reopened.close()

    def test_wal_mode(self, file_store):
        with sqlite3.connect(file_store.path) as conn:
            mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode.lower() == "wal"

    def test_memory_stores_are_isolated(self):
        a, b = HistoryStore(":memory:"), HistoryStore(":memory:")
        try:
            a.append(make_record())
            assert b.count() == 0
        finally:
            a.close()
            b.close()

    def test_read_after_close_raises_storage_error(self):
        store = HistoryStore(":memory:")
        store.close()
        with pytest.raises(StorageError):
            store.query()

    def test_append_after_close_is_dropped(self):
        store = HistoryStore(":memory:")
        store.close()
        assert store.append(make_record()) is None
        assert store.sweep(timedelta(hours=1)) == 0

    def test_concurrent_appends(self, file_store):
        def worker(offset: int) -> None:
            for i in range(25):
                file_store.append(make_record(ts_offset(BASE, offset * 100 + i)))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert file_store.count() == 100


class TestRetentionSweeper:
    def test_run_once(self, memory_store):
        memory_store.append(make_record("2000-01-01T00:00:00.000Z"))
        memory_store.append(make_record(ts_offset(BASE, 0)))
        sweeper = RetentionSweeper(memory_store, timedelta(days=365 * 100))
        assert asyncio.run(sweeper.run_once()) == 0
        sweeper.retention = timedelta(days=1)
        assert asyncio.run(sweeper.run_once()) == 2
        assert sweeper.runs == 2
        assert sweeper.removed == 2

    def test_loop_sweeps_periodically(self, memory_store):
        memory_store.append(make_record("2000-01-01T00:00:00.000Z"))

        async def scenario() -> int:
            sweeper = RetentionSweeper(memory_store, timedelta(hours=1), interval_sec=0.01)
            sweeper.start()
            await asyncio.sleep(0.1)
            await sweeper.stop()
            return sweeper.runs

        assert asyncio.run(scenario()) >= 1
        assert memory_store.count() == 0

    def test_start_logs_retention_in_hours(self, memory_store, caplog):
        async def scenario() -> None:
            sweeper = RetentionSweeper(memory_store, timedelta(hours=48), interval_sec=60)
            sweeper.start()
            await sweeper.stop()

        with caplog.at_level(logging.INFO, logger="logsim.storage.retention"):
            asyncio.run(scenario())
        assert "keep 48.0h, every 60s" in caplog.text


# ═══════════════════════════════════════════════════════════════════════════
#  concurrency: sweeps and queries next to appends
# ═══════════════════════════════════════════════════════════════════════════

EXPIRED = "2000-01-01T00:00:00.000Z"


def _bulk_expired(store: HistoryStore, n: int) -> None:
    """Insert *n* expired rows in one transaction, bypassing ``append``."""
    rec = make_record(EXPIRED)
    conn = sqlite3.connect(store.path)
    try:
        with conn:
            conn.executemany(
                "INSERT INTO logs (timestamp, kind, payload) VALUES (?, ?, ?)",
                [(rec.timestamp, rec.kind.value, rec.payload)] * n,
            )
    finally:
        conn.close()


def _worst_append_while(store: HistoryStore, thread: threading.Thread) -> tuple[float, int]:
    """Append on this thread while *thread* runs; return (worst latency, appends)."""
    worst, n = 0.0, 0
    thread.start()
    while thread.is_alive():
        t0 = time.perf_counter()
        assert store.append(make_record(ts_offset(BASE, n))) is not None
        worst = max(worst, time.perf_counter() - t0)
        n += 1
    thread.join()
    return worst, n


class TestConcurrency:
    def test_append_not_stalled_by_sweep(self, tmp_path):
        store = HistoryStore(tmp_path / "big.db", sweep_batch=500)
        try:
            _bulk_expired(store, 100_000)
            removed: list[int] = []
            sweeper = threading.Thread(
                target=lambda: removed.append(store.sweep(timedelta(hours=1), now=at(BASE)))
            )
            worst, appended = _worst_append_while(store, sweeper)
            assert removed == [100_000]
            assert worst < 0.25
            assert store.count() == appended
        finally:
            store.close()

    def test_append_not_stalled_by_query(self, tmp_path):
        store = HistoryStore(tmp_path / "big.db")
        try:
            _bulk_expired(store, 100_000)
            reader = threading.Thread(target=store.query)
            worst, appended = _worst_append_while(store, reader)
            assert worst < 0.25
            assert store.count() == 100_000 + appended
        finally:
            store.close()

    def test_readers_see_all_or_none_of_a_sweep(self, tmp_path):
        store = HistoryStore(tmp_path / "logs.db", sweep_batch=100)
        try:
            _bulk_expired(store, 5000)
            _fill(store, 10)
            sweeper = threading.Thread(target=store.sweep, args=(timedelta(hours=1), at(BASE)))
            seen: set[int] = set()
            sweeper.start()
            while sweeper.is_alive():
                seen.add(store.count())
            sweeper.join()
            seen.add(store.count())
            assert seen <= {5020, 20}
            assert store.count() == 20
            assert store.aggregate().total == 20
        finally:
            store.close()
