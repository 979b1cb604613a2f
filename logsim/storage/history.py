"""SQLite-backed history of distributed events.

One append-only table, ``logs``, keyed by an auto-increment id.  Timestamps
are stored as canonical ISO strings (see ``logsim.contracts.timefmt``), so
range filters and ordering are plain string comparisons on an indexed
column.

Every operation opens its own short-lived connection.  File databases run
in WAL mode, so queries read a snapshot and never wait for writers.  Writers
(appends and sweep batches) go through one gate where a waiting append is
always admitted before the next sweep batch; an append on the event loop
waits for at most one batch.  While a sweep is deleting, readers hide every
row below its cutoff, so no query sees a sweep half applied.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from logsim.contracts.enums import RecordKind
from logsim.contracts.record import StoredRecord
from logsim.contracts.timefmt import iso_ts, normalize_bound, utc_now
from logsim.shared.errors import StorageError

log = logging.getLogger(__name__)

MEMORY = ":memory:"

# rows deleted per sweep transaction
SWEEP_BATCH = 5000

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT NOT NULL,
        kind TEXT NOT NULL,
        payload TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp)",
    "CREATE INDEX IF NOT EXISTS idx_logs_kind ON logs(kind)",
)


class _WriteGate:
    """One writer at a time; appends jump ahead of pending sweep batches."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._busy = False
        self._urgent_waiters = 0

    @contextmanager
    def urgent(self) -> Iterator[None]:
        with self._condition:
            self._urgent_waiters += 1
            while self._busy:
                self._condition.wait()
            self._urgent_waiters -= 1
            self._busy = True
        try:
            yield
        finally:
            self._release()

    @contextmanager
    def bulk(self) -> Iterator[None]:
        with self._condition:
            while self._busy or self._urgent_waiters > 0:
                self._condition.wait()
            self._busy = True
        try:
            yield
        finally:
            self._release()

    def _release(self) -> None:
        with self._condition:
            self._busy = False
            self._condition.notify_all()


class _SweepHorizon:
    """Cutoff of the sweep in progress, and the readers that see it.

    A reader takes the current cutoff when it starts and filters with it.
    ``raise_to`` waits until no running reader holds an older cutoff, so the
    first batch is deleted only once every reader hides those rows.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self.cutoff: str | None = None
        self._readers: Counter[str] = Counter()

    @contextmanager
    def reading(self) -> Iterator[str | None]:
        with self._condition:
            cutoff = self.cutoff
            self._readers[cutoff or ""] += 1
        try:
            yield cutoff
        finally:
            with self._condition:
                self._readers[cutoff or ""] -= 1
                self._condition.notify_all()

    def raise_to(self, cutoff: str) -> None:
        with self._condition:
            self.cutoff = cutoff
            self._condition.wait_for(
                lambda: not any(n > 0 and held < cutoff for held, n in self._readers.items())
            )

    def clear(self) -> None:
        with self._condition:
            self.cutoff = None
            self._readers = +self._readers


@dataclass(frozen=True, slots=True)
class Aggregate:
    total: int
    by_kind: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "by_kind": dict(self.by_kind)}


def _kind_filter(kind: str | RecordKind | None) -> str | None:
    if kind is None:
        return None
    value = kind.value if isinstance(kind, RecordKind) else str(kind)
    if value == "all":
        return None
    if value not in {k.value for k in RecordKind}:
        raise ValueError(f"Unknown record kind: {value!r}")
    return value


def _where(
    start: str | None,
    end: str | None,
    kind: str | RecordKind | None,
    floor: str | None = None,
) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []
    lo = normalize_bound(start)
    hi = normalize_bound(end)
    k = _kind_filter(kind)
    if floor is not None and (lo is None or lo < floor):
        lo = floor
    if lo is not None:
        clauses.append("timestamp >= ?")
        params.append(lo)
    if hi is not None:
        clauses.append("timestamp <= ?")
        params.append(hi)
    if k is not None:
        clauses.append("kind = ?")
        params.append(k)
    sql = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return sql, params


class HistoryStore:
    """Durable, time-indexed append log of distributed events."""

    def __init__(self, path: str | Path = "data/logs.db", sweep_batch: int = SWEEP_BATCH) -> None:
        self.path = str(path)
        self.sweep_batch = sweep_batch
        self._gate = _WriteGate()
        self._horizon = _SweepHorizon()
        self._sweep_lock = threading.Lock()
        self._closed = False
        self._keeper: sqlite3.Connection | None = None

        if self.path == MEMORY:
            # a named shared-cache database lives as long as one connection is open
            self._uri = f"file:logsim-{uuid.uuid4().hex}?mode=memory&cache=shared"
            self._keeper = self._open()
        else:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            self._uri = None

        with self._gate.urgent(), self._connect() as conn:
            if self._uri is None:
                conn.execute("PRAGMA journal_mode=WAL")
            for stmt in _SCHEMA:
                conn.execute(stmt)
        log.info("History store ready at %s", self.path)

    # ── connections ─────────────────────────────────────────────────────

    def _open(self) -> sqlite3.Connection:
        if self._uri is not None:
            conn = sqlite3.connect(self._uri, uri=True, timeout=5.0, check_same_thread=False)
        else:
            conn = sqlite3.connect(self.path, timeout=5.0)
            conn.execute("PRAGMA synchronous=NORMAL")
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if self._closed:
            raise sqlite3.ProgrammingError("History store is closed")
        conn = self._open()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    # ── writers ─────────────────────────────────────────────────────────

    def append(self, record: StoredRecord) -> int | None:
        """Insert *record*; return its id, or ``None`` if the insert failed."""
        try:
            with self._gate.urgent(), self._connect() as conn:
                cur = conn.execute(
                    "INSERT INTO logs (timestamp, kind, payload) VALUES (?, ?, ?)",
                    (record.timestamp, record.kind.value, record.payload),
                )
                return int(cur.lastrowid)
        except sqlite3.Error as exc:
            log.error("History append dropped (%s %s): %s", record.kind.value, record.timestamp, exc)
            return None

    def sweep(self, retention: timedelta, now: datetime | None = None) -> int:
        """Delete every row strictly older than ``now - retention``.

        Rows go in batches of ``sweep_batch``, one transaction each.  Returns
        the number of rows removed, including those removed before a failure.
        """
        cutoff = iso_ts((now or utc_now()) - retention)
        deleted = 0
        with self._sweep_lock:
            self._horizon.raise_to(cutoff)
            try:
                while True:
                    with self._gate.bulk(), self._connect() as conn:
                        cur = conn.execute(
                            "DELETE FROM logs WHERE id IN "
                            "(SELECT id FROM logs WHERE timestamp < ? LIMIT ?)",
                            (cutoff, self.sweep_batch),
                        )
                        batch = cur.rowcount
                    deleted += batch
                    if batch < self.sweep_batch:
                        break
            except sqlite3.Error as exc:
                log.error("Retention sweep failed (cutoff %s, %d removed): %s", cutoff, deleted, exc)
                return deleted
            finally:
                self._horizon.clear()
        if deleted:
            log.info("Retention sweep removed %d records older than %s", deleted, cutoff)
        return deleted

    # ── readers ─────────────────────────────────────────────────────────

    def query(
        self,
        start: str | None = None,
        end: str | None = None,
        kind: str | RecordKind | None = "all",
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[StoredRecord]:
        """Records within [start, end], newest first.

        Raises:
            ValueError: A bound is not ISO-8601 or *kind* is unknown.
            StorageError: The database could not be read.
        """
        _where(start, end, kind)
        with self._horizon.reading() as floor:
            where, params = _where(start, end, kind, floor)
            sql = f"SELECT id, timestamp, kind, payload FROM logs{where} ORDER BY timestamp DESC, id DESC"
            if limit is not None or offset:
                sql += " LIMIT ? OFFSET ?"
                params += [limit if limit is not None else -1, offset or 0]
            rows = self._read(sql, params)
        return [
            StoredRecord(
                id=row["id"],
                timestamp=row["timestamp"],
                kind=RecordKind(row["kind"]),
                payload=row["payload"],
            )
            for row in rows
        ]

    def count(
        self,
        start: str | None = None,
        end: str | None = None,
        kind: str | RecordKind | None = "all",
    ) -> int:
        _where(start, end, kind)
        with self._horizon.reading() as floor:
            where, params = _where(start, end, kind, floor)
            rows = self._read(f"SELECT COUNT(*) AS n FROM logs{where}", params)
        return int(rows[0]["n"])

    def aggregate(self, start: str | None = None, end: str | None = None) -> Aggregate:
        _where(start, end, None)
        with self._horizon.reading() as floor:
            where, params = _where(start, end, None, floor)
            rows = self._read(f"SELECT kind, COUNT(*) AS n FROM logs{where} GROUP BY kind", params)
        by_kind = {k.value: 0 for k in RecordKind}
        for row in rows:
            by_kind[row["kind"]] = int(row["n"])
        return Aggregate(total=sum(by_kind.values()), by_kind=by_kind)

    def _read(self, sql: str, params: list[Any]) -> list[sqlite3.Row]:
        try:
            if self._uri is None:
                with self._connect() as conn:
                    return conn.execute(sql, params).fetchall()
            # shared-cache memory databases lock per table, so readers queue with writers
            with self._gate.urgent(), self._connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            log.error("History read failed: %s", exc)
            raise StorageError(str(exc)) from exc

    # ── lifecycle ───────────────────────────────────────────────────────

    def close(self) -> None:
        with self._gate.urgent():
            self._closed = True
            if self._keeper is not None:
                self._keeper.close()
                self._keeper = None
        log.info("History store %s closed", self.path)
