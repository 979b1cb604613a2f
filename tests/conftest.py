"""Shared fixtures for logsim tests."""

from __future__ import annotations

import random
from datetime import datetime, timedelta

import pytest

from logsim.contracts.enums import RecordKind
from logsim.contracts.events import (
    HTTP_VERSION,
    SERVICE_NAME,
    AccessEvent,
    ErrorLog,
    EventPair,
    SuccessLog,
    WarningLog,
)
from logsim.contracts.record import StoredRecord
from logsim.contracts.timefmt import iso_ts, parse_ts
from logsim.storage.history import HistoryStore

# ── Helpers: events with sensible defaults ──────────────────────────────


def make_success(
    *,
    timestamp: str = "2026-02-26T10:00:00.000Z",
    user_id: int = 42,
    session_id: str = "a1b2c3",
    response_time_ms: int = 120,
    event: str = "user_login",
    status: int = 200,
    message: str = "User successfully logged in",
) -> SuccessLog:
    return SuccessLog(
        timestamp=timestamp,
        user_id=user_id,
        session_id=session_id,
        response_time_ms=response_time_ms,
        service=SERVICE_NAME,
        event=event,
        status=status,
        message=message,
    )


def make_warning(
    *,
    timestamp: str = "2026-02-26T10:00:00.000Z",
    status: int = 429,
    warning_type: str | None = "RATE_LIMIT_APPROACHING",
) -> WarningLog:
    return WarningLog(
        timestamp=timestamp,
        user_id=7,
        session_id="d4e5f6",
        response_time_ms=300,
        service=SERVICE_NAME,
        event="user_login_warning",
        status=status,
        message="Multiple login attempts detected",
        warning_type=warning_type,
    )


def make_error(
    *,
    timestamp: str = "2026-02-26T10:00:00.000Z",
    event: str = "user_login_failed",
    status: int = 500,
    error_code: str | None = "ERR_DATABASE_CONNECTION",
    stack_trace: str | None = None,
) -> ErrorLog:
    return ErrorLog(
        timestamp=timestamp,
        user_id=13,
        session_id="0f0f0f",
        response_time_ms=900,
        service=SERVICE_NAME,
        event=event,
        status=status,
        message="Failed to authenticate user",
        error_code=error_code,
        stack_trace=stack_trace,
    )


def make_access(
    *,
    timestamp: str = "2026-02-26T10:00:00.000Z",
    ip: str = "203.0.113.10",
    method: str = "GET",
    path: str = "/api/user_login/17",
    status: int = 200,
    user_id: str | None = "user42",
) -> AccessEvent:
    return AccessEvent(
        ip=ip,
        timestamp=timestamp,
        method=method,
        path=path,
        http_version=HTTP_VERSION,
        status=status,
        bytes=1234,
        referer="-",
        user_agent="Mozilla/5.0 (X11; Linux x86_64)",
        response_time_ms=120,
        user_id=user_id,
    )


def make_pair(timestamp: str = "2026-02-26T10:00:00.000Z") -> EventPair:
    return EventPair(make_success(timestamp=timestamp), make_access(timestamp=timestamp))


def make_record(
    timestamp: str = "2026-02-26T10:00:00.000Z",
    kind: RecordKind = RecordKind.APPLICATION,
) -> StoredRecord:
    if kind is RecordKind.APPLICATION:
        return StoredRecord.from_event(make_success(timestamp=timestamp))
    return StoredRecord.from_event(make_access(timestamp=timestamp))


# ── Timestamp helpers ────────────────────────────────────────────────────


def ts_offset(base: str = "2026-02-26T10:00:00.000Z", seconds: float = 0) -> str:
    """Return a canonical timestamp offset from *base* by *seconds*."""
    return iso_ts(parse_ts(base) + timedelta(seconds=seconds))


def at(base: str = "2026-02-26T10:00:00.000Z", seconds: float = 0) -> datetime:
    return parse_ts(base) + timedelta(seconds=seconds)


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def memory_store():
    store = HistoryStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def file_store(tmp_path):
    store = HistoryStore(tmp_path / "logs.db")
    yield store
    store.close()
