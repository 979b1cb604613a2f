"""Query façade over the history store."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from logsim.contracts.timefmt import iso_ts, normalize_bound, utc_now
from logsim.runtime import Simulator
from logsim.storage.history import HistoryStore

log = logging.getLogger(__name__)

router = APIRouter()

LOG_TYPES = ("all", "application", "access")
MAX_LIMIT = 10_000


def _simulator(request: Request) -> Simulator:
    return request.app.state.simulator


def _store(request: Request) -> HistoryStore:
    store = _simulator(request).store
    if store is None:
        raise HTTPException(status_code=503, detail="history store disabled")
    return store


def _bounds(start_time: str | None, end_time: str | None) -> tuple[str | None, str | None]:
    try:
        return normalize_bound(start_time), normalize_bound(end_time)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"invalid timestamp: {exc}") from exc


def _log_type(value: str) -> str:
    if value not in LOG_TYPES:
        raise HTTPException(status_code=400, detail=f"log_type must be one of {list(LOG_TYPES)}")
    return value


@router.get("/health")
def health(request: Request) -> dict[str, Any]:
    sim = _simulator(request)
    return {
        "status": "ok",
        "timestamp": iso_ts(utc_now()),
        "services": {sink.name: sink.status() for sink in sim.sinks},
    }


@router.get("/api/status")
def status(request: Request) -> dict[str, Any]:
    return _simulator(request).status()


@router.get("/api/logs")
def logs(
    request: Request,
    start_time: str | None = None,
    end_time: str | None = None,
    log_type: str = "all",
    limit: int = Query(1000, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    store = _store(request)
    start, end = _bounds(start_time, end_time)
    kind = _log_type(log_type)
    records = store.query(start, end, kind, limit=limit, offset=offset)
    total = store.count(start, end, kind)
    return {
        "count": len(records),
        "total": total,
        "start_time": start,
        "end_time": end,
        "log_type": kind,
        "logs": [r.to_dict() for r in records],
    }


@router.get("/api/logs/latest")
def latest_logs(
    request: Request,
    minutes: int = Query(15, ge=0),
    hours: int = Query(0, ge=0),
    log_type: str = "all",
    limit: int = Query(1000, ge=1, le=MAX_LIMIT),
) -> dict[str, Any]:
    store = _store(request)
    kind = _log_type(log_type)
    window = hours * 60 + minutes
    now = utc_now()
    start, end = iso_ts(now - timedelta(minutes=window)), iso_ts(now)
    records = store.query(start, end, kind, limit=limit)
    return {
        "count": len(records),
        "total": store.count(start, end, kind),
        "minutes": window,
        "log_type": kind,
        "logs": [r.to_dict() for r in records],
    }


@router.get("/api/stats")
def stats(
    request: Request,
    start_time: str | None = None,
    end_time: str | None = None,
) -> dict[str, Any]:
    store = _store(request)
    start, end = _bounds(start_time, end_time)
    agg = store.aggregate(start, end)
    return {"start_time": start, "end_time": end, **agg.to_dict()}
