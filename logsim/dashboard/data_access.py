"""Шар завантаження даних з history store у pandas DataFrame."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from datetime import timedelta
from pathlib import Path
from typing import Any

import pandas as pd

from logsim.contracts.record import StoredRecord
from logsim.contracts.timefmt import iso_ts, utc_now
from logsim.shared.errors import StorageError
from logsim.storage.history import HistoryStore

log = logging.getLogger(__name__)

# ── paths ───────────────────────────────────────────────────────────────────

DB_PATH = Path(os.environ.get("LOGSIM_DB", "data/logs.db"))

# flat columns pulled out of each payload (in display order)
COLUMNS: list[str] = [
    "id",
    "timestamp",
    "kind",
    "level",
    "event",
    "status",
    "ip",
    "method",
    "path",
    "response_time_ms",
    "user_agent",
    "message",
]

STATUS_CLASSES: list[str] = ["2xx", "4xx", "5xx"]
ATTACK_PREFIX = "security_attack_"


def open_store(path: Path = DB_PATH) -> HistoryStore | None:
    """Відкриває store, або None якщо файлу бази ще немає."""
    if not path.exists():
        return None
    return HistoryStore(path)


# ── conversion ──────────────────────────────────────────────────────────────


def records_to_frame(records: Iterable[StoredRecord]) -> pd.DataFrame:
    """Розгортає payload кожного запису у плоскі колонки."""
    rows: list[dict[str, Any]] = []
    for rec in records:
        data = rec.data
        level = rec.level
        rows.append(
            {
                "id": rec.id,
                "timestamp": rec.timestamp,
                "kind": rec.kind.value,
                "level": level.value if level is not None else None,
                "event": data.get("event"),
                "status": data.get("status"),
                "ip": data.get("ip"),
                "method": data.get("method"),
                "path": data.get("path"),
                "response_time_ms": data.get("response_time_ms"),
                "user_agent": data.get("user_agent"),
                "message": data.get("message"),
            }
        )
    df = pd.DataFrame(rows, columns=COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df["status"] = pd.to_numeric(df["status"], errors="coerce")
    return df


def load_window(
    store: HistoryStore,
    minutes: int = 60,
    log_type: str = "all",
    limit: int = 5000,
) -> pd.DataFrame | None:
    """Останні *minutes* хвилин історії; None якщо читання не вдалося."""
    start = iso_ts(utc_now() - timedelta(minutes=minutes))
    try:
        records = store.query(start=start, kind=log_type, limit=limit)
    except StorageError as exc:
        log.warning("Dashboard read failed: %s", exc)
        return None
    return records_to_frame(records)


# ── aggregates ──────────────────────────────────────────────────────────────


def kpis(df: pd.DataFrame) -> dict[str, float]:
    """Підсумкові показники для KPI карток."""
    app = df[df["kind"] == "application"]
    total_app = len(app)
    errors = int((app["level"] == "error").sum())
    attacks = int(app["event"].fillna("").str.startswith(ATTACK_PREFIX).sum())
    return {
        "total": float(len(df)),
        "application": float(total_app),
        "access": float((df["kind"] == "access").sum()),
        "error_share": (errors / total_app * 100.0) if total_app else 0.0,
        "attacks": float(attacks),
    }


def status_classes(df: pd.DataFrame) -> pd.DataFrame:
    """Кількість access-записів за класом статусу (2xx/4xx/5xx)."""
    access = df[(df["kind"] == "access") & df["status"].notna()]
    classes = (access["status"] // 100).astype(int).astype(str) + "xx"
    counts = classes.value_counts().reindex(STATUS_CLASSES, fill_value=0)
    return counts.rename_axis("status_class").reset_index(name="count")


def attack_categories(df: pd.DataFrame) -> pd.DataFrame:
    app = df[df["kind"] == "application"]
    events = app["event"].fillna("")
    attacks = events[events.str.startswith(ATTACK_PREFIX)].str.removeprefix(ATTACK_PREFIX)
    if attacks.empty:
        return pd.DataFrame(columns=["category", "count"])
    return attacks.value_counts().rename_axis("category").reset_index(name="count")


def events_per_minute(df: pd.DataFrame) -> pd.DataFrame:
    """Кількість записів за хвилину і тип; пропущені хвилини заповнені нулями."""
    if df.empty or df["timestamp"].isna().all():
        return pd.DataFrame(columns=["minute", "kind", "count"])
    tmp = df.dropna(subset=["timestamp"]).copy()
    tmp["minute"] = tmp["timestamp"].dt.floor("min")
    agg = tmp.groupby(["minute", "kind"]).size().unstack(fill_value=0)
    full_range = pd.date_range(agg.index.min(), agg.index.max(), freq="min")
    agg = agg.reindex(full_range, fill_value=0).rename_axis("minute")
    return agg.reset_index().melt(id_vars="minute", var_name="kind", value_name="count")


def filter_frame(
    df: pd.DataFrame,
    *,
    levels: list[str] | None = None,
    attacks_only: bool = False,
) -> pd.DataFrame:
    """Застосовує фільтри sidebar; access-записи не мають level і лишаються."""
    mask = pd.Series(True, index=df.index)
    if levels:
        mask &= df["level"].isin(levels) | (df["kind"] == "access")
    if attacks_only:
        is_attack_app = df["event"].fillna("").str.startswith(ATTACK_PREFIX)
        mask &= is_attack_app
    return df.loc[mask].copy()
