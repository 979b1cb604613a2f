"""Canonical timestamp format.

All stored and transmitted timestamps look like ``2026-02-26T10:00:00.000Z``:
UTC, millisecond precision, every field zero padded to a fixed width.  The
history store compares timestamps as plain strings, which only matches
chronological order while this format is used everywhere.
"""

from __future__ import annotations

from datetime import UTC, datetime

TS_LENGTH = 24


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def iso_ts(dt: datetime) -> str:
    """Render *dt* in the canonical format (naive values are taken as UTC)."""
    dt = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        f".{dt.microsecond // 1000:03d}Z"
    )


def parse_ts(raw: str) -> datetime:
    """Parse any ISO-8601 string into an aware UTC datetime.

    Raises:
        ValueError: If *raw* is not ISO-8601.
    """
    dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def normalize_bound(raw: str | None) -> str | None:
    """Re-render a caller supplied bound so it compares correctly with stored rows."""
    if raw is None or not raw.strip():
        return None
    return iso_ts(parse_ts(raw))
