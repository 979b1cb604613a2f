"""On-disk text logs: JSON-lines application log + Nginx combined access log.

Both writers append one line per event and rotate the file to ``*.bak``
once it grows past ``max_file_mb``.  A failed write is logged and the
event is skipped; the generation loop never sees the error.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from logsim.contracts.events import AccessEvent, ErrorLog, EventPair, SuccessLog, WarningLog
from logsim.contracts.timefmt import parse_ts
from logsim.emulator.traffic import NO_REFERER
from logsim.shared.settings import FileSettings

log = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _rotate_if_needed(path: Path, max_mb: float) -> bool:
    """Rotate (truncate) file when it exceeds *max_mb*.

    Renames current file to ``*.bak`` (overwriting previous backup) so the
    next append creates a fresh file.  Returns ``True`` if rotation occurred.
    """
    try:
        if path.stat().st_size / 1_048_576 > max_mb:
            bak = path.with_suffix(path.suffix + ".bak")
            if bak.exists():
                bak.unlink()
            path.rename(bak)
            log.info("Rotated %s (exceeded %.0f MB)", path.name, max_mb)
            return True
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Rotation of %s failed: %s", path, exc)
    return False


def nginx_time(dt: datetime) -> str:
    """``[20/Oct/2025:14:45:12 +0000]`` (always UTC)."""
    return (
        f"[{dt.day:02d}/{_MONTHS[dt.month - 1]}/{dt.year:04d}:"
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} +0000]"
    )


def format_access_line(ev: AccessEvent) -> str:
    """Nginx combined format followed by request time in seconds."""
    request = f"{ev.method} {ev.path} {ev.http_version}"
    return (
        f"{ev.ip} - {ev.user_id or NO_REFERER} {nginx_time(parse_ts(ev.timestamp))} "
        f'"{request}" {ev.status} {ev.bytes} "{ev.referer}" "{ev.user_agent}" '
        f"{ev.response_time_ms / 1000:.3f}"
    )


class _AppendWriter:
    def __init__(self, path: str | Path, max_file_mb: float = 10.0) -> None:
        self.path = Path(path)
        self.max_file_mb = max_file_mb
        self.lines = 0
        self.failures = 0

    def _append(self, line: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _rotate_if_needed(self.path, self.max_file_mb)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
            self.lines += 1
        except OSError as exc:
            self.failures += 1
            log.warning("Failed to write %s: %s", self.path, exc)


class AppLogWriter(_AppendWriter):
    """One JSON object per line, the application event as-is."""

    def write(self, event: SuccessLog | WarningLog | ErrorLog) -> None:
        self._append(event.to_json())


class AccessLogWriter(_AppendWriter):
    def write(self, event: AccessEvent) -> None:
        self._append(format_access_line(event))


class LogFileWriter:
    """Writes both halves of a pair to their respective files."""

    name = "files"

    def __init__(self, settings: FileSettings | None = None) -> None:
        s = settings or FileSettings()
        self.app = AppLogWriter(s.app_log, s.max_file_mb)
        self.access = AccessLogWriter(s.access_log, s.max_file_mb)

    def write(self, pair: EventPair) -> None:
        self.app.write(pair.application)
        self.access.write(pair.access)
