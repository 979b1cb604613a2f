"""Tests for logsim.emulator.writers — on-disk application and access logs."""

from __future__ import annotations

import json
from datetime import UTC, datetime

from logsim.emulator.writers import (
    AccessLogWriter,
    AppLogWriter,
    LogFileWriter,
    _rotate_if_needed,
    format_access_line,
    nginx_time,
)
from logsim.shared.settings import FileSettings
from tests.conftest import make_access, make_error, make_pair


class TestAccessFormat:
    def test_nginx_time(self):
        assert nginx_time(datetime(2025, 10, 20, 14, 45, 12, tzinfo=UTC)) == (
            "[20/Oct/2025:14:45:12 +0000]"
        )

    def test_combined_line(self):
        line = format_access_line(make_access(timestamp="2026-02-26T10:00:00.000Z"))
        assert line == (
            '203.0.113.10 - user42 [26/Feb/2026:10:00:00 +0000] '
            '"GET /api/user_login/17 HTTP/1.1" 200 1234 "-" '
            '"Mozilla/5.0 (X11; Linux x86_64)" 0.120'
        )

    def test_anonymous_user(self):
        line = format_access_line(make_access(user_id=None))
        assert line.startswith("203.0.113.10 - - [")


class TestWriters:
    def test_app_writer_appends_json_lines(self, tmp_path):
        path = tmp_path / "logs" / "app.log"
        writer = AppLogWriter(path)
        writer.write(make_error())
        writer.write(make_error(status=503))
        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["status"] == 503
        assert writer.lines == 2

    def test_access_writer(self, tmp_path):
        path = tmp_path / "access.log"
        AccessLogWriter(path).write(make_access())
        assert path.read_text().endswith("0.120\n")

    def test_pair_writer(self, tmp_path):
        settings = FileSettings(
            app_log=str(tmp_path / "app.log"), access_log=str(tmp_path / "access.log")
        )
        writer = LogFileWriter(settings)
        writer.write(make_pair())
        assert (tmp_path / "app.log").read_text().count("\n") == 1
        assert (tmp_path / "access.log").read_text().count("\n") == 1

    def test_write_failure_is_counted_not_raised(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        writer = AppLogWriter(blocker / "app.log")
        writer.write(make_error())
        assert writer.failures == 1
        assert writer.lines == 0


class TestRotation:
    def test_rotates_when_over_limit(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_bytes(b"x" * 2048)
        assert _rotate_if_needed(path, max_mb=0.001)
        assert not path.exists()
        assert (tmp_path / "app.log.bak").stat().st_size == 2048

    def test_keeps_small_file(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text("small")
        assert not _rotate_if_needed(path, max_mb=1)
        assert path.exists()

    def test_missing_file(self, tmp_path):
        assert not _rotate_if_needed(tmp_path / "missing.log", max_mb=1)

    def test_writer_starts_fresh_file_after_rotation(self, tmp_path):
        path = tmp_path / "app.log"
        writer = AppLogWriter(path, max_file_mb=0.0005)
        for _ in range(5):
            writer.write(make_error())
        assert (tmp_path / "app.log.bak").exists()
        assert path.stat().st_size < 0.0005 * 1_048_576 * 2
