"""Tests for logsim.shared — YAML loading and typed settings."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

import pytest
import yaml

from logsim.shared.config_loader import load_yaml
from logsim.shared.errors import ConfigError
from logsim.shared.logger import setup_logging
from logsim.shared.seed import init_rng
from logsim.shared.settings import Settings, load_settings

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "config" / "simulator.yaml"


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "simulator.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestLoadYaml:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("generator: [unclosed")
        with pytest.raises(ConfigError):
            load_yaml(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError):
            load_yaml(_write(tmp_path, [1, 2, 3]))


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.generator.log_rate == 10.0
        assert s.generator.error_rate == 0.20
        assert s.generator.warning_rate == 0.15
        assert s.attacks.bot_traffic == 0.05
        assert s.streaming.kafka.topic == "server-logs"
        assert s.streaming.redis.stream == "live-logs"
        assert s.streaming.shutdown_grace_sec == 5.0
        assert s.api.port == 4000
        assert s.storage.retention == timedelta(hours=48)

    def test_shipped_config_matches_defaults(self):
        assert load_settings(CONFIG_PATH) == Settings()

    def test_no_path_gives_defaults(self, monkeypatch):
        monkeypatch.delenv("LOGSIM_CONFIG", raising=False)
        assert load_settings(None) == Settings()

    def test_env_var_supplies_path(self, tmp_path, monkeypatch):
        path = _write(tmp_path, {"generator": {"log_rate": 3}})
        monkeypatch.setenv("LOGSIM_CONFIG", str(path))
        assert load_settings(None).generator.log_rate == 3.0

    def test_explicit_path_beats_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOGSIM_CONFIG", str(tmp_path / "missing.yaml"))
        assert load_settings(CONFIG_PATH) == Settings()

    def test_partial_override(self, tmp_path):
        path = _write(
            tmp_path,
            {
                "generator": {"log_rate": 50, "seed": 7},
                "streaming": {"kafka": {"enabled": True, "brokers": "a:9092, b:9092"}},
                "storage": {"path": "/tmp/x.db", "retention_hours": 1},
            },
        )
        s = load_settings(path)
        assert s.generator.log_rate == 50.0
        assert s.generator.seed == 7
        assert s.generator.error_rate == 0.20
        assert s.streaming.kafka.enabled
        assert s.streaming.kafka.brokers == ("a:9092", "b:9092")
        assert s.storage.retention == timedelta(hours=1)
        assert s.attacks.enabled

    @pytest.mark.parametrize(
        "data",
        [
            {"generator": {"error_rate": 1.5}},
            {"generator": {"warning_rate": -0.1}},
            {"generator": {"error_rate": 0.7, "warning_rate": 0.4}},
            {"generator": {"log_rate": 0}},
            {"generator": {"log_rate": "fast"}},
            {"attacks": {"sql_injection": 0.6, "xss": 0.6}},
            {"storage": {"retention_hours": -1}},
            {"generator": "not a mapping"},
            {"generator": {"seed": "abc"}},
            {"streaming": {"queue_size": 0}},
            {"streaming": {"queue_size": -5}},
            {"streaming": {"queue_size": "big"}},
            {"streaming": {"shutdown_grace_sec": "soon"}},
            {"streaming": {"websocket": {"max_connections": 2.5}}},
            {"streaming": {"redis": {"port": "redis"}}},
            {"streaming": {"redis": {"max_len": 0}}},
            {"api": {"port": "http"}},
            {"api": {"port": True}},
        ],
    )
    def test_invalid_values(self, tmp_path, data):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, data))


class TestSharedHelpers:
    def test_seeded_rng_is_reproducible(self):
        a, b = init_rng(123), init_rng(123)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_setup_logging_quiets_third_party(self):
        setup_logging("INFO")
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("kafka").level == logging.WARNING
