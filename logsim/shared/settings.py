"""Typed view over ``config/simulator.yaml``.

Every key is optional; missing keys fall back to the defaults below, so an
empty file (or no file at all) yields a working simulator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

from logsim.shared.config_loader import load_yaml, resolve_config_path
from logsim.shared.errors import ConfigError

log = logging.getLogger(__name__)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{key}' must be a mapping")
    return value


def _probability(name: str, value: Any) -> float:
    try:
        p = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if not 0.0 <= p <= 1.0:
        raise ConfigError(f"{name} must be within [0, 1], got {p}")
    return p


def _positive(name: str, value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if v <= 0:
        raise ConfigError(f"{name} must be positive, got {v}")
    return v


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        v = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    if v <= 0:
        raise ConfigError(f"{name} must be positive, got {v}")
    return v


@dataclass(frozen=True, slots=True)
class GeneratorSettings:
    log_rate: float = 10.0
    error_rate: float = 0.20
    warning_rate: float = 0.15
    seed: int | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GeneratorSettings:
        d = cls()
        error_rate = _probability("generator.error_rate", raw.get("error_rate", d.error_rate))
        warning_rate = _probability(
            "generator.warning_rate", raw.get("warning_rate", d.warning_rate)
        )
        if error_rate + warning_rate > 1.0:
            raise ConfigError(
                f"error_rate + warning_rate must not exceed 1.0 "
                f"({error_rate} + {warning_rate})"
            )
        seed = raw.get("seed")
        if seed is not None:
            try:
                seed = int(seed)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"generator.seed must be an integer, got {seed!r}") from exc
        return cls(
            log_rate=_positive("generator.log_rate", raw.get("log_rate", d.log_rate)),
            error_rate=error_rate,
            warning_rate=warning_rate,
            seed=seed,
        )


@dataclass(frozen=True, slots=True)
class AttackSettings:
    """Per-category probabilities for the non-campaign attacks."""

    enabled: bool = True
    campaigns: bool = True
    sql_injection: float = 0.02
    xss: float = 0.015
    path_traversal: float = 0.01
    bot_traffic: float = 0.05

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AttackSettings:
        d = cls()
        probs = {
            name: _probability(f"attacks.{name}", raw.get(name, getattr(d, name)))
            for name in ("sql_injection", "xss", "path_traversal", "bot_traffic")
        }
        if sum(probs.values()) > 1.0:
            raise ConfigError("Sum of attack probabilities must not exceed 1.0")
        return cls(
            enabled=bool(raw.get("enabled", d.enabled)),
            campaigns=bool(raw.get("campaigns", d.campaigns)),
            **probs,
        )


@dataclass(frozen=True, slots=True)
class PatternSettings:
    business_hours: bool = True
    geographic_distribution: bool = True

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PatternSettings:
        d = cls()
        return cls(
            business_hours=bool(raw.get("business_hours", d.business_hours)),
            geographic_distribution=bool(
                raw.get("geographic_distribution", d.geographic_distribution)
            ),
        )


@dataclass(frozen=True, slots=True)
class FileSettings:
    enabled: bool = True
    app_log: str = "logs/app.log"
    access_log: str = "logs/access.log"
    max_file_mb: float = 10.0

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FileSettings:
        d = cls()
        return cls(
            enabled=bool(raw.get("enabled", d.enabled)),
            app_log=str(raw.get("app_log", d.app_log)),
            access_log=str(raw.get("access_log", d.access_log)),
            max_file_mb=_positive("files.max_file_mb", raw.get("max_file_mb", d.max_file_mb)),
        )


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    enabled: bool = True
    max_connections: int = 100


@dataclass(frozen=True, slots=True)
class KafkaSettings:
    enabled: bool = False
    brokers: tuple[str, ...] = ("localhost:9092",)
    topic: str = "server-logs"
    client_id: str = "log-simulator"


@dataclass(frozen=True, slots=True)
class RedisSettings:
    enabled: bool = False
    host: str = "localhost"
    port: int = 6379
    stream: str = "live-logs"
    max_len: int = 100_000


@dataclass(frozen=True, slots=True)
class StreamingSettings:
    websocket: WebSocketSettings = field(default_factory=WebSocketSettings)
    kafka: KafkaSettings = field(default_factory=KafkaSettings)
    redis: RedisSettings = field(default_factory=RedisSettings)
    queue_size: int = 1000
    shutdown_grace_sec: float = 5.0

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> StreamingSettings:
        d = cls()
        ws = _section(raw, "websocket")
        kafka = _section(raw, "kafka")
        redis = _section(raw, "redis")
        brokers = kafka.get("brokers", list(d.kafka.brokers))
        if isinstance(brokers, str):
            brokers = [b.strip() for b in brokers.split(",") if b.strip()]
        return cls(
            websocket=WebSocketSettings(
                enabled=bool(ws.get("enabled", d.websocket.enabled)),
                max_connections=_positive_int(
                    "streaming.websocket.max_connections",
                    ws.get("max_connections", d.websocket.max_connections),
                ),
            ),
            kafka=KafkaSettings(
                enabled=bool(kafka.get("enabled", d.kafka.enabled)),
                brokers=tuple(str(b) for b in brokers),
                topic=str(kafka.get("topic", d.kafka.topic)),
                client_id=str(kafka.get("client_id", d.kafka.client_id)),
            ),
            redis=RedisSettings(
                enabled=bool(redis.get("enabled", d.redis.enabled)),
                host=str(redis.get("host", d.redis.host)),
                port=_positive_int("streaming.redis.port", redis.get("port", d.redis.port)),
                stream=str(redis.get("stream", d.redis.stream)),
                max_len=_positive_int("streaming.redis.max_len", redis.get("max_len", d.redis.max_len)),
            ),
            queue_size=_positive_int("streaming.queue_size", raw.get("queue_size", d.queue_size)),
            shutdown_grace_sec=_positive(
                "streaming.shutdown_grace_sec", raw.get("shutdown_grace_sec", d.shutdown_grace_sec)
            ),
        )


@dataclass(frozen=True, slots=True)
class ApiSettings:
    host: str = "0.0.0.0"
    port: int = 4000


@dataclass(frozen=True, slots=True)
class StorageSettings:
    enabled: bool = True
    path: str = "data/logs.db"
    retention_hours: float = 48.0
    sweep_interval_sec: float = 3600.0

    @property
    def retention(self) -> timedelta:
        return timedelta(hours=self.retention_hours)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> StorageSettings:
        d = cls()
        return cls(
            enabled=bool(raw.get("enabled", d.enabled)),
            path=str(raw.get("path", d.path)),
            retention_hours=_positive(
                "storage.retention_hours", raw.get("retention_hours", d.retention_hours)
            ),
            sweep_interval_sec=_positive(
                "storage.sweep_interval_sec",
                raw.get("sweep_interval_sec", d.sweep_interval_sec),
            ),
        )


@dataclass(frozen=True, slots=True)
class Settings:
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    attacks: AttackSettings = field(default_factory=AttackSettings)
    patterns: PatternSettings = field(default_factory=PatternSettings)
    files: FileSettings = field(default_factory=FileSettings)
    streaming: StreamingSettings = field(default_factory=StreamingSettings)
    api: ApiSettings = field(default_factory=ApiSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        api = _section(data, "api")
        return cls(
            generator=GeneratorSettings.from_dict(_section(data, "generator")),
            attacks=AttackSettings.from_dict(_section(data, "attacks")),
            patterns=PatternSettings.from_dict(_section(data, "patterns")),
            files=FileSettings.from_dict(_section(data, "files")),
            streaming=StreamingSettings.from_dict(_section(data, "streaming")),
            api=ApiSettings(
                host=str(api.get("host", ApiSettings().host)),
                port=_positive_int("api.port", api.get("port", ApiSettings().port)),
            ),
            storage=StorageSettings.from_dict(_section(data, "storage")),
        )


def load_settings(path: str | Path | None = None) -> Settings:
    """Build ``Settings`` from a YAML file.

    Without *path* the ``$LOGSIM_CONFIG`` variable is consulted; when
    neither is set the built-in defaults are used.
    """
    path = resolve_config_path(path)
    if path is None:
        log.info("No config file given, using built-in defaults")
        return Settings()
    settings = Settings.from_dict(load_yaml(path))
    log.info(
        "Settings loaded from %s: rate=%.1f/s, error=%.2f, warning=%.2f, attacks=%s",
        path,
        settings.generator.log_rate,
        settings.generator.error_rate,
        settings.generator.warning_rate,
        "on" if settings.attacks.enabled else "off",
    )
    return settings
