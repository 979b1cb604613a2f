"""Application and access event data-classes.

``LogEvent`` is a closed union of three variants.  Each variant carries a
fixed ``level`` tag and accepts only the status codes of its own class;
constructing one with a foreign status is an invariant violation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from logsim.contracts.enums import LogLevel
from logsim.shared.errors import InvariantViolation

SERVICE_NAME = "simulator-app"
HTTP_VERSION = "HTTP/1.1"

SUCCESS_STATUSES: tuple[int, ...] = (200, 201)
WARNING_STATUSES: tuple[int, ...] = (400, 401, 403, 404, 429)
ERROR_STATUSES: tuple[int, ...] = (500, 502, 503, 504)

# Security attack records are logged at error level but keep the status the
# attacked endpoint actually returned (401 for brute force, 429 for floods …)
ATTACK_EVENT_PREFIX = "security_attack_"
ATTACK_STATUSES: frozenset[int] = frozenset(
    {200, 400, 401, 403, 404, 429, 500, 502, 503, 504}
)


def _compact(data: dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


@dataclass(slots=True)
class _BaseLog:
    timestamp: str
    user_id: int
    session_id: str
    response_time_ms: int
    service: str

    level: ClassVar[LogLevel]
    allowed_statuses: ClassVar[tuple[int, ...]]

    def _check_status(self, status: int, allowed: frozenset[int] | tuple[int, ...]) -> None:
        if status not in allowed:
            raise InvariantViolation(
                f"{type(self).__name__} cannot carry status {status} "
                f"(allowed: {sorted(allowed)})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Wire representation; ``level`` is inserted before ``event``."""
        data: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "event":
                data["level"] = self.level.value
            value = getattr(self, f.name)
            if value is not None:
                data[f.name] = value
        return data

    def to_json(self) -> str:
        return _compact(self.to_dict())


@dataclass(slots=True)
class SuccessLog(_BaseLog):
    event: str
    status: int
    message: str

    level: ClassVar[LogLevel] = LogLevel.INFO
    allowed_statuses: ClassVar[tuple[int, ...]] = SUCCESS_STATUSES

    def __post_init__(self) -> None:
        self._check_status(self.status, self.allowed_statuses)


@dataclass(slots=True)
class WarningLog(_BaseLog):
    event: str
    status: int
    message: str
    warning_type: str | None = None

    level: ClassVar[LogLevel] = LogLevel.WARN
    allowed_statuses: ClassVar[tuple[int, ...]] = WARNING_STATUSES

    def __post_init__(self) -> None:
        self._check_status(self.status, self.allowed_statuses)


@dataclass(slots=True)
class ErrorLog(_BaseLog):
    event: str
    status: int
    message: str
    error_code: str | None = None
    stack_trace: str | None = None

    level: ClassVar[LogLevel] = LogLevel.ERROR
    allowed_statuses: ClassVar[tuple[int, ...]] = ERROR_STATUSES

    def __post_init__(self) -> None:
        allowed = ATTACK_STATUSES if self.is_attack else self.allowed_statuses
        self._check_status(self.status, allowed)

    @property
    def is_attack(self) -> bool:
        return self.event.startswith(ATTACK_EVENT_PREFIX)


LogEvent = SuccessLog | WarningLog | ErrorLog

_VARIANTS: dict[str, type[SuccessLog] | type[WarningLog] | type[ErrorLog]] = {
    LogLevel.INFO.value: SuccessLog,
    LogLevel.WARN.value: WarningLog,
    LogLevel.ERROR.value: ErrorLog,
}


def level_of(event: LogEvent) -> LogLevel:
    """Return the variant tag, refusing anything outside the closed union."""
    if isinstance(event, SuccessLog):
        return LogLevel.INFO
    if isinstance(event, WarningLog):
        return LogLevel.WARN
    if isinstance(event, ErrorLog):
        return LogLevel.ERROR
    raise InvariantViolation(f"Not a LogEvent variant: {type(event).__name__}")


def log_event_from_dict(data: dict[str, Any]) -> LogEvent:
    """Rebuild a variant from its wire dict.

    Raises:
        ValueError: Unknown ``level`` or missing fields.
    """
    level = data.get("level")
    cls = _VARIANTS.get(str(level))
    if cls is None:
        raise ValueError(f"Unknown log level: {level!r}")
    names = {f.name for f in fields(cls)}
    try:
        return cls(**{k: v for k, v in data.items() if k in names})
    except TypeError as exc:
        raise ValueError(f"Malformed {level} event: {exc}") from exc


@dataclass(slots=True)
class AccessEvent:
    """One HTTP request as it would appear in an Nginx access log."""

    ip: str
    timestamp: str
    method: str
    path: str
    http_version: str
    status: int
    bytes: int
    referer: str
    user_agent: str
    response_time_ms: int
    user_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self) -> str:
        return _compact(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccessEvent:
        names = {f.name for f in fields(cls)}
        try:
            return cls(**{k: v for k, v in data.items() if k in names})
        except TypeError as exc:
            raise ValueError(f"Malformed access event: {exc}") from exc


@dataclass(frozen=True, slots=True)
class EventPair:
    """Correlated output of one synthesizer tick."""

    application: LogEvent
    access: AccessEvent
    category: str = "normal"  # "normal" or an AttackCategory value

    def __post_init__(self) -> None:
        if self.application.timestamp != self.access.timestamp:
            raise InvariantViolation(
                "Correlated events must share a timestamp: "
                f"{self.application.timestamp} != {self.access.timestamp}"
            )

    @property
    def is_attack(self) -> bool:
        return self.category != "normal"
