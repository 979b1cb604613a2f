"""Canonical enumerations for the event contract."""

from __future__ import annotations

from enum import Enum


class LogLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class RecordKind(str, Enum):
    APPLICATION = "application"
    ACCESS = "access"


class AttackCategory(str, Enum):
    SQL_INJECTION = "sql_injection"
    XSS = "xss"
    PATH_TRAVERSAL = "path_traversal"
    BRUTE_FORCE = "brute_force"
    DDOS = "ddos"
    BOT_TRAFFIC = "bot_traffic"
    # reserved: catalogued but never selected
    COMMAND_INJECTION = "command_injection"
    SSRF = "ssrf"
    XXE = "xxe"


class CampaignKind(str, Enum):
    FLOOD = "flood"
    BRUTE_FORCE = "brute_force"

    @property
    def category(self) -> AttackCategory:
        """Attack category emitted while a campaign of this kind is active."""
        if self is CampaignKind.FLOOD:
            return AttackCategory.DDOS
        return AttackCategory.BRUTE_FORCE
