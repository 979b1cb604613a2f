"""Event contract — canonical data structures shared by all modules."""

from logsim.contracts.enums import AttackCategory, CampaignKind, LogLevel, RecordKind
from logsim.contracts.events import (
    AccessEvent,
    ErrorLog,
    EventPair,
    LogEvent,
    SuccessLog,
    WarningLog,
)
from logsim.contracts.record import StoredRecord

__all__ = [
    "AccessEvent",
    "AttackCategory",
    "CampaignKind",
    "ErrorLog",
    "EventPair",
    "LogEvent",
    "LogLevel",
    "RecordKind",
    "StoredRecord",
    "SuccessLog",
    "WarningLog",
]
