"""StoredRecord — one row of the history store."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from logsim.contracts.enums import LogLevel, RecordKind
from logsim.contracts.events import AccessEvent, LogEvent, level_of, log_event_from_dict


@dataclass(frozen=True, slots=True)
class StoredRecord:
    timestamp: str
    kind: RecordKind
    payload: str  # serialized event JSON
    id: int | None = None

    @classmethod
    def from_event(cls, event: LogEvent | AccessEvent) -> StoredRecord:
        if isinstance(event, AccessEvent):
            kind = RecordKind.ACCESS
        else:
            # raises InvariantViolation for anything outside the LogEvent union
            level_of(event)
            kind = RecordKind.APPLICATION
        return cls(timestamp=event.timestamp, kind=kind, payload=event.to_json())

    @property
    def data(self) -> dict[str, Any]:
        return json.loads(self.payload)

    def event(self) -> LogEvent | AccessEvent:
        """Rebuild the typed event from the payload.

        Raises:
            ValueError: The payload does not describe a valid event.
        """
        if self.kind is RecordKind.ACCESS:
            return AccessEvent.from_dict(self.data)
        return log_event_from_dict(self.data)

    @property
    def level(self) -> LogLevel | None:
        """Level of an application record; access records have none."""
        if self.kind is RecordKind.ACCESS:
            return None
        return level_of(self.event())

    def wire_payload(self) -> dict[str, Any]:
        """Message body shared by every sink."""
        return {"kind": self.kind.value, "timestamp": self.timestamp, "data": self.data}

    def to_dict(self) -> dict[str, Any]:
        """API representation with the payload decoded."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "kind": self.kind.value,
            "data": self.data,
        }
