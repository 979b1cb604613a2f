"""Sink contract for the asynchronous delivery channels."""

from __future__ import annotations

import abc
from typing import Any


class BaseSink(abc.ABC):
    """A live destination served by its own background worker.

    ``send`` returns ``True`` when the message was accepted.  ``False`` or
    an exception both count as a failed delivery for that message only.
    """

    name: str = "sink"

    async def start(self) -> None:
        """Open connections; failure must leave the sink disabled, not raise."""

    @abc.abstractmethod
    async def send(self, kind: str, payload: dict[str, Any]) -> bool:
        ...

    async def close(self) -> None:
        """Release connections."""

    def status(self) -> dict[str, Any]:
        return {"name": self.name}
