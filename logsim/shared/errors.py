"""Exception hierarchy.

Only ``InvariantViolation`` and ``ConfigError`` are fatal.  Sink and storage
failures are always recovered locally by the component that sees them.
"""

from __future__ import annotations


class LogsimError(Exception):
    """Base class for all simulator errors."""


class ConfigError(LogsimError):
    """Configuration is missing a value or holds an invalid one."""


class SinkError(LogsimError):
    """A single sink could not accept a message."""

    def __init__(self, sink: str, message: str) -> None:
        super().__init__(f"{sink}: {message}")
        self.sink = sink


class StorageError(LogsimError):
    """The history store could not complete a read."""


class InvariantViolation(LogsimError):
    """Internal state is inconsistent; the process must stop."""
