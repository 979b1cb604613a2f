"""Durable event history: SQLite store + retention sweeper."""

from logsim.storage.history import Aggregate, HistoryStore
from logsim.storage.retention import RetentionSweeper

__all__ = ["Aggregate", "HistoryStore", "RetentionSweeper"]
