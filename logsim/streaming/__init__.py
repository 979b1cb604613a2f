"""Live delivery: distributor, WebSocket broadcaster, Kafka/Redis publishers."""

from logsim.streaming.base import BaseSink
from logsim.streaming.distributor import Distributor, SinkStats

__all__ = ["BaseSink", "Distributor", "SinkStats"]
