"""Workflow history: raw schema, normalized events and decision windows."""

from cadence_worker.history.event import HistoryEvent
from cadence_worker.history.history import History, HistoryWindow
from cadence_worker.history.raw import EventType, RawHistoryEvent

__all__ = [
    "EventType",
    "History",
    "HistoryEvent",
    "HistoryWindow",
    "RawHistoryEvent",
]
