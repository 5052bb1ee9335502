"""A decision task's event history, split into decision windows.

A window is the run of events the workflow saw before making one set of
decisions: it ends with `DecisionTaskCompleted` for decisions already recorded
by the server (replayed), or with the trailing events of the decision task
currently being processed (live).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cadence_worker.history.event import HistoryEvent
from cadence_worker.history.raw import EventType, RawHistoryEvent


@dataclass(slots=True)
class HistoryWindow:
    events: list[HistoryEvent] = field(default_factory=list)
    replay: bool = False
    local_time: datetime | None = None

    def add(self, event: HistoryEvent) -> None:
        self.events.append(event)
        if event.type == EventType.DECISION_TASK_STARTED:
            # Server time keeps replays deterministic; wrap time is the fallback.
            self.local_time = event.event_time or event.timestamp
        elif event.type == EventType.DECISION_TASK_COMPLETED:
            self.replay = True

    @property
    def last_event_id(self) -> int | None:
        return self.events[-1].id if self.events else None

    @property
    def markers(self) -> list[HistoryEvent]:
        return [e for e in self.events if e.type == EventType.MARKER_RECORDED]


class History:
    """Ordered, wrapped events of one decision task."""

    def __init__(
        self, events: Iterable[HistoryEvent | RawHistoryEvent | Mapping[str, Any]]
    ) -> None:
        self._events: list[HistoryEvent] = [
            e if isinstance(e, HistoryEvent) else HistoryEvent.from_raw(e) for e in events
        ]
        self._by_id = {e.id: e for e in self._events}
        self._cursor = 0

    @property
    def events(self) -> list[HistoryEvent]:
        return list(self._events)

    def __iter__(self) -> Iterator[HistoryEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def find_event_by_id(self, event_id: int) -> HistoryEvent | None:
        return self._by_id.get(event_id)

    @property
    def last_completed_decision_task(self) -> HistoryEvent | None:
        for event in reversed(self._events):
            if event.type == EventType.DECISION_TASK_COMPLETED:
                return event
        return None

    def next_window(self) -> HistoryWindow | None:
        if self._cursor >= len(self._events):
            return None

        window = HistoryWindow()
        while self._cursor < len(self._events):
            event = self._events[self._cursor]
            self._cursor += 1
            window.add(event)
            if event.type == EventType.DECISION_TASK_COMPLETED:
                break
        return window

    def windows(self) -> Iterator[HistoryWindow]:
        self._cursor = 0
        while (window := self.next_window()) is not None:
            yield window
