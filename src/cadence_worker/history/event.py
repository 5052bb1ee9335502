"""Normalized view over one raw history event.

`decision_id` and `target_attributes` are derived from per-event-type rule
tables. Every `EventType` must appear in both tables; a protocol event type
added without a rule fails at import time rather than silently falling back to
a default.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel

from cadence_worker.history.raw import ATTRIBUTE_FIELDS, EventType, RawHistoryEvent

# Signals relate to the workflow as a whole, which is identified by its first event.
WORKFLOW_EXECUTION_DECISION_ID = 1


@dataclass(frozen=True, slots=True)
class HistoryEvent:
    """One history event, as seen by the replay engine.

    `timestamp` is the time the event was wrapped, not the time the server
    recorded it; the server time is kept separately in `event_time`.
    """

    id: int
    type: EventType
    attributes: BaseModel
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    event_time: datetime | None = None

    @classmethod
    def from_raw(cls, raw_event: RawHistoryEvent | Mapping[str, Any]) -> HistoryEvent:
        if not isinstance(raw_event, RawHistoryEvent):
            raw_event = RawHistoryEvent.model_validate(raw_event)

        attributes = getattr(raw_event, ATTRIBUTE_FIELDS[raw_event.event_type])
        if attributes is None:
            annotation = RawHistoryEvent.model_fields[ATTRIBUTE_FIELDS[raw_event.event_type]]
            attributes = _attributes_model(annotation.annotation)()

        return cls(
            id=raw_event.event_id,
            type=raw_event.event_type,
            attributes=attributes,
            event_time=_from_nanos(raw_event.timestamp),
        )

    @property
    def decision_id(self) -> int:
        """Id of the event whose decision logically produced this event."""

        return _DECISION_ID_RULES[self.type](self)

    @property
    def target_attributes(self) -> dict[str, Any]:
        """Attributes used to match a scheduled action to its outcome."""

        return _TARGET_ATTRIBUTE_RULES[self.type](self.attributes)


def _from_nanos(value: int | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1_000_000_000, tz=UTC)


def _attributes_model(annotation: Any) -> type[BaseModel]:
    # Attribute fields are annotated `<Model> | None`.
    for candidate in getattr(annotation, "__args__", (annotation,)):
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    raise TypeError(f"Not an attributes annotation: {annotation!r}")


# decision_id rules


def _own_id(event: HistoryEvent) -> int:
    return event.id


def _workflow_id(_event: HistoryEvent) -> int:
    return WORKFLOW_EXECUTION_DECISION_ID


def _attribute_id(name: str) -> Callable[[HistoryEvent], int]:
    def rule(event: HistoryEvent) -> int:
        value = getattr(event.attributes, name)
        return event.id if value is None else value

    return rule


_scheduled = _attribute_id("scheduled_event_id")
_started = _attribute_id("started_event_id")
_initiated = _attribute_id("initiated_event_id")

_DECISION_ID_RULES: dict[EventType, Callable[[HistoryEvent], int]] = {
    EventType.WORKFLOW_EXECUTION_STARTED: _own_id,
    EventType.WORKFLOW_EXECUTION_COMPLETED: _own_id,
    EventType.WORKFLOW_EXECUTION_FAILED: _own_id,
    EventType.WORKFLOW_EXECUTION_TIMED_OUT: _own_id,
    EventType.DECISION_TASK_SCHEDULED: _own_id,
    EventType.DECISION_TASK_STARTED: _scheduled,
    EventType.DECISION_TASK_COMPLETED: _scheduled,
    EventType.DECISION_TASK_TIMED_OUT: _scheduled,
    EventType.DECISION_TASK_FAILED: _scheduled,
    EventType.ACTIVITY_TASK_SCHEDULED: _own_id,
    EventType.ACTIVITY_TASK_STARTED: _scheduled,
    EventType.ACTIVITY_TASK_COMPLETED: _scheduled,
    EventType.ACTIVITY_TASK_FAILED: _scheduled,
    EventType.ACTIVITY_TASK_TIMED_OUT: _scheduled,
    EventType.ACTIVITY_TASK_CANCEL_REQUESTED: _own_id,
    EventType.REQUEST_CANCEL_ACTIVITY_TASK_FAILED: _own_id,
    EventType.ACTIVITY_TASK_CANCELED: _scheduled,
    EventType.TIMER_STARTED: _own_id,
    EventType.TIMER_FIRED: _started,
    EventType.CANCEL_TIMER_FAILED: _own_id,
    EventType.TIMER_CANCELED: _own_id,
    EventType.WORKFLOW_EXECUTION_CANCEL_REQUESTED: _own_id,
    EventType.WORKFLOW_EXECUTION_CANCELED: _own_id,
    EventType.REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED: _own_id,
    EventType.REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_FAILED: _initiated,
    EventType.EXTERNAL_WORKFLOW_EXECUTION_CANCEL_REQUESTED: _initiated,
    EventType.MARKER_RECORDED: _own_id,
    EventType.WORKFLOW_EXECUTION_SIGNALED: _workflow_id,
    EventType.WORKFLOW_EXECUTION_TERMINATED: _own_id,
    EventType.WORKFLOW_EXECUTION_CONTINUED_AS_NEW: _own_id,
    EventType.START_CHILD_WORKFLOW_EXECUTION_INITIATED: _own_id,
    EventType.START_CHILD_WORKFLOW_EXECUTION_FAILED: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_STARTED: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_COMPLETED: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_FAILED: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_CANCELED: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_TIMED_OUT: _initiated,
    EventType.CHILD_WORKFLOW_EXECUTION_TERMINATED: _initiated,
    EventType.SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED: _own_id,
    EventType.SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_FAILED: _initiated,
    EventType.EXTERNAL_WORKFLOW_EXECUTION_SIGNALED: _initiated,
    EventType.UPSERT_WORKFLOW_SEARCH_ATTRIBUTES: _own_id,
}


# target_attributes rules


def _no_target(_attributes: Any) -> dict[str, Any]:
    return {}


def _type_name(value: Any) -> str | None:
    return None if value is None else value.name


def _activity_id(value: Any) -> Any:
    # Numeric wire ids (always strings) become ints.
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return value


def _workflow_execution(value: Any) -> dict[str, Any]:
    if value is None:
        return {"workflow_id": None, "run_id": None}
    return {"workflow_id": value.workflow_id, "run_id": value.run_id}


_TARGET_ATTRIBUTE_RULES: dict[EventType, Callable[[Any], dict[str, Any]]] = {
    EventType.WORKFLOW_EXECUTION_STARTED: _no_target,
    EventType.WORKFLOW_EXECUTION_COMPLETED: lambda a: {"result": a.result},
    EventType.WORKFLOW_EXECUTION_FAILED: lambda a: {"reason": a.reason, "details": a.details},
    EventType.WORKFLOW_EXECUTION_TIMED_OUT: _no_target,
    EventType.DECISION_TASK_SCHEDULED: _no_target,
    EventType.DECISION_TASK_STARTED: _no_target,
    EventType.DECISION_TASK_COMPLETED: _no_target,
    EventType.DECISION_TASK_TIMED_OUT: _no_target,
    EventType.DECISION_TASK_FAILED: _no_target,
    EventType.ACTIVITY_TASK_SCHEDULED: lambda a: {
        "activity_id": _activity_id(a.activity_id),
        "activity_type": _type_name(a.activity_type),
        "input": a.input,
    },
    EventType.ACTIVITY_TASK_STARTED: _no_target,
    EventType.ACTIVITY_TASK_COMPLETED: _no_target,
    EventType.ACTIVITY_TASK_FAILED: _no_target,
    EventType.ACTIVITY_TASK_TIMED_OUT: _no_target,
    EventType.ACTIVITY_TASK_CANCEL_REQUESTED: lambda a: {
        "activity_id": _activity_id(a.activity_id)
    },
    EventType.REQUEST_CANCEL_ACTIVITY_TASK_FAILED: lambda a: {
        "activity_id": _activity_id(a.activity_id)
    },
    EventType.ACTIVITY_TASK_CANCELED: _no_target,
    EventType.TIMER_STARTED: lambda a: {
        "timer_id": a.timer_id,
        "timeout": a.start_to_fire_timeout_seconds,
    },
    EventType.TIMER_FIRED: _no_target,
    EventType.CANCEL_TIMER_FAILED: lambda a: {"timer_id": a.timer_id},
    EventType.TIMER_CANCELED: lambda a: {"timer_id": a.timer_id},
    EventType.WORKFLOW_EXECUTION_CANCEL_REQUESTED: _no_target,
    EventType.WORKFLOW_EXECUTION_CANCELED: lambda a: {"details": a.details},
    EventType.REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED: lambda a: {
        "domain": a.domain,
        **_workflow_execution(a.workflow_execution),
    },
    EventType.REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_FAILED: _no_target,
    EventType.EXTERNAL_WORKFLOW_EXECUTION_CANCEL_REQUESTED: _no_target,
    EventType.MARKER_RECORDED: lambda a: {"name": a.marker_name, "details": a.details},
    EventType.WORKFLOW_EXECUTION_SIGNALED: _no_target,
    EventType.WORKFLOW_EXECUTION_TERMINATED: _no_target,
    EventType.WORKFLOW_EXECUTION_CONTINUED_AS_NEW: lambda a: {
        "workflow_type": _type_name(a.workflow_type),
        "input": a.input,
    },
    EventType.START_CHILD_WORKFLOW_EXECUTION_INITIATED: lambda a: {
        "workflow_id": a.workflow_id,
        "workflow_type": _type_name(a.workflow_type),
        "input": a.input,
    },
    EventType.START_CHILD_WORKFLOW_EXECUTION_FAILED: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_STARTED: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_COMPLETED: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_FAILED: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_CANCELED: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_TIMED_OUT: _no_target,
    EventType.CHILD_WORKFLOW_EXECUTION_TERMINATED: _no_target,
    EventType.SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED: lambda a: {
        "signal_name": a.signal_name,
        "input": a.input,
        **_workflow_execution(a.workflow_execution),
    },
    EventType.SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_FAILED: _no_target,
    EventType.EXTERNAL_WORKFLOW_EXECUTION_SIGNALED: _no_target,
    EventType.UPSERT_WORKFLOW_SEARCH_ATTRIBUTES: lambda a: {
        "search_attributes": a.search_attributes,
    },
}


for _name, _rules in (
    ("decision_id", _DECISION_ID_RULES),
    ("target_attributes", _TARGET_ATTRIBUTE_RULES),
):
    _missing = sorted(event_type.value for event_type in EventType if event_type not in _rules)
    if _missing:
        raise RuntimeError(f"Event types without a {_name} rule: {', '.join(_missing)}")
