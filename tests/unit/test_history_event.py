"""Unit tests for the normalized history event."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from cadence_worker.history import event as event_module
from cadence_worker.history.event import HistoryEvent
from cadence_worker.history.raw import (
    ATTRIBUTE_FIELDS,
    EventType,
    RawHistoryEvent,
    TimerCanceledEventAttributes,
)

RawFactory = Callable[..., RawHistoryEvent]


def test_from_raw_sets_id_type_and_attributes(make_raw_event: RawFactory) -> None:
    raw = make_raw_event(
        "WorkflowExecutionStarted",
        event_id=1,
        workflow_type={"name": "TestWorkflow"},
        input=["foo"],
    )

    event = HistoryEvent.from_raw(raw)

    assert event.id == raw.event_id
    assert event.type == "WorkflowExecutionStarted"
    assert event.type is EventType.WORKFLOW_EXECUTION_STARTED
    assert event.attributes == raw.workflow_execution_started_event_attributes


def test_timestamp_is_materialized_at_wrap_time(make_raw_event: RawFactory) -> None:
    before = datetime.now(UTC)
    event = HistoryEvent.from_raw(make_raw_event("WorkflowExecutionStarted"))
    after = datetime.now(UTC)

    assert before <= event.timestamp <= after


def test_event_time_carries_server_timestamp() -> None:
    raw = RawHistoryEvent.model_validate(
        {"eventId": 5, "eventType": "DecisionTaskScheduled", "timestamp": 1_700_000_000_000_000_000}
    )

    event = HistoryEvent.from_raw(raw)

    assert event.event_time == datetime.fromtimestamp(1_700_000_000, tz=UTC)


def test_from_raw_accepts_wire_mapping() -> None:
    event = HistoryEvent.from_raw(
        {
            "eventId": 42,
            "eventType": "TimerFired",
            "timerFiredEventAttributes": {"timerId": "t-1", "startedEventId": 7},
        }
    )

    assert event.id == 42
    assert event.attributes.timer_id == "t-1"


def test_missing_attributes_become_empty_model() -> None:
    event = HistoryEvent.from_raw({"eventId": 3, "eventType": "TimerCanceled"})

    assert isinstance(event.attributes, TimerCanceledEventAttributes)
    assert event.attributes.timer_id is None


def test_events_are_immutable(make_raw_event: RawFactory) -> None:
    event = HistoryEvent.from_raw(make_raw_event("TimerStarted", event_id=4))

    with pytest.raises(AttributeError):
        event.id = 5  # type: ignore[misc]


class TestDecisionId:
    def test_timer_fired_resolves_to_started_event(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("TimerFired", event_id=42, timer_id="t-1", started_event_id=7)

        assert HistoryEvent.from_raw(raw).decision_id == 7

    def test_timer_canceled_resolves_to_own_id(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("TimerCanceled", event_id=42, timer_id="t-1", started_event_id=7)

        assert HistoryEvent.from_raw(raw).decision_id == 42

    def test_activity_completion_resolves_to_scheduled_event(
        self, make_raw_event: RawFactory
    ) -> None:
        raw = make_raw_event(
            "ActivityTaskCompleted", event_id=12, scheduled_event_id=9, started_event_id=10
        )

        assert HistoryEvent.from_raw(raw).decision_id == 9

    def test_child_workflow_result_resolves_to_initiated_event(
        self, make_raw_event: RawFactory
    ) -> None:
        raw = make_raw_event("ChildWorkflowExecutionCompleted", event_id=20, initiated_event_id=15)

        assert HistoryEvent.from_raw(raw).decision_id == 15

    def test_signal_resolves_to_workflow_start(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("WorkflowExecutionSignaled", event_id=30, signal_name="go")

        assert HistoryEvent.from_raw(raw).decision_id == 1

    def test_scheduling_event_resolves_to_own_id(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("ActivityTaskScheduled", event_id=8, activity_id="a-1")

        assert HistoryEvent.from_raw(raw).decision_id == 8


class TestTargetAttributes:
    def test_activity_task_scheduled(self, make_raw_event: RawFactory) -> None:
        payload = ["foo", "bar", {"foo": "bar"}]
        raw = make_raw_event(
            "ActivityTaskScheduled",
            event_id=42,
            activity_id=42,
            activity_type={"name": "TestActivity"},
            input=payload,
        )

        assert HistoryEvent.from_raw(raw).target_attributes == {
            "activity_id": 42,
            "activity_type": "TestActivity",
            "input": payload,
        }

    def test_activity_task_scheduled_from_wire_mapping(self) -> None:
        payload = ["foo", "bar", {"foo": "bar"}]
        event = HistoryEvent.from_raw(
            {
                "eventId": 42,
                "eventType": "ActivityTaskScheduled",
                "activityTaskScheduledEventAttributes": {
                    "activityId": "42",
                    "activityType": {"name": "TestActivity"},
                    "input": payload,
                },
            }
        )

        assert event.target_attributes == {
            "activity_id": 42,
            "activity_type": "TestActivity",
            "input": payload,
        }

    def test_non_numeric_activity_id_is_kept(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("ActivityTaskCancelRequested", event_id=9, activity_id="fetch-1")

        assert HistoryEvent.from_raw(raw).target_attributes == {"activity_id": "fetch-1"}

    def test_decision_task_scheduled_is_empty(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("DecisionTaskScheduled", event_id=42)

        assert HistoryEvent.from_raw(raw).target_attributes == {}

    def test_timer_started(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event(
            "TimerStarted", event_id=5, timer_id="t-1", start_to_fire_timeout_seconds=30
        )

        assert HistoryEvent.from_raw(raw).target_attributes == {"timer_id": "t-1", "timeout": 30}

    def test_marker_recorded(self, make_raw_event: RawFactory) -> None:
        raw = make_raw_event("MarkerRecorded", event_id=6, marker_name="SIDE_EFFECT", details=[1])

        assert HistoryEvent.from_raw(raw).target_attributes == {
            "name": "SIDE_EFFECT",
            "details": [1],
        }


@pytest.mark.parametrize("event_type", list(EventType))
def test_every_event_type_has_rules(event_type: EventType) -> None:
    assert event_type in ATTRIBUTE_FIELDS
    assert event_type in event_module._DECISION_ID_RULES
    assert event_type in event_module._TARGET_ATTRIBUTE_RULES

    event = HistoryEvent.from_raw({"eventId": 11, "eventType": event_type.value})
    assert isinstance(event.decision_id, int)
    assert isinstance(event.target_attributes, dict)
