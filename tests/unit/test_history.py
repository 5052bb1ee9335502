"""Unit tests for decision windows over a workflow history."""

from __future__ import annotations

from typing import Any

from cadence_worker.history import EventType, History, HistoryEvent

SERVER_START_NANOS = 1_700_000_000_000_000_000


def _history_events() -> list[dict[str, Any]]:
    return [
        {"eventId": 1, "eventType": "WorkflowExecutionStarted"},
        {"eventId": 2, "eventType": "DecisionTaskScheduled"},
        {
            "eventId": 3,
            "eventType": "DecisionTaskStarted",
            "timestamp": SERVER_START_NANOS,
            "decisionTaskStartedEventAttributes": {"scheduledEventId": 2},
        },
        {
            "eventId": 4,
            "eventType": "DecisionTaskCompleted",
            "decisionTaskCompletedEventAttributes": {"scheduledEventId": 2, "startedEventId": 3},
        },
        {
            "eventId": 5,
            "eventType": "MarkerRecorded",
            "markerRecordedEventAttributes": {"markerName": "SIDE_EFFECT"},
        },
        {
            "eventId": 6,
            "eventType": "TimerStarted",
            "timerStartedEventAttributes": {"timerId": "t-1"},
        },
        {
            "eventId": 7,
            "eventType": "TimerFired",
            "timerFiredEventAttributes": {"timerId": "t-1", "startedEventId": 6},
        },
        {"eventId": 8, "eventType": "DecisionTaskScheduled"},
        {"eventId": 9, "eventType": "DecisionTaskStarted"},
    ]


def test_history_wraps_every_event() -> None:
    history = History(_history_events())

    assert len(history) == 9
    assert all(isinstance(e, HistoryEvent) for e in history)
    assert history.find_event_by_id(7).decision_id == 6
    assert history.find_event_by_id(100) is None


def test_last_completed_decision_task() -> None:
    history = History(_history_events())

    completed = history.last_completed_decision_task

    assert completed is not None
    assert completed.id == 4


def test_windows_split_on_decision_task_completed() -> None:
    windows = list(History(_history_events()).windows())

    assert [[e.id for e in w.events] for w in windows] == [[1, 2, 3, 4], [5, 6, 7, 8, 9]]
    assert windows[0].replay is True
    assert windows[1].replay is False
    assert windows[0].last_event_id == 4
    assert [m.id for m in windows[1].markers] == [5]


def test_window_local_time_prefers_server_time() -> None:
    first, second = History(_history_events()).windows()

    assert first.local_time is not None
    assert first.local_time.timestamp() == SERVER_START_NANOS / 1_000_000_000
    # No server time on event 9: falls back to wrap time.
    started = [e for e in second.events if e.type == EventType.DECISION_TASK_STARTED][0]
    assert second.local_time == started.timestamp


def test_next_window_is_exhausted_after_last_event() -> None:
    history = History(_history_events())

    assert history.next_window() is not None
    assert history.next_window() is not None
    assert history.next_window() is None


def test_empty_history_has_no_windows() -> None:
    history = History([])

    assert list(history.windows()) == []
    assert history.last_completed_decision_task is None
