"""Raw history-event schema as delivered by the task service.

The wire shape is protocol-defined: a numeric `eventId`, an `eventType`
discriminator and one `<type>EventAttributes` sub-message per event type. Field
names are snake_case here and camelCase on the wire; both are accepted when
validating.

Only `cadence_worker.history.event` should depend on this module.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake


class _Message(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


class EventType(str, Enum):
    WORKFLOW_EXECUTION_STARTED = "WorkflowExecutionStarted"
    WORKFLOW_EXECUTION_COMPLETED = "WorkflowExecutionCompleted"
    WORKFLOW_EXECUTION_FAILED = "WorkflowExecutionFailed"
    WORKFLOW_EXECUTION_TIMED_OUT = "WorkflowExecutionTimedOut"
    DECISION_TASK_SCHEDULED = "DecisionTaskScheduled"
    DECISION_TASK_STARTED = "DecisionTaskStarted"
    DECISION_TASK_COMPLETED = "DecisionTaskCompleted"
    DECISION_TASK_TIMED_OUT = "DecisionTaskTimedOut"
    DECISION_TASK_FAILED = "DecisionTaskFailed"
    ACTIVITY_TASK_SCHEDULED = "ActivityTaskScheduled"
    ACTIVITY_TASK_STARTED = "ActivityTaskStarted"
    ACTIVITY_TASK_COMPLETED = "ActivityTaskCompleted"
    ACTIVITY_TASK_FAILED = "ActivityTaskFailed"
    ACTIVITY_TASK_TIMED_OUT = "ActivityTaskTimedOut"
    ACTIVITY_TASK_CANCEL_REQUESTED = "ActivityTaskCancelRequested"
    REQUEST_CANCEL_ACTIVITY_TASK_FAILED = "RequestCancelActivityTaskFailed"
    ACTIVITY_TASK_CANCELED = "ActivityTaskCanceled"
    TIMER_STARTED = "TimerStarted"
    TIMER_FIRED = "TimerFired"
    CANCEL_TIMER_FAILED = "CancelTimerFailed"
    TIMER_CANCELED = "TimerCanceled"
    WORKFLOW_EXECUTION_CANCEL_REQUESTED = "WorkflowExecutionCancelRequested"
    WORKFLOW_EXECUTION_CANCELED = "WorkflowExecutionCanceled"
    REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED = (
        "RequestCancelExternalWorkflowExecutionInitiated"
    )
    REQUEST_CANCEL_EXTERNAL_WORKFLOW_EXECUTION_FAILED = (
        "RequestCancelExternalWorkflowExecutionFailed"
    )
    EXTERNAL_WORKFLOW_EXECUTION_CANCEL_REQUESTED = "ExternalWorkflowExecutionCancelRequested"
    MARKER_RECORDED = "MarkerRecorded"
    WORKFLOW_EXECUTION_SIGNALED = "WorkflowExecutionSignaled"
    WORKFLOW_EXECUTION_TERMINATED = "WorkflowExecutionTerminated"
    WORKFLOW_EXECUTION_CONTINUED_AS_NEW = "WorkflowExecutionContinuedAsNew"
    START_CHILD_WORKFLOW_EXECUTION_INITIATED = "StartChildWorkflowExecutionInitiated"
    START_CHILD_WORKFLOW_EXECUTION_FAILED = "StartChildWorkflowExecutionFailed"
    CHILD_WORKFLOW_EXECUTION_STARTED = "ChildWorkflowExecutionStarted"
    CHILD_WORKFLOW_EXECUTION_COMPLETED = "ChildWorkflowExecutionCompleted"
    CHILD_WORKFLOW_EXECUTION_FAILED = "ChildWorkflowExecutionFailed"
    CHILD_WORKFLOW_EXECUTION_CANCELED = "ChildWorkflowExecutionCanceled"
    CHILD_WORKFLOW_EXECUTION_TIMED_OUT = "ChildWorkflowExecutionTimedOut"
    CHILD_WORKFLOW_EXECUTION_TERMINATED = "ChildWorkflowExecutionTerminated"
    SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_INITIATED = "SignalExternalWorkflowExecutionInitiated"
    SIGNAL_EXTERNAL_WORKFLOW_EXECUTION_FAILED = "SignalExternalWorkflowExecutionFailed"
    EXTERNAL_WORKFLOW_EXECUTION_SIGNALED = "ExternalWorkflowExecutionSignaled"
    UPSERT_WORKFLOW_SEARCH_ATTRIBUTES = "UpsertWorkflowSearchAttributes"


# Shared sub-messages


class WorkflowType(_Message):
    name: str | None = None


class ActivityType(_Message):
    name: str | None = None


class TaskList(_Message):
    name: str | None = None
    kind: str | None = None


class WorkflowExecution(_Message):
    workflow_id: str | None = None
    run_id: str | None = None


# Workflow execution lifecycle


class WorkflowExecutionStartedEventAttributes(_Message):
    workflow_type: WorkflowType | None = None
    task_list: TaskList | None = None
    input: Any = None
    execution_start_to_close_timeout_seconds: int | None = None
    task_start_to_close_timeout_seconds: int | None = None
    continued_execution_run_id: str | None = None
    identity: str | None = None
    attempt: int | None = None
    header: dict[str, Any] | None = None


class WorkflowExecutionCompletedEventAttributes(_Message):
    result: Any = None
    decision_task_completed_event_id: int | None = None


class WorkflowExecutionFailedEventAttributes(_Message):
    reason: str | None = None
    details: Any = None
    decision_task_completed_event_id: int | None = None


class WorkflowExecutionTimedOutEventAttributes(_Message):
    timeout_type: str | None = None


class WorkflowExecutionCancelRequestedEventAttributes(_Message):
    cause: str | None = None
    external_initiated_event_id: int | None = None
    external_workflow_execution: WorkflowExecution | None = None
    identity: str | None = None


class WorkflowExecutionCanceledEventAttributes(_Message):
    decision_task_completed_event_id: int | None = None
    details: Any = None


class WorkflowExecutionSignaledEventAttributes(_Message):
    signal_name: str | None = None
    input: Any = None
    identity: str | None = None


class WorkflowExecutionTerminatedEventAttributes(_Message):
    reason: str | None = None
    details: Any = None
    identity: str | None = None


class WorkflowExecutionContinuedAsNewEventAttributes(_Message):
    new_execution_run_id: str | None = None
    workflow_type: WorkflowType | None = None
    task_list: TaskList | None = None
    input: Any = None
    execution_start_to_close_timeout_seconds: int | None = None
    task_start_to_close_timeout_seconds: int | None = None
    decision_task_completed_event_id: int | None = None


class UpsertWorkflowSearchAttributesEventAttributes(_Message):
    decision_task_completed_event_id: int | None = None
    search_attributes: dict[str, Any] | None = None


# Decision tasks


class DecisionTaskScheduledEventAttributes(_Message):
    task_list: TaskList | None = None
    start_to_close_timeout_seconds: int | None = None
    attempt: int | None = None


class DecisionTaskStartedEventAttributes(_Message):
    scheduled_event_id: int | None = None
    identity: str | None = None
    request_id: str | None = None


class DecisionTaskCompletedEventAttributes(_Message):
    execution_context: Any = None
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    identity: str | None = None


class DecisionTaskTimedOutEventAttributes(_Message):
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    timeout_type: str | None = None


class DecisionTaskFailedEventAttributes(_Message):
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    cause: str | None = None
    details: Any = None
    identity: str | None = None


# Activity tasks


class ActivityTaskScheduledEventAttributes(_Message):
    activity_id: str | int | None = None
    activity_type: ActivityType | None = None
    domain: str | None = None
    task_list: TaskList | None = None
    input: Any = None
    schedule_to_close_timeout_seconds: int | None = None
    schedule_to_start_timeout_seconds: int | None = None
    start_to_close_timeout_seconds: int | None = None
    heartbeat_timeout_seconds: int | None = None
    decision_task_completed_event_id: int | None = None
    header: dict[str, Any] | None = None


class ActivityTaskStartedEventAttributes(_Message):
    scheduled_event_id: int | None = None
    identity: str | None = None
    request_id: str | None = None
    attempt: int | None = None


class ActivityTaskCompletedEventAttributes(_Message):
    result: Any = None
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    identity: str | None = None


class ActivityTaskFailedEventAttributes(_Message):
    reason: str | None = None
    details: Any = None
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    identity: str | None = None


class ActivityTaskTimedOutEventAttributes(_Message):
    details: Any = None
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    timeout_type: str | None = None


class ActivityTaskCancelRequestedEventAttributes(_Message):
    activity_id: str | int | None = None
    decision_task_completed_event_id: int | None = None


class RequestCancelActivityTaskFailedEventAttributes(_Message):
    activity_id: str | int | None = None
    cause: str | None = None
    decision_task_completed_event_id: int | None = None


class ActivityTaskCanceledEventAttributes(_Message):
    details: Any = None
    latest_cancel_requested_event_id: int | None = None
    scheduled_event_id: int | None = None
    started_event_id: int | None = None
    identity: str | None = None


# Timers


class TimerStartedEventAttributes(_Message):
    timer_id: str | None = None
    start_to_fire_timeout_seconds: int | None = None
    decision_task_completed_event_id: int | None = None


class TimerFiredEventAttributes(_Message):
    timer_id: str | None = None
    started_event_id: int | None = None


class CancelTimerFailedEventAttributes(_Message):
    timer_id: str | None = None
    cause: str | None = None
    decision_task_completed_event_id: int | None = None
    identity: str | None = None


class TimerCanceledEventAttributes(_Message):
    timer_id: str | None = None
    started_event_id: int | None = None
    decision_task_completed_event_id: int | None = None
    identity: str | None = None


# Markers


class MarkerRecordedEventAttributes(_Message):
    marker_name: str | None = None
    details: Any = None
    decision_task_completed_event_id: int | None = None
    header: dict[str, Any] | None = None


# External workflows


class RequestCancelExternalWorkflowExecutionInitiatedEventAttributes(_Message):
    decision_task_completed_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    control: Any = None
    child_workflow_only: bool | None = None


class RequestCancelExternalWorkflowExecutionFailedEventAttributes(_Message):
    cause: str | None = None
    decision_task_completed_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    initiated_event_id: int | None = None
    control: Any = None


class ExternalWorkflowExecutionCancelRequestedEventAttributes(_Message):
    initiated_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None


class SignalExternalWorkflowExecutionInitiatedEventAttributes(_Message):
    decision_task_completed_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    signal_name: str | None = None
    input: Any = None
    control: Any = None
    child_workflow_only: bool | None = None


class SignalExternalWorkflowExecutionFailedEventAttributes(_Message):
    cause: str | None = None
    decision_task_completed_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    initiated_event_id: int | None = None
    control: Any = None


class ExternalWorkflowExecutionSignaledEventAttributes(_Message):
    initiated_event_id: int | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    control: Any = None


# Child workflows


class StartChildWorkflowExecutionInitiatedEventAttributes(_Message):
    domain: str | None = None
    workflow_id: str | None = None
    workflow_type: WorkflowType | None = None
    task_list: TaskList | None = None
    input: Any = None
    execution_start_to_close_timeout_seconds: int | None = None
    task_start_to_close_timeout_seconds: int | None = None
    control: Any = None
    decision_task_completed_event_id: int | None = None
    header: dict[str, Any] | None = None


class StartChildWorkflowExecutionFailedEventAttributes(_Message):
    domain: str | None = None
    workflow_id: str | None = None
    workflow_type: WorkflowType | None = None
    cause: str | None = None
    control: Any = None
    initiated_event_id: int | None = None
    decision_task_completed_event_id: int | None = None


class ChildWorkflowExecutionStartedEventAttributes(_Message):
    domain: str | None = None
    initiated_event_id: int | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None


class ChildWorkflowExecutionCompletedEventAttributes(_Message):
    result: Any = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None
    initiated_event_id: int | None = None
    started_event_id: int | None = None


class ChildWorkflowExecutionFailedEventAttributes(_Message):
    reason: str | None = None
    details: Any = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None
    initiated_event_id: int | None = None
    started_event_id: int | None = None


class ChildWorkflowExecutionCanceledEventAttributes(_Message):
    details: Any = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None
    initiated_event_id: int | None = None
    started_event_id: int | None = None


class ChildWorkflowExecutionTimedOutEventAttributes(_Message):
    timeout_type: str | None = None
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None
    initiated_event_id: int | None = None
    started_event_id: int | None = None


class ChildWorkflowExecutionTerminatedEventAttributes(_Message):
    domain: str | None = None
    workflow_execution: WorkflowExecution | None = None
    workflow_type: WorkflowType | None = None
    initiated_event_id: int | None = None
    started_event_id: int | None = None


class RawHistoryEvent(_Message):
    """One entry of a workflow's append-only event log."""

    event_id: int
    timestamp: int | None = None  # nanoseconds since the epoch
    event_type: EventType
    version: int | None = None
    task_id: int | None = None

    workflow_execution_started_event_attributes: WorkflowExecutionStartedEventAttributes | None = None
    workflow_execution_completed_event_attributes: WorkflowExecutionCompletedEventAttributes | None = None
    workflow_execution_failed_event_attributes: WorkflowExecutionFailedEventAttributes | None = None
    workflow_execution_timed_out_event_attributes: WorkflowExecutionTimedOutEventAttributes | None = None
    decision_task_scheduled_event_attributes: DecisionTaskScheduledEventAttributes | None = None
    decision_task_started_event_attributes: DecisionTaskStartedEventAttributes | None = None
    decision_task_completed_event_attributes: DecisionTaskCompletedEventAttributes | None = None
    decision_task_timed_out_event_attributes: DecisionTaskTimedOutEventAttributes | None = None
    decision_task_failed_event_attributes: DecisionTaskFailedEventAttributes | None = None
    activity_task_scheduled_event_attributes: ActivityTaskScheduledEventAttributes | None = None
    activity_task_started_event_attributes: ActivityTaskStartedEventAttributes | None = None
    activity_task_completed_event_attributes: ActivityTaskCompletedEventAttributes | None = None
    activity_task_failed_event_attributes: ActivityTaskFailedEventAttributes | None = None
    activity_task_timed_out_event_attributes: ActivityTaskTimedOutEventAttributes | None = None
    activity_task_cancel_requested_event_attributes: ActivityTaskCancelRequestedEventAttributes | None = None
    request_cancel_activity_task_failed_event_attributes: RequestCancelActivityTaskFailedEventAttributes | None = None
    activity_task_canceled_event_attributes: ActivityTaskCanceledEventAttributes | None = None
    timer_started_event_attributes: TimerStartedEventAttributes | None = None
    timer_fired_event_attributes: TimerFiredEventAttributes | None = None
    cancel_timer_failed_event_attributes: CancelTimerFailedEventAttributes | None = None
    timer_canceled_event_attributes: TimerCanceledEventAttributes | None = None
    workflow_execution_cancel_requested_event_attributes: WorkflowExecutionCancelRequestedEventAttributes | None = None
    workflow_execution_canceled_event_attributes: WorkflowExecutionCanceledEventAttributes | None = None
    request_cancel_external_workflow_execution_initiated_event_attributes: RequestCancelExternalWorkflowExecutionInitiatedEventAttributes | None = None
    request_cancel_external_workflow_execution_failed_event_attributes: RequestCancelExternalWorkflowExecutionFailedEventAttributes | None = None
    external_workflow_execution_cancel_requested_event_attributes: ExternalWorkflowExecutionCancelRequestedEventAttributes | None = None
    marker_recorded_event_attributes: MarkerRecordedEventAttributes | None = None
    workflow_execution_signaled_event_attributes: WorkflowExecutionSignaledEventAttributes | None = None
    workflow_execution_terminated_event_attributes: WorkflowExecutionTerminatedEventAttributes | None = None
    workflow_execution_continued_as_new_event_attributes: WorkflowExecutionContinuedAsNewEventAttributes | None = None
    start_child_workflow_execution_initiated_event_attributes: StartChildWorkflowExecutionInitiatedEventAttributes | None = None
    start_child_workflow_execution_failed_event_attributes: StartChildWorkflowExecutionFailedEventAttributes | None = None
    child_workflow_execution_started_event_attributes: ChildWorkflowExecutionStartedEventAttributes | None = None
    child_workflow_execution_completed_event_attributes: ChildWorkflowExecutionCompletedEventAttributes | None = None
    child_workflow_execution_failed_event_attributes: ChildWorkflowExecutionFailedEventAttributes | None = None
    child_workflow_execution_canceled_event_attributes: ChildWorkflowExecutionCanceledEventAttributes | None = None
    child_workflow_execution_timed_out_event_attributes: ChildWorkflowExecutionTimedOutEventAttributes | None = None
    child_workflow_execution_terminated_event_attributes: ChildWorkflowExecutionTerminatedEventAttributes | None = None
    signal_external_workflow_execution_initiated_event_attributes: SignalExternalWorkflowExecutionInitiatedEventAttributes | None = None
    signal_external_workflow_execution_failed_event_attributes: SignalExternalWorkflowExecutionFailedEventAttributes | None = None
    external_workflow_execution_signaled_event_attributes: ExternalWorkflowExecutionSignaledEventAttributes | None = None
    upsert_workflow_search_attributes_event_attributes: UpsertWorkflowSearchAttributesEventAttributes | None = None


def attributes_field(event_type: EventType) -> str:
    """Name of the attributes sub-message carried by `event_type` events."""

    return f"{to_snake(event_type.value)}_event_attributes"


ATTRIBUTE_FIELDS: dict[EventType, str] = {
    event_type: attributes_field(event_type) for event_type in EventType
}

_unmapped = sorted(
    event_type.value
    for event_type, field_name in ATTRIBUTE_FIELDS.items()
    if field_name not in RawHistoryEvent.model_fields
)
if _unmapped:
    raise RuntimeError(f"Event types without an attributes field: {', '.join(_unmapped)}")
