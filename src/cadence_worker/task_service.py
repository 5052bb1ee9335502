"""Boundary to the remote task service.

The transport (gRPC/Thrift stubs, retries, payload encoding) lives behind
`TaskService`. Implementations block on long-polls, return `None` when the
server-side poll timeout elapses without work, and raise
`cadence_worker.errors.TransportError` on network failure.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, Field

from cadence_worker.history.raw import RawHistoryEvent


class ActivityTask(BaseModel):
    task_token: bytes | str
    activity_id: str
    activity_type: str
    input: Any = None
    attempt: int = 0

    workflow_domain: str | None = None
    workflow_id: str | None = None
    workflow_run_id: str | None = None
    workflow_type: str | None = None

    headers: dict[str, Any] = Field(default_factory=dict)
    timeouts: dict[str, int] = Field(default_factory=dict)


class DecisionTask(BaseModel):
    task_token: bytes | str
    workflow_id: str
    run_id: str
    workflow_type: str
    attempt: int = 0
    started_event_id: int | None = None
    previous_started_event_id: int | None = None
    history: list[RawHistoryEvent] = Field(default_factory=list)


class Decision(BaseModel):
    """One command returned by a workflow for the current decision task."""

    type: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class TaskService(Protocol):
    def poll_workflow_task(self, domain: str, task_list: str) -> DecisionTask | None: ...

    def poll_activity_task(self, domain: str, task_list: str) -> ActivityTask | None: ...

    def complete(self, task_token: bytes | str, result: Any) -> None: ...

    def fail(self, task_token: bytes | str, error: Exception) -> None: ...
