"""Per-task metadata handed to executables alongside their input."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cadence_worker.task_service import ActivityTask, DecisionTask


@dataclass(frozen=True, slots=True)
class ActivityMetadata:
    domain: str | None
    id: str
    name: str
    task_token: bytes | str
    attempt: int
    workflow_run_id: str | None
    workflow_id: str | None
    workflow_name: str | None
    headers: dict[str, Any] = field(default_factory=dict)
    timeouts: dict[str, int] = field(default_factory=dict)

    is_activity = True
    is_decision = False
    is_workflow = False

    @classmethod
    def from_task(cls, task: ActivityTask) -> ActivityMetadata:
        return cls(
            domain=task.workflow_domain,
            id=task.activity_id,
            name=task.activity_type,
            task_token=task.task_token,
            attempt=task.attempt,
            workflow_run_id=task.workflow_run_id,
            workflow_id=task.workflow_id,
            workflow_name=task.workflow_type,
            headers=dict(task.headers),
            timeouts=dict(task.timeouts),
        )

    def to_dict(self) -> dict[str, object]:
        """Loggable summary; excludes the task token, headers and timeouts."""

        return {
            "attempt": self.attempt,
            "activity_id": self.id,
            "activity_name": self.name,
            "domain": self.domain,
            "workflow_id": self.workflow_id,
            "workflow_name": self.workflow_name,
            "workflow_run_id": self.workflow_run_id,
        }


@dataclass(frozen=True, slots=True)
class DecisionMetadata:
    domain: str
    id: int | None
    task_token: bytes | str
    attempt: int
    workflow_run_id: str
    workflow_id: str
    workflow_name: str

    is_activity = False
    is_decision = True
    is_workflow = False

    @classmethod
    def from_task(cls, task: DecisionTask, *, domain: str) -> DecisionMetadata:
        return cls(
            domain=domain,
            id=task.started_event_id,
            task_token=task.task_token,
            attempt=task.attempt,
            workflow_run_id=task.run_id,
            workflow_id=task.workflow_id,
            workflow_name=task.workflow_type,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "attempt": self.attempt,
            "decision_id": self.id,
            "domain": self.domain,
            "workflow_id": self.workflow_id,
            "workflow_name": self.workflow_name,
            "workflow_run_id": self.workflow_run_id,
        }
