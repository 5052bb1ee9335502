"""Poller for decision tasks."""

from __future__ import annotations

from typing import Any

from cadence_worker.executables import Workflow
from cadence_worker.history.history import History
from cadence_worker.metadata import DecisionMetadata
from cadence_worker.polling.base import Poller
from cadence_worker.task_service import Decision, DecisionTask


class WorkflowPoller(Poller[DecisionTask]):
    """Polls decision tasks and reports the decisions returned by the workflow."""

    kind = "workflow"

    def _concurrency_limit(self) -> int:
        return self.settings.workflow_thread_pool_size

    def _poll_for_task(self) -> DecisionTask | None:
        return self.task_service.poll_workflow_task(self.domain, self.task_list)

    def _task_token(self, task: DecisionTask) -> bytes | str:
        return task.task_token

    def _executable_name(self, task: DecisionTask) -> str:
        return task.workflow_type

    def _metadata(self, task: DecisionTask) -> DecisionMetadata:
        return DecisionMetadata.from_task(task, domain=self.domain)

    def _execute(
        self, executable: type[Workflow], task: DecisionTask, metadata: Any
    ) -> list[Decision]:
        history = History(task.history)
        decisions = executable().execute(history, metadata)
        return list(decisions or [])
