"""Poller for activity tasks."""

from __future__ import annotations

from typing import Any

from cadence_worker.executables import Activity
from cadence_worker.metadata import ActivityMetadata
from cadence_worker.polling.base import Poller
from cadence_worker.task_service import ActivityTask


class ActivityPoller(Poller[ActivityTask]):
    kind = "activity"

    def _concurrency_limit(self) -> int:
        return self.settings.activity_thread_pool_size

    def _poll_for_task(self) -> ActivityTask | None:
        return self.task_service.poll_activity_task(self.domain, self.task_list)

    def _task_token(self, task: ActivityTask) -> bytes | str:
        return task.task_token

    def _executable_name(self, task: ActivityTask) -> str:
        return task.activity_type

    def _metadata(self, task: ActivityTask) -> ActivityMetadata:
        return ActivityMetadata.from_task(task)

    def _execute(self, executable: type[Activity], task: ActivityTask, metadata: Any) -> Any:
        return executable().execute(task.input, metadata)
