"""In-process task service for tests and local runs.

Tasks are queued per (domain, task list). Long-polls block for up to
`poll_timeout` seconds and then return `None`, like a server-side poll timeout.
"""

from __future__ import annotations

import threading
from collections import Counter, defaultdict, deque
from typing import Any

from cadence_worker.executables import TaskListKey
from cadence_worker.task_service import ActivityTask, DecisionTask


class InMemoryTaskService:
    def __init__(self, *, poll_timeout: float = 0.05) -> None:
        self.poll_timeout = poll_timeout
        self._cond = threading.Condition()
        self._workflow_tasks: defaultdict[TaskListKey, deque[DecisionTask]] = defaultdict(deque)
        self._activity_tasks: defaultdict[TaskListKey, deque[ActivityTask]] = defaultdict(deque)

        self.completed: dict[bytes | str, Any] = {}
        self.failed: dict[bytes | str, Exception] = {}
        self.poll_counts: Counter[tuple[str, str, str]] = Counter()

    def schedule_workflow_task(self, domain: str, task_list: str, task: DecisionTask) -> None:
        with self._cond:
            self._workflow_tasks[TaskListKey(domain, task_list)].append(task)
            self._cond.notify_all()

    def schedule_activity_task(self, domain: str, task_list: str, task: ActivityTask) -> None:
        with self._cond:
            self._activity_tasks[TaskListKey(domain, task_list)].append(task)
            self._cond.notify_all()

    def poll_workflow_task(self, domain: str, task_list: str) -> DecisionTask | None:
        return self._poll(self._workflow_tasks, "workflow", TaskListKey(domain, task_list))

    def poll_activity_task(self, domain: str, task_list: str) -> ActivityTask | None:
        return self._poll(self._activity_tasks, "activity", TaskListKey(domain, task_list))

    def _poll(self, queues: defaultdict[TaskListKey, deque[Any]], kind: str, key: TaskListKey) -> Any:
        with self._cond:
            self.poll_counts[(kind, key.domain, key.task_list)] += 1
            if not self._cond.wait_for(lambda: bool(queues[key]), timeout=self.poll_timeout):
                return None
            return queues[key].popleft()

    def complete(self, task_token: bytes | str, result: Any) -> None:
        with self._cond:
            self.completed[task_token] = result
            self._cond.notify_all()

    def fail(self, task_token: bytes | str, error: Exception) -> None:
        with self._cond:
            self.failed[task_token] = error
            self._cond.notify_all()

    def wait_for_reports(self, count: int, timeout: float = 5.0) -> bool:
        """Block until at least `count` completions or failures were reported."""

        with self._cond:
            return self._cond.wait_for(
                lambda: len(self.completed) + len(self.failed) >= count, timeout=timeout
            )
