"""Workflow and activity base classes plus registration options.

Routing (`domain`, `task_list`) may be declared on the class, but it is read
exactly once, when the class is registered, and frozen into an
`ExecutableOptions`. Nothing reads it off the class afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple

from cadence_worker.errors import ConfigurationError

if TYPE_CHECKING:
    from cadence_worker.config import WorkerSettings
    from cadence_worker.history.history import History
    from cadence_worker.metadata import ActivityMetadata, DecisionMetadata
    from cadence_worker.task_service import Decision


class TaskListKey(NamedTuple):
    """Partition key for lookups, pollers and concurrency isolation."""

    domain: str
    task_list: str


class Workflow(ABC):
    """Base class for workflow implementations.

    `execute` receives the decision task's history and returns the decisions
    to report back for this decision task.
    """

    domain: ClassVar[str | None] = None
    task_list: ClassVar[str | None] = None

    @abstractmethod
    def execute(self, input: History, metadata: DecisionMetadata) -> Sequence[Decision]: ...


class Activity(ABC):
    """Base class for activity implementations.

    `execute` receives the decoded task input; its return value is reported as
    the activity result.
    """

    domain: ClassVar[str | None] = None
    task_list: ClassVar[str | None] = None

    @abstractmethod
    def execute(self, input: Any, metadata: ActivityMetadata) -> Any: ...


@dataclass(frozen=True, slots=True)
class ExecutableOptions:
    """Resolved registration options for one executable."""

    name: str
    domain: str
    task_list: str

    @property
    def key(self) -> TaskListKey:
        return TaskListKey(self.domain, self.task_list)

    @staticmethod
    def resolve(
        executable: type,
        *,
        settings: WorkerSettings,
        name: str | None = None,
        domain: str | None = None,
        task_list: str | None = None,
    ) -> ExecutableOptions:
        """Resolve options: explicit keyword > class attribute > settings default."""

        resolved_name = name if name is not None else executable.__name__
        resolved_domain = _first_set(
            domain, getattr(executable, "domain", None), settings.default_domain
        )
        resolved_task_list = _first_set(
            task_list, getattr(executable, "task_list", None), settings.default_task_list
        )

        for label, value in (
            ("name", resolved_name),
            ("domain", resolved_domain),
            ("task_list", resolved_task_list),
        ):
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"{executable.__name__}: {label} must be a non-empty string, got {value!r}"
                )

        return ExecutableOptions(
            name=resolved_name, domain=resolved_domain, task_list=resolved_task_list
        )


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None
