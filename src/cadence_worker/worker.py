"""Worker: registration, poller lifecycle and the blocking supervising loop."""

from __future__ import annotations

import logging
import threading
from typing import Any

from cadence_worker.config import WorkerSettings
from cadence_worker.errors import ConfigurationError
from cadence_worker.executable_lookup import ExecutableLookup
from cadence_worker.executables import ExecutableOptions, TaskListKey
from cadence_worker.middleware import MiddlewareEntry
from cadence_worker.polling.activity import ActivityPoller
from cadence_worker.polling.base import Poller
from cadence_worker.polling.workflow import WorkflowPoller
from cadence_worker.task_service import TaskService

logger = logging.getLogger(__name__)


class Worker:
    """Hosts workflow and activity executables for one process.

    Registration (`register_workflow`, `register_activity`, `use_middleware`)
    must happen before `start`. `start` blocks the calling thread until `stop`
    is called, from any thread or from a signal-triggered hook.

    One `WorkflowPoller` is created per (domain, task list) with registered
    workflows and one `ActivityPoller` per (domain, task list) with registered
    activities. Each gets the lookup for its key and the shared middleware list.
    """

    def __init__(self, task_service: TaskService, settings: WorkerSettings | None = None) -> None:
        self.task_service = task_service
        self.settings = settings or WorkerSettings()

        self._workflows: dict[TaskListKey, ExecutableLookup[type]] = {}
        self._activities: dict[TaskListKey, ExecutableLookup[type]] = {}
        self._middlewares: list[MiddlewareEntry] = []
        self._pollers: list[Poller[Any]] = []

        self._lock = threading.Lock()
        self._shutdown = threading.Event()
        self._started = False
        self._stopped = False

    @property
    def workflows(self) -> dict[TaskListKey, ExecutableLookup[type]]:
        return dict(self._workflows)

    @property
    def activities(self) -> dict[TaskListKey, ExecutableLookup[type]]:
        return dict(self._activities)

    @property
    def middlewares(self) -> list[MiddlewareEntry]:
        return list(self._middlewares)

    @property
    def pollers(self) -> list[Poller[Any]]:
        with self._lock:
            return list(self._pollers)

    @property
    def shutting_down(self) -> bool:
        return self._shutdown.is_set()

    def register_workflow(
        self,
        workflow_class: type,
        *,
        name: str | None = None,
        domain: str | None = None,
        task_list: str | None = None,
    ) -> ExecutableOptions:
        return self._register(
            self._workflows, workflow_class, "workflow", name=name, domain=domain, task_list=task_list
        )

    def register_activity(
        self,
        activity_class: type,
        *,
        name: str | None = None,
        domain: str | None = None,
        task_list: str | None = None,
    ) -> ExecutableOptions:
        return self._register(
            self._activities, activity_class, "activity", name=name, domain=domain, task_list=task_list
        )

    def use_middleware(self, middleware_class: type, *args: Any, **kwargs: Any) -> None:
        self._ensure_not_started(f"middleware {middleware_class.__name__}")
        self._middlewares.append(MiddlewareEntry(middleware_class, args, kwargs))

    def _ensure_not_started(self, what: str) -> None:
        if self._started:
            raise ConfigurationError(f"Cannot register {what} after the worker has started")

    def _register(
        self,
        lookups: dict[TaskListKey, ExecutableLookup[type]],
        executable: type,
        kind: str,
        **overrides: str | None,
    ) -> ExecutableOptions:
        self._ensure_not_started(f"{kind} {executable.__name__}")
        options = ExecutableOptions.resolve(executable, settings=self.settings, **overrides)

        lookup = lookups.get(options.key)
        if lookup is None:
            lookup = lookups[options.key] = ExecutableLookup()
        lookup.add(options.name, executable)

        logger.info(
            f"Registered {kind}",
            extra={
                "executable": options.name,
                "domain": options.domain,
                "task_list": options.task_list,
            },
        )
        return options

    def _build_pollers(self) -> list[Poller[Any]]:
        pollers: list[Poller[Any]] = []
        for (domain, task_list), lookup in self._workflows.items():
            pollers.append(
                WorkflowPoller(
                    domain,
                    task_list,
                    lookup,
                    self._middlewares,
                    task_service=self.task_service,
                    settings=self.settings,
                )
            )
        for (domain, task_list), lookup in self._activities.items():
            pollers.append(
                ActivityPoller(
                    domain,
                    task_list,
                    lookup,
                    self._middlewares,
                    task_service=self.task_service,
                    settings=self.settings,
                )
            )
        return pollers

    def start(self) -> None:
        """Start all pollers and block until `stop` is called.

        Returns once every poller has finished its in-flight tasks. If `stop`
        ran first, returns without starting any poller.
        """

        with self._lock:
            if self._started:
                raise ConfigurationError("Worker has already been started")
            self._started = True

            for lookup in (*self._workflows.values(), *self._activities.values()):
                lookup.freeze()

            if not self._stopped:
                self._pollers = self._build_pollers()
                for poller in self._pollers:
                    poller.start()

        logger.info(
            "Worker started",
            extra={"identity": self.settings.identity, "pollers": len(self._pollers)},
        )

        while not self.shutting_down:
            self._shutdown.wait(self.settings.shutdown_check_interval)

        for poller in self.pollers:
            poller.wait()

        logger.info("Worker stopped", extra={"identity": self.settings.identity})

    def stop(self) -> None:
        """Stop polling and wait for in-flight tasks. Idempotent and thread-safe."""

        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            pollers = list(self._pollers)

        logger.info("Worker stopping", extra={"identity": self.settings.identity})
        self._shutdown.set()

        for poller in pollers:
            poller.stop()
        for poller in pollers:
            poller.wait()
