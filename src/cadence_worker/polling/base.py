"""Long-poll loop shared by workflow and activity pollers.

Each poller owns one poll thread and a bounded pool of task threads. A slot is
taken before every long-poll and released when the dispatched task has been
processed and reported, so the poller never asks the server for more work than
it can execute. Polling for the next task overlaps with execution of earlier
ones.

`stop` only prevents new long-polls; tasks already dispatched run to
completion and are reported before `wait` returns.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from cadence_worker.config import WorkerSettings
from cadence_worker.errors import ExecutableNotFoundError, ExecutionError, TransportError
from cadence_worker.executable_lookup import ExecutableLookup
from cadence_worker.middleware import MiddlewareChain, MiddlewareEntry
from cadence_worker.task_service import TaskService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    DISPATCHING = "dispatching"
    STOPPING = "stopping"
    STOPPED = "stopped"


class Poller(ABC, Generic[T]):
    """Polls one (domain, task list) and dispatches tasks to registered executables."""

    kind: ClassVar[str]

    def __init__(
        self,
        domain: str,
        task_list: str,
        lookup: ExecutableLookup[Any],
        middlewares: Sequence[MiddlewareEntry],
        *,
        task_service: TaskService,
        settings: WorkerSettings | None = None,
    ) -> None:
        self.domain = domain
        self.task_list = task_list
        self.lookup = lookup
        self.task_service = task_service
        self.settings = settings or WorkerSettings()

        self._middleware_chain = MiddlewareChain(middlewares)
        self._max_concurrency = self._concurrency_limit()
        self._slots = threading.BoundedSemaphore(self._max_concurrency)
        self._stopping = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._state = PollerState.IDLE

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _log_context(self, **extra: object) -> dict[str, object]:
        return {"poller": self.kind, "domain": self.domain, "task_list": self.task_list, **extra}

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            if self._stopping.is_set():
                logger.info("Poller stopped before start", extra=self._log_context())
                self._state = PollerState.STOPPED
                return

            self._executor = ThreadPoolExecutor(
                max_workers=self._max_concurrency,
                thread_name_prefix=f"{self.kind}-task-{self.domain}-{self.task_list}",
            )
            self._thread = threading.Thread(
                target=self._poll_loop,
                name=f"{self.kind}-poller-{self.domain}-{self.task_list}",
                daemon=True,
            )
            self._thread.start()

        logger.info(
            "Poller started",
            extra=self._log_context(max_concurrency=self._max_concurrency),
        )

    def stop(self) -> None:
        if self._stopping.is_set():
            return
        self._stopping.set()
        with self._lock:
            self._state = PollerState.STOPPING if self._thread else PollerState.STOPPED
        logger.info("Poller stopping", extra=self._log_context())

    def wait(self) -> None:
        with self._lock:
            thread, executor = self._thread, self._executor

        if thread is not None and thread is not threading.current_thread():
            thread.join()
        if executor is not None:
            executor.shutdown(wait=True)

        if self._stopping.is_set() and self._state is not PollerState.STOPPED:
            self._state = PollerState.STOPPED
            logger.info("Poller stopped", extra=self._log_context())

    def _poll_loop(self) -> None:
        while not self._stopping.is_set():
            # Bounded wait so a stop request is noticed while all slots are busy.
            if not self._slots.acquire(timeout=self.settings.shutdown_check_interval):
                continue

            self._state = PollerState.POLLING
            try:
                task = self._poll_for_task()
            except TransportError as e:
                self._retry_after_poll_failure()
                logger.warning(
                    "Long-poll failed, retrying", extra=self._log_context(error=str(e))
                )
                continue
            except Exception:
                self._retry_after_poll_failure()
                logger.exception("Unexpected long-poll failure, retrying", extra=self._log_context())
                continue

            if task is None:
                self._slots.release()
                self._state = PollerState.IDLE
                logger.debug("Long-poll returned no task", extra=self._log_context())
                continue

            # A task received here is leased to this worker, so it is dispatched
            # even if stop was requested during the long-poll.
            self._state = PollerState.DISPATCHING
            assert self._executor is not None
            self._executor.submit(self._run_task, task)
            self._state = PollerState.IDLE

        if self._state is not PollerState.STOPPED:
            self._state = PollerState.STOPPING

    def _retry_after_poll_failure(self) -> None:
        self._slots.release()
        self._state = PollerState.IDLE
        self._stopping.wait(self.settings.poll_retry_seconds)

    def _run_task(self, task: T) -> None:
        try:
            self._process(task)
        except Exception:
            logger.exception("Task processing crashed", extra=self._log_context())
        finally:
            self._slots.release()

    def _process(self, task: T) -> None:
        name = self._executable_name(task)
        metadata = self._metadata(task)
        context = self._log_context(executable=name, task=metadata.to_dict())

        try:
            executable = self.lookup.find(name)
        except ExecutableNotFoundError as e:
            logger.error("Task names an unregistered executable", extra=context)
            self._report_failure(task, e)
            return

        logger.debug("Executing task", extra=context)
        try:
            result = self._middleware_chain.invoke(
                task, lambda t: self._execute(executable, t, metadata)
            )
        except Exception as e:
            logger.exception("Task execution failed", extra=context)
            self._report_failure(task, ExecutionError(name, e))
            return

        self._report_completion(task, result)

    def _report_completion(self, task: T, result: Any) -> None:
        token = self._task_token(task)
        try:
            self.task_service.complete(token, result)
        except Exception:
            logger.exception("Failed to report task completion", extra=self._log_context())

    def _report_failure(self, task: T, error: Exception) -> None:
        token = self._task_token(task)
        try:
            self.task_service.fail(token, error)
        except Exception:
            logger.exception(
                "Failed to report task failure",
                extra=self._log_context(error=str(error)),
            )

    @abstractmethod
    def _concurrency_limit(self) -> int: ...

    @abstractmethod
    def _poll_for_task(self) -> T | None: ...

    @abstractmethod
    def _task_token(self, task: T) -> bytes | str: ...

    @abstractmethod
    def _executable_name(self, task: T) -> str: ...

    @abstractmethod
    def _metadata(self, task: T) -> Any: ...

    @abstractmethod
    def _execute(self, executable: Any, task: T, metadata: Any) -> Any: ...
