"""Error taxonomy for the worker runtime.

Task-level errors (`ExecutableNotFoundError`, `ExecutionError`, `TransportError`)
are caught inside the pollers and reported to the task service. Only
`ConfigurationError` is allowed to escape, and only during registration.
"""

from __future__ import annotations

import traceback


class CadenceWorkerError(Exception):
    """Base class for all worker runtime errors."""


class ExecutableNotFoundError(CadenceWorkerError, LookupError):
    """Raised when a task names an executable that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Executable not registered: {self.name}"


class ExecutionError(CadenceWorkerError):
    """An executable raised while handling a task."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(name, cause)
        self.name = name
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.name} failed: {self.reason}"

    @property
    def reason(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"

    @property
    def details(self) -> str:
        return "".join(
            traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__)
        )


class TransportError(CadenceWorkerError):
    """A call to the task service failed at the network layer."""


class ConfigurationError(CadenceWorkerError, ValueError):
    """Registration or setup was invalid; not recoverable at runtime."""
