"""Middleware interception chain wrapped around every task execution."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

Handler = Callable[[Any], Any]


class Middleware(Protocol):
    """Wraps the execution of a task.

    Implementations must call `next_middleware(task)` exactly once to continue
    the chain and should return its result.
    """

    def call(self, task: Any, next_middleware: Handler) -> Any: ...


@dataclass(frozen=True, slots=True)
class MiddlewareEntry:
    """A middleware class plus the arguments used to instantiate it."""

    middleware_class: type
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def build(self) -> Middleware:
        return self.middleware_class(*self.args, **self.kwargs)


class MiddlewareChain:
    """An ordered chain of middleware; the first entry wraps outermost.

    Middleware instances are built once, when the chain is constructed.
    """

    def __init__(self, entries: Sequence[MiddlewareEntry] = ()) -> None:
        self._middlewares: tuple[Middleware, ...] = tuple(entry.build() for entry in entries)

    def __len__(self) -> int:
        return len(self._middlewares)

    def invoke(self, task: Any, handler: Handler) -> Any:
        call_next = handler
        for middleware in reversed(self._middlewares):
            call_next = _bind(middleware, call_next)
        return call_next(task)


def _bind(middleware: Middleware, next_middleware: Handler) -> Handler:
    def run(task: Any) -> Any:
        return middleware.call(task, next_middleware)

    return run
