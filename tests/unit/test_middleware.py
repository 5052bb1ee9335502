"""Unit tests for the middleware chain."""

from __future__ import annotations

from typing import Any

from cadence_worker.middleware import MiddlewareChain, MiddlewareEntry


class RecordingMiddleware:
    def __init__(self, label: str, calls: list[str]) -> None:
        self.label = label
        self.calls = calls

    def call(self, task: Any, next_middleware: Any) -> Any:
        self.calls.append(f"{self.label}:before")
        result = next_middleware(task)
        self.calls.append(f"{self.label}:after")
        return result


class RewritingMiddleware:
    def call(self, task: Any, next_middleware: Any) -> Any:
        return next_middleware({**task, "rewritten": True})


class ShortCircuitMiddleware:
    def call(self, task: Any, next_middleware: Any) -> Any:
        return "cached"


def test_empty_chain_calls_handler_directly() -> None:
    chain = MiddlewareChain()

    assert len(chain) == 0
    assert chain.invoke("task", lambda task: f"ran {task}") == "ran task"


def test_first_registered_wraps_outermost() -> None:
    calls: list[str] = []
    chain = MiddlewareChain(
        [
            MiddlewareEntry(RecordingMiddleware, ("outer", calls)),
            MiddlewareEntry(RecordingMiddleware, (), {"label": "inner", "calls": calls}),
        ]
    )

    def handler(task: Any) -> str:
        calls.append("handler")
        return "done"

    assert chain.invoke("task", handler) == "done"
    assert calls == ["outer:before", "inner:before", "handler", "inner:after", "outer:after"]


def test_middleware_can_replace_the_task() -> None:
    chain = MiddlewareChain([MiddlewareEntry(RewritingMiddleware)])

    assert chain.invoke({"id": 1}, lambda task: task) == {"id": 1, "rewritten": True}


def test_middleware_instances_are_built_once() -> None:
    built: list[object] = []

    class CountingMiddleware:
        def __init__(self) -> None:
            built.append(self)

        def call(self, task: Any, next_middleware: Any) -> Any:
            return next_middleware(task)

    chain = MiddlewareChain([MiddlewareEntry(CountingMiddleware)])
    chain.invoke(1, lambda task: task)
    chain.invoke(2, lambda task: task)

    assert len(built) == 1


def test_short_circuit_skips_handler() -> None:
    chain = MiddlewareChain([MiddlewareEntry(ShortCircuitMiddleware)])
    handled: list[Any] = []

    assert chain.invoke("task", handled.append) == "cached"
    assert handled == []
