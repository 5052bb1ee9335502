"""CLI entrypoint: build a worker from a factory and run it until terminated.

    cadence-worker run myapp.worker:build_worker

The target names either a `Worker` instance or a zero-argument callable
returning one. SIGTERM and SIGINT are bound to `Worker.stop` here, outside the
worker itself.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import signal
import sys
import threading
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from cadence_worker import __version__
from cadence_worker.config import WorkerSettings
from cadence_worker.errors import ConfigurationError
from cadence_worker.logging import configure_logging
from cadence_worker.worker import Worker

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cadence-worker",
        description="Run workflow and activity pollers against a Cadence task service",
    )
    parser.add_argument("--version", action="version", version=f"cadence-worker {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser(
        "run",
        help="Build a worker from a factory and run it until SIGTERM/SIGINT",
    )
    run.add_argument(
        "target",
        help="'module.path:attribute' naming a Worker or a callable returning one",
    )
    run.add_argument(
        "--log-level",
        default=None,
        help="Override CADENCE_LOG_LEVEL",
    )

    return parser


def load_worker(target: str) -> Worker:
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(f"Expected 'module.path:attribute', got {target!r}")

    module = importlib.import_module(module_name)
    try:
        obj = getattr(module, attribute)
    except AttributeError:
        raise ConfigurationError(f"{module_name} has no attribute {attribute!r}") from None

    if isinstance(obj, Worker):
        worker = obj
    elif callable(obj):
        worker = obj()
    else:
        raise ConfigurationError(f"{target} is neither a Worker nor a callable returning one")

    if not isinstance(worker, Worker):
        raise ConfigurationError(f"{target} did not produce a Worker (got {type(worker).__name__})")
    return worker


def install_signal_handlers(
    worker: Worker, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS
) -> dict[signal.Signals, Any]:
    """Bind `signals` to `worker.stop` and return the previous handlers.

    Must be called from the main thread. The handler only spawns a thread
    that calls `stop`, so it returns immediately and never blocks on pollers.
    """

    def shutdown(signum: int) -> None:
        logger.info("Termination signal received", extra={"signal": signal.Signals(signum).name})
        worker.stop()

    def handle(signum: int, _frame: Any) -> None:
        threading.Thread(
            target=shutdown, args=(signum,), name="cadence-worker-shutdown", daemon=True
        ).start()

    previous: dict[signal.Signals, Any] = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, handle)
    return previous


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorkerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(args.log_level or settings.log_level)

    try:
        if args.command == "run":
            worker = load_worker(args.target)
            install_signal_handlers(worker)
            worker.start()
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except ConfigurationError as e:
        logger.error("Invalid worker configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except Exception:
        logger.exception("Worker failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
