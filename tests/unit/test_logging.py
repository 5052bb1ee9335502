"""Unit tests for structured logging."""

import json
import logging
import sys

from cadence_worker.logging import JsonFormatter, configure_logging


def _record(msg: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="cadence_worker.polling.base",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    record = _record("Poller started", poller="activity", domain="D", task_list="T")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "cadence_worker.polling.base"
    assert payload["message"] == "Poller started"
    assert payload["thread"] == record.threadName
    assert payload["extra"] == {"poller": "activity", "domain": "D", "task_list": "T"}


def test_json_formatter_renders_non_json_values() -> None:
    record = _record("Task failed", task_token=b"\x01token")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["extra"]["task_token"] == str(b"\x01token")


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("Task execution failed")
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_replaces_root_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        root.addHandler(logging.NullHandler())

        configure_logging("debug")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
