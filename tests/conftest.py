"""Test configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from cadence_worker.config import WorkerSettings
from cadence_worker.history.raw import EventType, RawHistoryEvent, attributes_field
from cadence_worker.testing import InMemoryTaskService


@pytest.fixture
def settings() -> WorkerSettings:
    """Provide settings with short intervals so lifecycle tests finish quickly."""
    return WorkerSettings(
        _env_file=None,
        shutdown_check_interval=0.01,
        poll_retry_seconds=0.01,
        workflow_thread_pool_size=2,
        activity_thread_pool_size=2,
        identity="test-worker",
    )


@pytest.fixture
def task_service() -> InMemoryTaskService:
    """Provide an in-memory task service with a short long-poll timeout."""
    return InMemoryTaskService(poll_timeout=0.01)


@pytest.fixture
def make_raw_event() -> Callable[..., RawHistoryEvent]:
    """Build a raw history event of the given type with snake_case attributes."""

    def factory(event_type: str, event_id: int = 1, **attributes: Any) -> RawHistoryEvent:
        return RawHistoryEvent.model_validate(
            {
                "event_id": event_id,
                "event_type": event_type,
                attributes_field(EventType(event_type)): attributes,
            }
        )

    return factory
