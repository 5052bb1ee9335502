"""Unit tests for worker settings."""

import pytest
from pydantic import ValidationError

from cadence_worker.config import WorkerSettings


def test_worker_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test default values when no environment is set."""
    for var in ("CADENCE_DEFAULT_DOMAIN", "CADENCE_SHUTDOWN_CHECK_INTERVAL", "CADENCE_IDENTITY"):
        monkeypatch.delenv(var, raising=False)

    settings = WorkerSettings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.default_domain == "default"
    assert settings.default_task_list == "default"
    assert settings.shutdown_check_interval == 1.0
    assert settings.workflow_thread_pool_size == 10
    assert settings.activity_thread_pool_size == 20
    assert ":" in settings.identity


def test_worker_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test CADENCE_-prefixed environment variables override defaults."""
    monkeypatch.setenv("CADENCE_DEFAULT_DOMAIN", "payments")
    monkeypatch.setenv("CADENCE_SHUTDOWN_CHECK_INTERVAL", "0.5")
    monkeypatch.setenv("CADENCE_ACTIVITY_THREAD_POOL_SIZE", "4")

    settings = WorkerSettings(_env_file=None)

    assert settings.default_domain == "payments"
    assert settings.shutdown_check_interval == 0.5
    assert settings.activity_thread_pool_size == 4


def test_worker_settings_from_env_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test values are read from a .env file."""
    monkeypatch.delenv("CADENCE_DEFAULT_TASK_LIST", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("CADENCE_DEFAULT_TASK_LIST=billing\nUNRELATED=1\n")

    settings = WorkerSettings(_env_file=env_file)

    assert settings.default_task_list == "billing"


@pytest.mark.parametrize(
    "overrides",
    [
        {"default_domain": "  "},
        {"default_task_list": ""},
        {"shutdown_check_interval": 0},
        {"workflow_thread_pool_size": 0},
        {"poll_retry_seconds": -1},
    ],
)
def test_worker_settings_validation(overrides: dict) -> None:
    """Test invalid settings are rejected."""
    with pytest.raises(ValidationError):
        WorkerSettings(_env_file=None, **overrides)
