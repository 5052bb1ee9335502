"""Configuration for the worker runtime.

Configuration is loaded from:
- environment variables prefixed with `CADENCE_`
- and a local `.env` file (if present)

Tests construct `WorkerSettings(...)` directly; pydantic-settings also supports
overriding the env file via `WorkerSettings(_env_file=path_to_env)`.
"""

from __future__ import annotations

import os
import socket

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_identity() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


class WorkerSettings(BaseSettings):
    """Settings for a worker process.

    Environment variables:
    - CADENCE_LOG_LEVEL
    - CADENCE_DEFAULT_DOMAIN, CADENCE_DEFAULT_TASK_LIST
    - CADENCE_SHUTDOWN_CHECK_INTERVAL
    - CADENCE_WORKFLOW_THREAD_POOL_SIZE, CADENCE_ACTIVITY_THREAD_POOL_SIZE
    - CADENCE_POLL_RETRY_SECONDS
    - CADENCE_IDENTITY
    """

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )

    default_domain: str = Field(
        default="default",
        description="Domain used when neither the registration nor the class sets one",
    )
    default_task_list: str = Field(
        default="default",
        description="Task list used when neither the registration nor the class sets one",
    )

    shutdown_check_interval: float = Field(
        default=1.0,
        gt=0.0,
        description="Seconds between shutdown-flag checks while Worker.start blocks",
    )

    workflow_thread_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum concurrently executing decision tasks per workflow poller",
    )
    activity_thread_pool_size: int = Field(
        default=20,
        gt=0,
        description="Maximum concurrently executing activity tasks per activity poller",
    )

    poll_retry_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Back-off after a failed long-poll before polling again",
    )

    identity: str = Field(
        default_factory=_default_identity,
        description="Worker identity used in logs",
    )

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_default_routing(self) -> WorkerSettings:
        if not self.default_domain.strip():
            raise ValueError("CADENCE_DEFAULT_DOMAIN must not be blank")
        if not self.default_task_list.strip():
            raise ValueError("CADENCE_DEFAULT_TASK_LIST must not be blank")
        return self
