"""Workflow and activity pollers."""

from cadence_worker.polling.activity import ActivityPoller
from cadence_worker.polling.base import Poller, PollerState
from cadence_worker.polling.workflow import WorkflowPoller

__all__ = [
    "ActivityPoller",
    "Poller",
    "PollerState",
    "WorkflowPoller",
]
