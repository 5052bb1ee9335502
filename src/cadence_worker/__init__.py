"""Cadence worker runtime.

Registers workflow and activity implementations, long-polls the task service
for each (domain, task list) they are registered under, and runs every task
through the middleware chain before reporting the outcome.
"""

__version__ = "0.1.0"

from cadence_worker.config import WorkerSettings
from cadence_worker.executables import Activity, Workflow
from cadence_worker.worker import Worker

__all__ = ["__version__", "Activity", "Worker", "WorkerSettings", "Workflow"]
