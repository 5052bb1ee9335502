#!/usr/bin/env python3
"""Run a worker against the in-process task service.

This demonstrates the worker components end to end:

* register a workflow and an activity under different task lists
* wrap every task in a logging middleware
* feed one decision task and one activity task through the pollers
* shut the worker down from another thread

With a real transport, `build_worker` is what `cadence-worker run` would load:

    cadence-worker run hello_world_worker:build_worker
"""

from __future__ import annotations

import argparse
import logging
import threading
from collections.abc import Sequence
from typing import Any

from cadence_worker import Activity, Worker, WorkerSettings, Workflow
from cadence_worker.history import EventType, History
from cadence_worker.logging import configure_logging
from cadence_worker.metadata import ActivityMetadata, DecisionMetadata
from cadence_worker.task_service import ActivityTask, Decision, DecisionTask
from cadence_worker.testing import InMemoryTaskService

logger = logging.getLogger("hello_world")


class HelloWorldActivity(Activity):
    domain = "samples"
    task_list = "hello-activities"

    def execute(self, input: Any, metadata: ActivityMetadata) -> str:
        return f"Hello, {input}!"


class HelloWorldWorkflow(Workflow):
    domain = "samples"
    task_list = "hello-workflows"

    def execute(self, input: History, metadata: DecisionMetadata) -> Sequence[Decision]:
        started = next(e for e in input if e.type == EventType.WORKFLOW_EXECUTION_STARTED)
        return [
            Decision(
                type="ScheduleActivityTask",
                attributes={
                    "activity_id": "1",
                    "activity_type": "HelloWorldActivity",
                    "task_list": HelloWorldActivity.task_list,
                    "input": started.attributes.input,
                },
            )
        ]


class TimingMiddleware:
    def call(self, task: Any, next_middleware: Any) -> Any:
        logger.info("Task started", extra={"task_type": type(task).__name__})
        result = next_middleware(task)
        logger.info("Task finished", extra={"task_type": type(task).__name__})
        return result


def build_worker(task_service: Any | None = None) -> Worker:
    worker = Worker(task_service or InMemoryTaskService(), WorkerSettings())
    worker.register_workflow(HelloWorldWorkflow)
    worker.register_activity(HelloWorldActivity)
    worker.use_middleware(TimingMiddleware)
    return worker


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the hello world worker in-process.")
    parser.add_argument("--name", default="World", help="Name passed to the workflow")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO")

    service = InMemoryTaskService(poll_timeout=0.1)
    worker = build_worker(service)

    service.schedule_workflow_task(
        "samples",
        "hello-workflows",
        DecisionTask(
            task_token="decision-1",
            workflow_id="hello-1",
            run_id="run-1",
            workflow_type="HelloWorldWorkflow",
            started_event_id=3,
            history=[
                {
                    "eventId": 1,
                    "eventType": "WorkflowExecutionStarted",
                    "workflowExecutionStartedEventAttributes": {
                        "workflowType": {"name": "HelloWorldWorkflow"},
                        "input": args.name,
                    },
                },
                {"eventId": 2, "eventType": "DecisionTaskScheduled"},
                {
                    "eventId": 3,
                    "eventType": "DecisionTaskStarted",
                    "decisionTaskStartedEventAttributes": {"scheduledEventId": 2},
                },
            ],
        ),
    )
    service.schedule_activity_task(
        "samples",
        "hello-activities",
        ActivityTask(
            task_token="activity-1",
            activity_id="1",
            activity_type="HelloWorldActivity",
            input=args.name,
            workflow_id="hello-1",
            workflow_run_id="run-1",
            workflow_type="HelloWorldWorkflow",
        ),
    )

    runner = threading.Thread(target=worker.start, name="worker")
    runner.start()
    service.wait_for_reports(2, timeout=5.0)
    worker.stop()
    runner.join()

    print(f"Decisions: {service.completed.get('decision-1')}")
    print(f"Activity result: {service.completed.get('activity-1')}")
    return 0 if not service.failed else 1


if __name__ == "__main__":
    raise SystemExit(main())
