from __future__ import annotations

import threading
from uuid import uuid4

from brickdesk.workflow.submission import OrderSubmissionWorkflow


class SubmissionRegistry:
    def __init__(self):
        self.lock = threading.Lock()
        self.workflows: dict[str, OrderSubmissionWorkflow] = {}

    def add(self, workflow: OrderSubmissionWorkflow) -> str:
        submission_id = f"sub-{uuid4().hex[:16]}"
        with self.lock:
            self.workflows[submission_id] = workflow
        return submission_id

    def get(self, submission_id: str) -> OrderSubmissionWorkflow:
        with self.lock:
            workflow = self.workflows.get(submission_id)
        if workflow is None:
            raise KeyError(f"unknown submission: {submission_id}")
        return workflow

    def discard(self, submission_id: str) -> None:
        with self.lock:
            self.workflows.pop(submission_id, None)

    def __len__(self) -> int:
        with self.lock:
            return len(self.workflows)
