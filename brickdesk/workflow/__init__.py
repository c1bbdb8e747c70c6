from brickdesk.workflow.registry import SubmissionRegistry
from brickdesk.workflow.submission import (
    OrderSubmissionWorkflow,
    SubmissionOutcome,
    SubmissionState,
    build_workflow,
)
from brickdesk.workflow.validation import validate_draft, validation_reasons

__all__ = [
    "OrderSubmissionWorkflow",
    "SubmissionOutcome",
    "SubmissionRegistry",
    "SubmissionState",
    "build_workflow",
    "validate_draft",
    "validation_reasons",
]
