from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from brickdesk.api.deps import WorkflowFactory, get_catalog, get_registry, get_workflow_factory
from brickdesk.api.schemas import SubmissionCreateRequest
from brickdesk.core.config import get_settings
from brickdesk.domain.catalog import Catalog
from brickdesk.workflow import OrderSubmissionWorkflow, SubmissionOutcome, SubmissionRegistry, SubmissionState

router = APIRouter(tags=["submissions"])


def _response(registry: SubmissionRegistry, submission_id: str, outcome: SubmissionOutcome) -> dict:
    # an idle workflow has committed or been cancelled; nothing is left to act on
    if outcome.state == SubmissionState.IDLE:
        registry.discard(submission_id)
    return {"submission_id": submission_id, **outcome.model_dump(mode="json")}


def _lookup(registry: SubmissionRegistry, submission_id: str) -> OrderSubmissionWorkflow:
    try:
        return registry.get(submission_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/submissions")
def create_submission(
    request: SubmissionCreateRequest,
    catalog: Catalog = Depends(get_catalog),
    registry: SubmissionRegistry = Depends(get_registry),
    factory: WorkflowFactory = Depends(get_workflow_factory),
):
    workflow = factory(request.kind, catalog)
    draft = request.draft.to_draft(catalog, get_settings().unit_price_places)
    outcome = workflow.submit(draft, request.created_user_id)
    submission_id = registry.add(workflow)
    return _response(registry, submission_id, outcome)


@router.get("/submissions/{submission_id}")
def get_submission(submission_id: str, registry: SubmissionRegistry = Depends(get_registry)):
    workflow = _lookup(registry, submission_id)
    return _response(registry, submission_id, workflow.outcome())


@router.post("/submissions/{submission_id}/confirm")
def confirm_submission(submission_id: str, registry: SubmissionRegistry = Depends(get_registry)):
    workflow = _lookup(registry, submission_id)
    return _response(registry, submission_id, workflow.confirm())


@router.post("/submissions/{submission_id}/cancel")
def cancel_submission(submission_id: str, registry: SubmissionRegistry = Depends(get_registry)):
    workflow = _lookup(registry, submission_id)
    return _response(registry, submission_id, workflow.cancel())


@router.post("/submissions/{submission_id}/retry")
def retry_submission(submission_id: str, registry: SubmissionRegistry = Depends(get_registry)):
    workflow = _lookup(registry, submission_id)
    return _response(registry, submission_id, workflow.retry())
