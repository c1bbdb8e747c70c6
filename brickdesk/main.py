from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from brickdesk.api.routes_orders import router as orders_router
from brickdesk.api.routes_submissions import router as submissions_router
from brickdesk.core.config import get_settings
from brickdesk.core.errors import (
    ForecastError,
    OrderValidationError,
    ResolutionError,
    SubmissionError,
    WorkflowStateError,
)
from brickdesk.core.logging import configure_logging

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(title=settings.app_name)


@app.exception_handler(OrderValidationError)
async def validation_handler(_: Request, exc: OrderValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "reasons": exc.reasons, "error": "validation"},
    )


@app.exception_handler(ResolutionError)
async def resolution_handler(_: Request, exc: ResolutionError):
    return JSONResponse(status_code=404, content={"detail": str(exc), "error": "resolution"})


@app.exception_handler(ForecastError)
async def forecast_handler(_: Request, exc: ForecastError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "error": "forecast"})


@app.exception_handler(SubmissionError)
async def submission_handler(_: Request, exc: SubmissionError):
    return JSONResponse(status_code=502, content={"detail": str(exc), "error": "submission"})


@app.exception_handler(WorkflowStateError)
async def workflow_state_handler(_: Request, exc: WorkflowStateError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "error": "workflow_state"})


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


app.include_router(orders_router)
app.include_router(submissions_router)
