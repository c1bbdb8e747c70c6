"""Submission state machine for one order attempt.

    idle -> forecasting -> committing -> idle
    forecasting -> awaiting_confirmation -> committing | idle
    idle -> committing  (plain orders, nothing to forecast)
    forecasting | committing -> failed -> (retry) forecasting | committing

The payload is frozen when the attempt begins. Confirming a shortage commits
that snapshot, so edits made to the draft while the warning is shown never
reach the server. Forecast responses carry the attempt id they were issued
for; a response for a cancelled or superseded attempt is dropped.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

from pydantic import BaseModel, Field

from brickdesk.clients.http import RemoteApiClient
from brickdesk.clients.orders import HTTPOrderGateway, OrderPersistenceSource
from brickdesk.clients.receipts import HTTPReceiptPrinter, ReceiptPrinter, build_receipt_model
from brickdesk.clients.stock import build_stock_projection
from brickdesk.core.config import Settings, get_settings
from brickdesk.core.errors import ForecastError, ResolutionError, SubmissionError, WorkflowStateError
from brickdesk.domain.catalog import Catalog, Customer
from brickdesk.domain.forecast import ForecastReport, ForecastRequest, InventoryForecastEngine, build_forecast_request
from brickdesk.domain.orders.aggregates import OrderDraft
from brickdesk.domain.orders.commands import CreatedOrder, OrderKind, OrderRequest, PlaceOrderCreateRequest, build_order_payload
from brickdesk.workflow.validation import validate_draft

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    IDLE = "idle"
    FORECASTING = "forecasting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTING = "committing"
    FAILED = "failed"


class SubmissionOutcome(BaseModel):
    state: SubmissionState
    attempt_id: str | None = None
    order: CreatedOrder | None = None
    forecast: ForecastReport | None = None
    error: str | None = None
    receipt_html: str | None = None
    transitions: list[dict[str, Any]] = Field(default_factory=list)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class OrderSubmissionWorkflow:
    def __init__(
        self,
        kind: OrderKind,
        orders: OrderPersistenceSource,
        forecast_engine: InventoryForecastEngine | None = None,
        printer: ReceiptPrinter | None = None,
        catalog: Catalog | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if kind == "place_order" and forecast_engine is None:
            raise ValueError("place orders need a forecast engine")
        self.kind = kind
        self.orders = orders
        self.forecast_engine = forecast_engine
        self.printer = printer
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.clock = clock
        # re-entrant: submit, confirm and retry drive the lower-level transitions
        self.lock = threading.RLock()

        self.state = SubmissionState.IDLE
        self.attempt_id: str | None = None
        self.payload: OrderRequest | None = None
        self.forecast_request: ForecastRequest | None = None
        self.forecast: ForecastReport | None = None
        self.created: CreatedOrder | None = None
        self.receipt_html: str | None = None
        self.error: str | None = None
        self.failed_stage: str | None = None
        self.transitions: list[dict[str, Any]] = []

    def _transition(self, to_state: SubmissionState, reason: str | None = None) -> None:
        from_state = self.state
        self.transitions.append(
            {
                "from": from_state.value,
                "to": to_state.value,
                "reason": reason,
                "attempt_id": self.attempt_id,
                "at": _now_iso(),
            }
        )
        self.state = to_state
        logger.info(
            "submission %s: %s -> %s (%s)",
            self.attempt_id,
            from_state.value,
            to_state.value,
            reason or "-",
        )

    def _require(self, *states: SubmissionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise WorkflowStateError(f"operation requires state in ({allowed}), current={self.state.value}")

    def _reset(self) -> None:
        self.attempt_id = None
        self.payload = None
        self.forecast_request = None
        self.forecast = None
        self.error = None
        self.failed_stage = None

    # -- low-level transitions -------------------------------------------

    def begin(self, draft: OrderDraft, created_user_id: int) -> ForecastRequest | None:
        """Validate and freeze the draft; return the forecast request to run, if any."""
        with self.lock:
            self._require(SubmissionState.IDLE, SubmissionState.FAILED)
            validate_draft(
                draft,
                self.kind,
                allow_negative_totals=self.settings.allow_negative_totals,
                catalog=self.catalog,
            )
            payload = build_order_payload(draft, self.kind, created_user_id)

            self._reset()
            self.created = None
            self.receipt_html = None
            self.attempt_id = str(uuid4())
            self.payload = payload

            if isinstance(payload, PlaceOrderCreateRequest):
                self.forecast_request = build_forecast_request(payload)
                self._transition(SubmissionState.FORECASTING, f"{len(payload.lines)} line(s) to forecast")
                return self.forecast_request

            self._transition(SubmissionState.COMMITTING, "no delivery date to forecast")
            return None

    def _is_current(self, attempt_id: str, what: str) -> bool:
        if self.state == SubmissionState.FORECASTING and attempt_id == self.attempt_id:
            return True
        logger.warning(
            "discarding stale %s for attempt=%s (current attempt=%s state=%s)",
            what,
            attempt_id,
            self.attempt_id,
            self.state.value,
        )
        return False

    def receive_forecast(self, attempt_id: str, report: ForecastReport) -> bool:
        with self.lock:
            if not self._is_current(attempt_id, "forecast"):
                return False
            self.forecast = report
            if report.has_any_shortage:
                self._transition(
                    SubmissionState.AWAITING_CONFIRMATION,
                    f"{len(report.shortages())} line(s) short on delivery date",
                )
            else:
                self._transition(SubmissionState.COMMITTING, "projected stock covers every line")
            return True

    def fail_forecast(self, attempt_id: str, exc: Exception) -> bool:
        with self.lock:
            if not self._is_current(attempt_id, "forecast failure"):
                return False
            self.error = str(exc)
            self.failed_stage = "forecast"
            self._transition(SubmissionState.FAILED, f"forecast failed: {exc}")
            return True

    def accept_shortage(self) -> None:
        with self.lock:
            self._require(SubmissionState.AWAITING_CONFIRMATION)
            self._transition(SubmissionState.COMMITTING, "shortage accepted by user")

    def cancel(self) -> SubmissionOutcome:
        with self.lock:
            self._require(
                SubmissionState.FORECASTING,
                SubmissionState.AWAITING_CONFIRMATION,
                SubmissionState.FAILED,
            )
            self._transition(SubmissionState.IDLE, "cancelled by user")
            self._reset()
            return self.outcome()

    def commit(self) -> CreatedOrder:
        with self.lock:
            self._require(SubmissionState.COMMITTING)
            assert self.payload is not None
            try:
                created = self.orders.create(self.payload)
            except Exception as exc:
                self.error = str(exc)
                self.failed_stage = "commit"
                self._transition(SubmissionState.FAILED, f"order creation failed: {exc}")
                raise SubmissionError(f"order creation failed: {exc}") from exc

            self.created = created
            self.receipt_html = self._print_receipt(self.payload, created)
            self._transition(SubmissionState.IDLE, f"order {created.id} created")
            self._reset()
            return created

    def _customer(self, customer_id: int) -> Customer | None:
        if self.catalog is None:
            return None
        try:
            return self.catalog.customer(customer_id)
        except ResolutionError:
            return None

    def _print_receipt(self, payload: OrderRequest, created: CreatedOrder) -> str | None:
        if self.printer is None or not self.settings.receipt_printing_enabled:
            return None
        try:
            model = build_receipt_model(payload, created, self._customer(payload.customer_id), self.clock())
            return self.printer.render(self.kind, model)
        except Exception as exc:
            # the order is already placed; a missing receipt can be reprinted
            logger.warning("receipt printing failed for order %s: %s", created.id, exc, exc_info=True)
            return None

    # -- synchronous driver ----------------------------------------------

    def outcome(self) -> SubmissionOutcome:
        with self.lock:
            return SubmissionOutcome(
                state=self.state,
                attempt_id=self.attempt_id,
                order=self.created,
                forecast=self.forecast,
                error=self.error,
                receipt_html=self.receipt_html,
                transitions=list(self.transitions),
            )

    def _run_forecast(self) -> None:
        assert self.forecast_engine is not None and self.forecast_request is not None
        attempt_id = self.attempt_id
        try:
            report = self.forecast_engine.run(self.forecast_request)
        except ForecastError as exc:
            self.fail_forecast(attempt_id, exc)
            return
        self.receive_forecast(attempt_id, report)

    def _advance(self) -> SubmissionOutcome:
        if self.state == SubmissionState.FORECASTING:
            self._run_forecast()
        if self.state == SubmissionState.COMMITTING:
            try:
                self.commit()
            except SubmissionError:
                logger.error("submission %s failed: %s", self.attempt_id, self.error)
        return self.outcome()

    def submit(self, draft: OrderDraft, created_user_id: int) -> SubmissionOutcome:
        with self.lock:
            self.begin(draft, created_user_id)
            return self._advance()

    def confirm(self) -> SubmissionOutcome:
        with self.lock:
            self.accept_shortage()
            return self._advance()

    def retry(self) -> SubmissionOutcome:
        with self.lock:
            self._require(SubmissionState.FAILED)
            if self.payload is None:
                raise WorkflowStateError("nothing to retry")
            self.error = None
            if self.failed_stage == "forecast":
                self.attempt_id = str(uuid4())
                self._transition(SubmissionState.FORECASTING, "retry forecast")
            else:
                self._transition(SubmissionState.COMMITTING, "retry order creation")
            self.failed_stage = None
            return self._advance()


def build_workflow(kind: OrderKind, catalog: Catalog, settings: Settings | None = None) -> OrderSubmissionWorkflow:
    cfg = settings or get_settings()
    client = RemoteApiClient(cfg)
    engine = InventoryForecastEngine(build_stock_projection(catalog, cfg)) if kind == "place_order" else None
    return OrderSubmissionWorkflow(
        kind=kind,
        orders=HTTPOrderGateway(client),
        forecast_engine=engine,
        printer=HTTPReceiptPrinter(client),
        catalog=catalog,
        settings=cfg,
    )
