"""Inventory forecast for orders with a future delivery date.

The projection source owns the estimated and current quantities; this
module owns the shortage arithmetic and never trusts the remote flags.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from brickdesk.core.errors import ForecastError
from brickdesk.domain.forecast.models import ForecastItem, ForecastLine, ForecastReport, ForecastRequest
from brickdesk.domain.orders.commands import PlaceOrderCreateRequest

logger = logging.getLogger(__name__)


class StockProjectionSource(Protocol):
    source_name: str

    def project(self, request: ForecastRequest) -> dict[str, Any]:
        ...


def build_forecast_request(payload: PlaceOrderCreateRequest) -> ForecastRequest:
    return ForecastRequest(
        delivery_date=payload.delivery_date,
        items=tuple(
            ForecastItem(
                product_id=line.product_id,
                package_product_id=line.package_product_id,
                required_quantity=line.amount,
            )
            for line in payload.lines
        ),
    )


def shortage_for(required_quantity: int, estimated_quantity: int) -> int:
    return max(0, required_quantity - estimated_quantity)


def evaluate_forecast(request: ForecastRequest, raw: dict[str, Any]) -> ForecastReport:
    rows = raw.get("forecasts")
    if not isinstance(rows, list):
        raise ForecastError(f"projection response has no forecasts list: {raw}")
    if len(rows) != len(request.items):
        raise ForecastError(f"projection returned {len(rows)} lines for {len(request.items)} items")

    lines: list[ForecastLine] = []
    for item, row in zip(request.items, rows):
        if not isinstance(row, dict):
            raise ForecastError(f"malformed forecast line: {row!r}")
        try:
            remote = ForecastLine.model_validate({"requiredQuantity": item.required_quantity, **row})
        except ValidationError as exc:
            raise ForecastError(f"malformed forecast line: {exc}") from exc
        shortage = shortage_for(item.required_quantity, remote.estimated_quantity)
        if remote.shortage != shortage or remote.has_shortage != (shortage > 0):
            logger.warning(
                "projection disagrees on shortage: product_id=%s package_product_id=%s remote=%s local=%s",
                item.product_id,
                item.package_product_id,
                remote.shortage,
                shortage,
            )
        lines.append(
            remote.model_copy(
                update={
                    "product_id": item.product_id,
                    "package_product_id": item.package_product_id,
                    "required_quantity": item.required_quantity,
                    "shortage": shortage,
                    "has_shortage": shortage > 0,
                }
            )
        )

    return ForecastReport(
        delivery_date=request.delivery_date,
        forecasts=tuple(lines),
        has_any_shortage=any(line.has_shortage for line in lines),
    )


class InventoryForecastEngine:
    def __init__(self, source: StockProjectionSource):
        self.source = source

    def run(self, request: ForecastRequest) -> ForecastReport:
        try:
            raw = self.source.project(request)
        except ForecastError:
            raise
        except Exception as exc:
            raise ForecastError(f"stock projection failed on {self.source.source_name}: {exc}") from exc
        report = evaluate_forecast(request, raw)
        logger.info(
            "forecast evaluated: items=%s shortages=%s",
            len(report.forecasts),
            len(report.shortages()),
        )
        return report

    def forecast(self, payload: PlaceOrderCreateRequest) -> ForecastReport:
        return self.run(build_forecast_request(payload))
