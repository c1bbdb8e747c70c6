from __future__ import annotations

from typing import Any

from brickdesk.clients.http import RemoteApiClient
from brickdesk.core.config import Settings, get_settings
from brickdesk.domain.catalog import Catalog
from brickdesk.domain.forecast import ForecastRequest, StockProjectionSource, shortage_for


class HTTPStockProjection:
    source_name = "http"

    def __init__(self, client: RemoteApiClient | None = None):
        self.client = client or RemoteApiClient()

    def project(self, request: ForecastRequest) -> dict[str, Any]:
        payload = self.client.post_json("/api/placeorders/forecast", request.to_wire())
        if not isinstance(payload, dict):
            raise ValueError(f"unexpected forecast payload: {payload!r}")
        return payload


class CatalogStockProjection:
    """Projects today's stock onto the delivery date (no production or inbound)."""

    source_name = "catalog"

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def _line(self, product_id: int | None, package_product_id: int | None, required: int) -> dict[str, Any]:
        if package_product_id is not None:
            package = self.catalog.package(package_product_id)
            name = package.name
            current = package.quantity
        else:
            product = self.catalog.product(product_id)
            name = product.name
            current = product.quantity
        shortage = shortage_for(required, current)
        return {
            "productId": product_id,
            "packageProductId": package_product_id,
            "productName": name,
            "requiredQuantity": required,
            "estimatedQuantity": current,
            "currentQuantity": current,
            "shortage": shortage,
            "hasShortage": shortage > 0,
        }

    def project(self, request: ForecastRequest) -> dict[str, Any]:
        rows = [
            self._line(item.product_id, item.package_product_id, item.required_quantity)
            for item in request.items
        ]
        return {"forecasts": rows, "hasAnyShortage": any(row["hasShortage"] for row in rows)}


def build_stock_projection(catalog: Catalog, settings: Settings | None = None) -> StockProjectionSource:
    cfg = settings or get_settings()
    if cfg.stock_projection_backend == "http":
        return HTTPStockProjection(RemoteApiClient(cfg))
    return CatalogStockProjection(catalog)
