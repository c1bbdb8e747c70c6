from __future__ import annotations

import logging
from typing import Any, Protocol

from brickdesk.clients.http import RemoteApiClient
from brickdesk.core.config import Settings, get_settings
from brickdesk.domain.catalog import Catalog, Customer, Deliver, PackageProduct, Product

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    source_name: str

    def load(self) -> Catalog:
        ...


def _rows(payload: Any, path: str) -> list[dict[str, Any]]:
    if not isinstance(payload, list):
        raise ValueError(f"expected a list from {path}, got {type(payload).__name__}")
    return [row for row in payload if isinstance(row, dict)]


class HTTPCatalogSource:
    source_name = "http"

    def __init__(self, client: RemoteApiClient | None = None):
        self.client = client or RemoteApiClient()

    def load(self) -> Catalog:
        products = _rows(self.client.get_json("/api/products"), "/api/products")
        packages = _rows(self.client.get_json("/api/products/package"), "/api/products/package")
        customers = _rows(self.client.get_json("/api/customers"), "/api/customers")
        delivers = _rows(self.client.get_json("/api/delivers"), "/api/delivers")
        catalog = Catalog(
            products=tuple(Product.model_validate(row) for row in products),
            packages=tuple(PackageProduct.model_validate(row) for row in packages),
            customers=tuple(Customer.model_validate(row) for row in customers),
            delivers=tuple(Deliver.model_validate(row) for row in delivers),
        )
        logger.info(
            "catalog loaded: products=%s packages=%s customers=%s delivers=%s",
            len(catalog.products),
            len(catalog.packages),
            len(catalog.customers),
            len(catalog.delivers),
        )
        return catalog


class StaticCatalogSource:
    source_name = "static"

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or Catalog()

    def load(self) -> Catalog:
        return self.catalog


def build_catalog_source(settings: Settings | None = None) -> CatalogSource:
    cfg = settings or get_settings()
    if cfg.catalog_backend == "http":
        return HTTPCatalogSource(RemoteApiClient(cfg))
    return StaticCatalogSource()
