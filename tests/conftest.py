from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from brickdesk.core.config import Settings, get_settings
from brickdesk.domain.catalog import Catalog, Customer, Deliver, PackageProduct, Product
from brickdesk.domain.forecast import ForecastRequest, InventoryForecastEngine
from brickdesk.domain.orders import OrderDraft, PackageKey, ProductKey
from brickdesk.domain.orders.commands import CreatedOrder, OrderRequest
from brickdesk.workflow import OrderSubmissionWorkflow


class FakeProjection:
    source_name = "fake"

    def __init__(self, estimates: dict[tuple[int | None, int | None], int] | None = None):
        self.estimates = estimates or {}
        self.requests: list[ForecastRequest] = []
        self.error: Exception | None = None

    def project(self, request: ForecastRequest) -> dict:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        rows = []
        for item in request.items:
            estimated = self.estimates.get((item.product_id, item.package_product_id), 10_000)
            rows.append(
                {
                    "productId": item.product_id,
                    "packageProductId": item.package_product_id,
                    "productName": f"item-{item.product_id}",
                    "estimatedQuantity": estimated,
                    "currentQuantity": estimated,
                }
            )
        return {"forecasts": rows, "hasAnyShortage": False}


class FakeOrders:
    def __init__(self):
        self.created: list[OrderRequest] = []
        self.attempts = 0
        self.failures_left = 0

    def create(self, payload: OrderRequest) -> CreatedOrder:
        self.attempts += 1
        if self.failures_left > 0:
            self.failures_left -= 1
            raise RuntimeError("order service unavailable")
        self.created.append(payload)
        return CreatedOrder(id=100 + len(self.created), total=Decimal("0"))


class FakePrinter:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.rendered: list = []

    def render(self, kind, model) -> str:
        if self.fail:
            raise RuntimeError("printer offline")
        self.rendered.append((kind, model))
        return f"<html>{model.reason}</html>"


@pytest.fixture(scope="session", autouse=True)
def configure_test_settings():
    settings = get_settings()
    settings.catalog_backend = "static"
    settings.stock_projection_backend = "catalog"
    settings.allow_negative_totals = False
    yield


@pytest.fixture()
def settings() -> Settings:
    return Settings(env="dev", allow_negative_totals=False)


@pytest.fixture()
def catalog() -> Catalog:
    return Catalog(
        products=(
            Product(id=1, name="Brick A", price=Decimal("5000"), quantity=1_000),
            Product(id=2, name="Brick B", price=Decimal("1000"), quantity=0),
        ),
        packages=(
            PackageProduct(id=10, name="Pallet A", product_id=1, quantity=3, quantity_product=50),
            PackageProduct(id=11, name="Pallet B", product_id=2, quantity=0, quantity_product=100),
        ),
        customers=(Customer(id=1, name="Anh Minh", address="12 Tran Phu"),),
        delivers=(Deliver(id=1, name="Van 1", plate_number="29C-12345"),),
    )


@pytest.fixture()
def projection() -> FakeProjection:
    return FakeProjection()


@pytest.fixture()
def orders() -> FakeOrders:
    return FakeOrders()


@pytest.fixture()
def printer() -> FakePrinter:
    return FakePrinter()


@pytest.fixture()
def draft(catalog) -> OrderDraft:
    draft = OrderDraft(customer_id=1, deliver_id=1, delivery_date=date(2026, 10, 20))
    draft.select(0, PackageKey(10), catalog)
    draft.set_amount(0, 2)
    idx = draft.add_line()
    draft.select(idx, ProductKey(1), catalog)
    draft.set_amount(idx, 30)
    return draft


@pytest.fixture()
def place_order_workflow(catalog, orders, projection, printer, settings) -> OrderSubmissionWorkflow:
    return OrderSubmissionWorkflow(
        kind="place_order",
        orders=orders,
        forecast_engine=InventoryForecastEngine(projection),
        printer=printer,
        catalog=catalog,
        settings=settings,
    )


@pytest.fixture()
def failing_printer() -> FakePrinter:
    return FakePrinter(fail=True)
