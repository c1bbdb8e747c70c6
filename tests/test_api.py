from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from brickdesk.api.deps import get_catalog, get_registry, get_workflow_factory
from brickdesk.domain.forecast import InventoryForecastEngine
from brickdesk.main import app
from brickdesk.workflow import OrderSubmissionWorkflow, SubmissionRegistry


@pytest.fixture()
def registry() -> SubmissionRegistry:
    return SubmissionRegistry()


@pytest.fixture()
def client(catalog, orders, projection, printer, settings, registry):

    def factory(kind, cat):
        return OrderSubmissionWorkflow(
            kind=kind,
            orders=orders,
            forecast_engine=InventoryForecastEngine(projection),
            printer=printer,
            catalog=cat,
            settings=settings,
        )

    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_workflow_factory] = lambda: factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _draft_body(**overrides) -> dict:
    body = {
        "customer_id": 1,
        "deliver_id": 1,
        "delivery_date": "2026-10-20",
        "amount_customer_payment": "100000",
        "lines": [
            {"selection": "package:10", "amount": 2},
            {"selection": "product:1", "amount": 30, "sale": "10000"},
        ],
    }
    body.update(overrides)
    return body


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_package_options_list_base_product(client):
    resp = client.get("/catalog/packages")
    assert resp.status_code == 200
    labels = [p["label"] for p in resp.json()["packages"]]
    assert labels[0] == "Pallet A - Brick A (50 units/package)"


def test_quote_resolves_lines_and_totals(client):
    resp = client.post("/orders/quote", json=_draft_body())
    assert resp.status_code == 200
    body = resp.json()

    package_line, product_line = body["lines"]
    assert package_line["selection"] == "package:10"
    assert package_line["price"] == "250000"
    assert package_line["unit_price"] == "5000.00"
    assert package_line["total"] == "500000"
    assert product_line["total"] == "140000"
    assert body["totals"]["grand_total"] == "640000"
    assert body["totals"]["remaining_amount"] == "540000"
    assert body["totals"]["complete_lines"] == 2


def test_quote_converts_unit_price_for_packages(client):
    draft = _draft_body(lines=[{"selection": "package:10", "amount": 1, "unit_price": "4800"}])
    resp = client.post("/orders/quote", json=draft)
    assert resp.status_code == 200
    assert resp.json()["lines"][0]["price"] == "240000"


def test_submission_commits_when_stock_suffices(client, orders, registry):
    resp = client.post("/submissions", json={"created_user_id": 7, "draft": _draft_body()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["submission_id"].startswith("sub-")
    assert body["state"] == "idle"
    assert body["order"]["id"] == 101
    assert len(orders.created) == 1

    assert len(registry) == 0
    assert client.get(f"/submissions/{body['submission_id']}").status_code == 404


def test_submission_shortage_then_confirm(client, orders, projection, registry):
    projection.estimates[(1, 10)] = 0
    resp = client.post("/submissions", json={"created_user_id": 7, "draft": _draft_body()})
    body = resp.json()
    assert body["state"] == "awaiting_confirmation"
    assert body["forecast"]["has_any_shortage"] is True
    assert orders.attempts == 0
    assert len(registry) == 1
    assert client.get(f"/submissions/{body['submission_id']}").json()["state"] == "awaiting_confirmation"

    confirmed = client.post(f"/submissions/{body['submission_id']}/confirm")
    assert confirmed.status_code == 200
    assert confirmed.json()["state"] == "idle"
    assert len(orders.created) == 1
    assert len(registry) == 0


def test_submission_shortage_then_cancel(client, orders, projection, registry):
    projection.estimates[(1, 10)] = 0
    body = client.post("/submissions", json={"created_user_id": 7, "draft": _draft_body()}).json()

    cancelled = client.post(f"/submissions/{body['submission_id']}/cancel")
    assert cancelled.json()["state"] == "idle"
    assert cancelled.json()["forecast"] is None
    assert len(registry) == 0

    late = client.post(f"/submissions/{body['submission_id']}/confirm")
    assert late.status_code == 404
    assert orders.attempts == 0


def test_submission_retry_after_commit_failure(client, orders, registry):
    orders.failures_left = 1
    body = client.post("/submissions", json={"created_user_id": 7, "draft": _draft_body()}).json()
    assert body["state"] == "failed"
    assert "order service unavailable" in body["error"]
    assert len(registry) == 1

    retried = client.post(f"/submissions/{body['submission_id']}/retry")
    assert retried.json()["state"] == "idle"
    assert orders.attempts == 2
    assert len(registry) == 0


def test_submission_validation_returns_reasons(client, orders):
    draft = _draft_body(customer_id=None, delivery_date=None)
    resp = client.post("/submissions", json={"created_user_id": 7, "draft": draft})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "validation"
    assert "customer must be selected" in body["reasons"]
    assert "delivery date is required for place orders" in body["reasons"]
    assert orders.attempts == 0


def test_unknown_package_is_not_found(client):
    draft = _draft_body(lines=[{"selection": "package:404", "amount": 1}])
    resp = client.post("/orders/quote", json=draft)
    assert resp.status_code == 404
    assert resp.json()["error"] == "resolution"


def test_unknown_submission_is_not_found(client):
    resp = client.get("/submissions/sub-missing")
    assert resp.status_code == 404


def test_confirm_in_wrong_state_is_a_conflict(client, orders):
    orders.failures_left = 1
    body = client.post("/submissions", json={"created_user_id": 7, "draft": _draft_body()}).json()
    assert body["state"] == "failed"

    resp = client.post(f"/submissions/{body['submission_id']}/confirm")
    assert resp.status_code == 409
    assert resp.json()["error"] == "workflow_state"


def test_null_amounts_are_treated_as_zero(client):
    draft = _draft_body(sale=None, ship_cost="", amount_customer_payment=None)
    draft["lines"][1]["sale"] = None
    resp = client.post("/orders/quote", json=draft)
    assert resp.status_code == 200
    totals = resp.json()["totals"]
    assert totals["order_sale"] == "0"
    assert totals["grand_total"] == "650000"
    assert totals["remaining_amount"] == "650000"


def test_quote_echoing_displayed_unit_price_keeps_package_price(client):
    draft = _draft_body(lines=[{"selection": "package:10", "amount": 1, "price": "100000", "unit_price": "2000.00"}])
    resp = client.post("/orders/quote", json=draft)
    assert resp.json()["lines"][0]["price"] == "100000"
