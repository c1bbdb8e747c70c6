from __future__ import annotations

from typing import Protocol

from brickdesk.clients.http import RemoteApiClient
from brickdesk.domain.orders.commands import CreatedOrder, OrderRequest

ORDER_PATHS = {
    "order": "/api/orders",
    "place_order": "/api/placeorders",
}


class OrderPersistenceSource(Protocol):
    def create(self, payload: OrderRequest) -> CreatedOrder:
        ...


class HTTPOrderGateway:
    def __init__(self, client: RemoteApiClient | None = None):
        self.client = client or RemoteApiClient()

    def create(self, payload: OrderRequest) -> CreatedOrder:
        raw = self.client.post_json(ORDER_PATHS[payload.kind], payload.to_wire())
        if not isinstance(raw, dict):
            raise ValueError(f"unexpected order creation response: {raw!r}")
        return CreatedOrder.model_validate(raw)
