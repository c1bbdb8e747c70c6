from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, Field

from brickdesk.domain.orders.aggregates import OrderDraft
from brickdesk.domain.wire import ApiModel, Money

OrderKind = Literal["order", "place_order"]


class LinePayload(ApiModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    package_product_id: int | None = None
    amount: int
    price: Money
    sale: Money = Decimal("0")


class _OrderRequestBase(ApiModel):
    model_config = ConfigDict(frozen=True)

    customer_id: int
    deliver_id: int
    sale: Money = Decimal("0")
    amount_customer_payment: Money = Decimal("0")
    ship_cost: Money = Decimal("0")
    created_user_id: int


class OrderCreateRequest(_OrderRequestBase):
    kind: Literal["order"] = Field(default="order", exclude=True)
    product_orders: tuple[LinePayload, ...]

    @property
    def lines(self) -> tuple[LinePayload, ...]:
        return self.product_orders


class PlaceOrderCreateRequest(_OrderRequestBase):
    kind: Literal["place_order"] = Field(default="place_order", exclude=True)
    place_order_product_orders: tuple[LinePayload, ...]
    delivery_date: datetime

    @property
    def lines(self) -> tuple[LinePayload, ...]:
        return self.place_order_product_orders


OrderRequest = OrderCreateRequest | PlaceOrderCreateRequest


class CreatedOrder(ApiModel):
    id: int
    total: Money | None = None


def delivery_datetime(value: date) -> datetime:
    return datetime.combine(value, time(0, 0), tzinfo=timezone.utc)


def build_line_payloads(draft: OrderDraft) -> tuple[LinePayload, ...]:
    return tuple(
        LinePayload(
            product_id=line.product_id,
            package_product_id=line.package_product_id,
            amount=line.amount,
            price=line.price,
            sale=line.sale,
        )
        for line in draft.complete_lines()
    )


def build_order_payload(draft: OrderDraft, kind: OrderKind, created_user_id: int) -> OrderRequest:
    lines = build_line_payloads(draft)
    common = {
        "customer_id": draft.customer_id,
        "deliver_id": draft.deliver_id,
        "sale": draft.sale,
        "amount_customer_payment": draft.amount_customer_payment,
        "ship_cost": draft.ship_cost,
        "created_user_id": created_user_id,
    }
    if kind == "place_order":
        if draft.delivery_date is None:
            raise ValueError("place orders require a delivery date")
        return PlaceOrderCreateRequest(
            **common,
            place_order_product_orders=lines,
            delivery_date=delivery_datetime(draft.delivery_date),
        )
    return OrderCreateRequest(**common, product_orders=lines)
