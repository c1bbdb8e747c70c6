from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.aggregates import OrderDraft, OrderLine
from brickdesk.domain.orders.commands import OrderKind
from brickdesk.domain.orders.selection import PackageKey, ProductKey, SelectionKey, parse_selection_key


class ProductSelection(BaseModel):
    kind: Literal["product"] = "product"
    id: int

    def to_key(self) -> SelectionKey:
        return ProductKey(self.id)


class PackageSelection(BaseModel):
    kind: Literal["package"] = "package"
    id: int

    def to_key(self) -> SelectionKey:
        return PackageKey(self.id)


Selection = Annotated[Union[ProductSelection, PackageSelection], Field(discriminator="kind")]


def _blank_as_zero(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0")
    return value


# the form sends null or "" for an untouched amount
AmountOrZero = Annotated[Decimal, BeforeValidator(_blank_as_zero)]


class LineInput(BaseModel):
    selection: Selection | None = None
    amount: int | None = None
    price: Decimal | None = Field(default=None, description="price of one product or one whole package")
    unit_price: Decimal | None = Field(default=None, description="per-product price; converted for packages")
    sale: AmountOrZero = Decimal("0")

    @field_validator("selection", mode="before")
    @classmethod
    def _parse_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value.strip():
                return None
            key = parse_selection_key(value)
            if isinstance(key, PackageKey):
                return {"kind": "package", "id": key.package_id}
            return {"kind": "product", "id": key.product_id}
        return value


class DraftInput(BaseModel):
    customer_id: int | None = None
    deliver_id: int | None = None
    delivery_date: date | None = None
    sale: AmountOrZero = Decimal("0")
    amount_customer_payment: AmountOrZero = Decimal("0")
    ship_cost: AmountOrZero = Decimal("0")
    lines: list[LineInput] = Field(default_factory=list)

    def to_draft(self, catalog: Catalog, places: int = 2) -> OrderDraft:
        draft = OrderDraft(
            customer_id=self.customer_id,
            deliver_id=self.deliver_id,
            delivery_date=self.delivery_date,
            lines=[],
        )
        for line in self.lines:
            idx = draft.add_line(OrderLine())
            if line.selection is not None:
                draft.select(idx, line.selection.to_key(), catalog)
            if line.price is not None:
                draft.set_price(idx, line.price)
            if line.unit_price is not None:
                draft.set_unit_price(idx, line.unit_price, catalog, places)
            draft.set_amount(idx, line.amount)
            draft.set_line_sale(idx, line.sale)
        draft.set_sale(self.sale)
        draft.set_customer_payment(self.amount_customer_payment)
        draft.set_ship_cost(self.ship_cost)
        return draft


class SubmissionCreateRequest(BaseModel):
    kind: OrderKind = "place_order"
    created_user_id: int
    draft: DraftInput
