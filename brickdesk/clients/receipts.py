"""Fund receipt printed after an order is created.

The remote API renders the receipt template; we only assemble its fields.
Field aliases and labels match the server-side template.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol

import httpx
from pydantic import Field

from brickdesk.clients.http import RemoteApiClient
from brickdesk.core.errors import AuxiliaryError
from brickdesk.domain.catalog import Customer
from brickdesk.domain.orders.commands import CreatedOrder, OrderKind, OrderRequest, PlaceOrderCreateRequest
from brickdesk.domain.wire import ApiModel

RECEIPT_PATHS = {
    "order": "/api/orders/receipt",
    "place_order": "/api/placeorders/receipt",
}

DEFAULT_CUSTOMER_NAME = "Khách hàng"


class ReceiptPrintModel(ApiModel):
    title: str = Field(alias="Tieu_De")
    partner_label: str = Field(default="Người nộp tiền", alias="Nhan_Doi_Tac")
    printed_at: str = Field(alias="Ngay_Thang_Nam")
    partner_name: str = Field(alias="Doi_Tac")
    address: str = Field(default="", alias="Dia_Chi")
    reason: str = Field(alias="Ly_Do")
    amount: str = Field(alias="Gia_Tri_Phieu")
    day: str = Field(alias="Ngay")
    month: str = Field(alias="Thang")
    year: str = Field(alias="Nam")
    signer_label: str = Field(default="NGƯỜI NỘP TIỀN", alias="Nhan_Ky_Ten")


class ReceiptPrinter(Protocol):
    def render(self, kind: OrderKind, model: ReceiptPrintModel) -> str:
        ...


def format_amount(value: Decimal) -> str:
    """Format money with ``.`` thousands and ``,`` decimals."""
    text = f"{value:,.2f}" if value != value.to_integral_value() else f"{int(value):,}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def build_receipt_model(
    payload: OrderRequest,
    created: CreatedOrder,
    customer: Customer | None,
    now: datetime,
) -> ReceiptPrintModel:
    name = customer.name if customer else DEFAULT_CUSTOMER_NAME
    if isinstance(payload, PlaceOrderCreateRequest):
        title = "PHIẾU THU (ĐẶT HÀNG)"
        delivery = payload.delivery_date.strftime("%d/%m/%Y")
        reason = f"Thanh toán cho đặt hàng #{created.id} - Người đặt hàng: {name} - Ngày giao hàng: {delivery}"
    else:
        title = "PHIẾU THU"
        reason = f"Thanh toán cho đơn hàng #{created.id} - Khách hàng: {name}"
    return ReceiptPrintModel(
        title=title,
        printed_at=now.strftime("%d/%m/%Y %H:%M"),
        partner_name=name,
        address=customer.address if customer else "",
        reason=reason,
        amount=format_amount(Decimal(payload.amount_customer_payment)),
        day=f"{now.day:02d}",
        month=f"{now.month:02d}",
        year=str(now.year),
    )


class HTTPReceiptPrinter:
    def __init__(self, client: RemoteApiClient | None = None):
        self.client = client or RemoteApiClient()

    def render(self, kind: OrderKind, model: ReceiptPrintModel) -> str:
        try:
            markup = self.client.post_json(RECEIPT_PATHS[kind], model.model_dump(mode="json", by_alias=True))
        except httpx.HTTPError as exc:
            raise AuxiliaryError(f"receipt rendering failed: {exc}") from exc
        if not isinstance(markup, str):
            raise AuxiliaryError(f"receipt endpoint returned {type(markup).__name__}, expected HTML")
        return markup
