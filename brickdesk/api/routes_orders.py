from __future__ import annotations

from fastapi import APIRouter, Depends

from brickdesk.api.deps import get_catalog
from brickdesk.api.schemas import DraftInput
from brickdesk.core.config import get_settings
from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.selection import format_selection_key

router = APIRouter(tags=["orders"])


@router.get("/catalog/packages")
def list_package_options(catalog: Catalog = Depends(get_catalog)):
    return {"packages": [option.model_dump(mode="json") for option in catalog.package_options()]}


@router.post("/orders/quote")
def quote_order(request: DraftInput, catalog: Catalog = Depends(get_catalog)):
    settings = get_settings()
    draft = request.to_draft(catalog, settings.unit_price_places)
    lines = []
    for idx, line in enumerate(draft.lines):
        unit_price = draft.unit_price(idx, catalog, settings.unit_price_places)
        lines.append(
            {
                "selection": format_selection_key(line.key) if line.key else None,
                "product_id": line.product_id,
                "package_product_id": line.package_product_id,
                "amount": line.amount,
                "price": str(line.price) if line.price is not None else None,
                "unit_price": str(unit_price) if unit_price is not None else None,
                "sale": str(line.sale),
                "total": str(line.total),
                "complete": line.is_complete,
            }
        )
    totals = draft.totals
    return {
        "lines": lines,
        "totals": {
            "grand_total": str(totals.grand_total),
            "order_sale": str(totals.order_sale),
            "order_total": str(totals.order_total),
            "display_total": str(totals.display_total),
            "amount_customer_payment": str(totals.amount_customer_payment),
            "remaining_amount": str(totals.remaining_amount),
            "complete_lines": totals.complete_lines,
        },
    }
