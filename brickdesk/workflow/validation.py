from __future__ import annotations

from brickdesk.core.errors import OrderValidationError
from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.aggregates import OrderDraft
from brickdesk.domain.orders.commands import OrderKind
from brickdesk.domain.orders.selection import PackageKey


def validation_reasons(
    draft: OrderDraft,
    kind: OrderKind,
    *,
    allow_negative_totals: bool = False,
    catalog: Catalog | None = None,
) -> list[str]:
    reasons: list[str] = []
    if draft.customer_id is None:
        reasons.append("customer must be selected")
    if draft.deliver_id is None:
        reasons.append("deliverer must be selected")
    if kind == "place_order" and draft.delivery_date is None:
        reasons.append("delivery date is required for place orders")

    complete = [(idx, line) for idx, line in enumerate(draft.lines, start=1) if line.is_complete]
    if not complete:
        reasons.append("at least one complete line is required")

    for idx, line in complete:
        if line.product_id is None:
            reasons.append(f"line {idx}: product is not resolved")
        if line.amount is not None and line.amount < 0:
            reasons.append(f"line {idx}: amount must not be negative")
        if isinstance(line.key, PackageKey):
            if line.package_product_id != line.key.package_id:
                reasons.append(f"line {idx}: package id does not match the selection")
            if catalog is not None:
                # raises ResolutionError for packages missing from the catalog
                package = catalog.package(line.key.package_id)
                if line.product_id != package.product_id:
                    reasons.append(f"line {idx}: product does not match package {package.id}")
        elif line.package_product_id is not None:
            reasons.append(f"line {idx}: product line must not carry a package id")
        if not allow_negative_totals and line.total < 0:
            reasons.append(f"line {idx}: discount exceeds the line subtotal")

    if complete and not allow_negative_totals and draft.totals.order_total < 0:
        reasons.append("order discount exceeds the order total")
    return reasons


def validate_draft(
    draft: OrderDraft,
    kind: OrderKind,
    *,
    allow_negative_totals: bool = False,
    catalog: Catalog | None = None,
) -> None:
    reasons = validation_reasons(
        draft,
        kind,
        allow_negative_totals=allow_negative_totals,
        catalog=catalog,
    )
    if reasons:
        raise OrderValidationError(reasons)
