from brickdesk.domain.orders.aggregates import OrderDraft, OrderLine, OrderTotals, compute_totals, line_total
from brickdesk.domain.orders.selection import PackageKey, ProductKey, SelectionKey, parse_selection_key

__all__ = [
    "OrderDraft",
    "OrderLine",
    "OrderTotals",
    "PackageKey",
    "ProductKey",
    "SelectionKey",
    "compute_totals",
    "line_total",
    "parse_selection_key",
]
