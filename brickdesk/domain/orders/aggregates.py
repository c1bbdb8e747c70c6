from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.resolver import display_unit_price, price_from_unit_price, resolve
from brickdesk.domain.orders.selection import PackageKey, SelectionKey

ZERO = Decimal("0")


@dataclass
class OrderLine:
    key: SelectionKey | None = None
    product_id: int | None = None
    package_product_id: int | None = None
    amount: int | None = None
    # price of one selected unit: a bare product or a whole package
    price: Decimal | None = None
    sale: Decimal = ZERO

    @property
    def is_complete(self) -> bool:
        return self.key is not None and self.amount is not None and self.price is not None

    @property
    def total(self) -> Decimal:
        if not self.is_complete:
            return ZERO
        return line_total(self.amount, self.price, self.sale)


def line_total(amount: int | Decimal, price: Decimal, sale: Decimal = ZERO) -> Decimal:
    # Unclamped: a discount larger than the subtotal yields a negative figure.
    return Decimal(amount) * price - sale


@dataclass(frozen=True)
class OrderTotals:
    grand_total: Decimal
    order_sale: Decimal
    order_total: Decimal
    amount_customer_payment: Decimal
    remaining_amount: Decimal
    complete_lines: int

    @property
    def display_total(self) -> Decimal:
        return max(ZERO, self.order_total)


def compute_totals(
    lines: Iterable[OrderLine],
    sale: Decimal = ZERO,
    amount_customer_payment: Decimal = ZERO,
) -> OrderTotals:
    complete = [line for line in lines if line.is_complete]
    grand_total = sum((line.total for line in complete), ZERO)
    order_total = grand_total - sale
    return OrderTotals(
        grand_total=grand_total,
        order_sale=sale,
        order_total=order_total,
        amount_customer_payment=amount_customer_payment,
        remaining_amount=order_total - amount_customer_payment,
        complete_lines=len(complete),
    )


@dataclass
class OrderDraft:
    customer_id: int | None = None
    deliver_id: int | None = None
    lines: list[OrderLine] = field(default_factory=lambda: [OrderLine()])
    sale: Decimal = ZERO
    amount_customer_payment: Decimal = ZERO
    ship_cost: Decimal = ZERO
    delivery_date: date | None = None
    totals: OrderTotals = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._recompute()

    def _recompute(self) -> None:
        self.totals = compute_totals(self.lines, self.sale, self.amount_customer_payment)

    @property
    def remaining_amount(self) -> Decimal:
        return self.totals.remaining_amount

    def complete_lines(self) -> list[OrderLine]:
        return [line for line in self.lines if line.is_complete]

    def add_line(self, line: OrderLine | None = None) -> int:
        self.lines.append(line or OrderLine())
        self._recompute()
        return len(self.lines) - 1

    def remove_line(self, index: int) -> None:
        del self.lines[index]
        self._recompute()

    def select(self, index: int, key: SelectionKey, catalog: Catalog) -> OrderLine:
        """Point a line at a product or package and seed its price."""
        unit = resolve(key, catalog)
        line = replace(
            self.lines[index],
            key=key,
            product_id=unit.product_id,
            package_product_id=unit.package_product_id,
            price=unit.seed_price,
        )
        self.lines[index] = line
        self._recompute()
        return line

    def set_amount(self, index: int, amount: int | None) -> None:
        self.lines[index].amount = amount
        self._recompute()

    def set_price(self, index: int, price: Decimal | None) -> None:
        self.lines[index].price = price
        self._recompute()

    def set_unit_price(self, index: int, unit_price: Decimal, catalog: Catalog, places: int = 2) -> None:
        line = self.lines[index]
        if isinstance(line.key, PackageKey):
            package = catalog.package(line.key.package_id)
            # the rounded figure on display is not an edit
            if line.price is not None and unit_price == display_unit_price(
                line.price, package.quantity_product, places
            ):
                return
            line.price = price_from_unit_price(unit_price, package.quantity_product)
        else:
            line.price = unit_price
        self._recompute()

    def unit_price(self, index: int, catalog: Catalog, places: int = 2) -> Decimal | None:
        line = self.lines[index]
        if line.price is None:
            return None
        if isinstance(line.key, PackageKey):
            package = catalog.package(line.key.package_id)
            return display_unit_price(line.price, package.quantity_product, places)
        return line.price

    def set_line_sale(self, index: int, sale: Decimal) -> None:
        self.lines[index].sale = sale
        self._recompute()

    def set_sale(self, sale: Decimal) -> None:
        self.sale = sale
        self._recompute()

    def set_customer_payment(self, amount: Decimal) -> None:
        self.amount_customer_payment = amount
        self._recompute()

    def set_ship_cost(self, ship_cost: Decimal) -> None:
        self.ship_cost = ship_cost
        self._recompute()
