"""Resolve a line selection into product identity and package pricing.

A line always stores the total price for one selected unit: the unit price
of a bare product, or the price of a whole package. When the user edits the
per-unit price of a package line the package price is recomputed from the
package's current ``quantity_product``, never from a previously displayed
per-unit figure, so repeated edits cannot drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from brickdesk.domain.catalog import Catalog
from brickdesk.domain.orders.selection import PackageKey, SelectionKey


@dataclass(frozen=True)
class ResolvedUnit:
    product_id: int
    package_product_id: int | None
    units_per_selection: int
    unit_price: Decimal
    seed_price: Decimal

    @property
    def is_package(self) -> bool:
        return self.package_product_id is not None


def resolve(key: SelectionKey, catalog: Catalog) -> ResolvedUnit:
    if isinstance(key, PackageKey):
        package = catalog.package(key.package_id)
        product = catalog.product(package.product_id)
        return ResolvedUnit(
            product_id=package.product_id,
            package_product_id=package.id,
            units_per_selection=package.quantity_product,
            unit_price=product.price,
            seed_price=product.price * package.quantity_product,
        )

    product = catalog.product(key.product_id)
    return ResolvedUnit(
        product_id=product.id,
        package_product_id=None,
        units_per_selection=1,
        unit_price=product.price,
        seed_price=product.price,
    )


def display_unit_price(price: Decimal, units_per_selection: int, places: int = 2) -> Decimal:
    if units_per_selection <= 0:
        raise ValueError("units_per_selection must be positive")
    quantum = Decimal(1).scaleb(-places)
    return (price / units_per_selection).quantize(quantum, rounding=ROUND_HALF_UP)


def price_from_unit_price(unit_price: Decimal, units_per_selection: int) -> Decimal:
    if units_per_selection <= 0:
        raise ValueError("units_per_selection must be positive")
    return unit_price * units_per_selection
