from __future__ import annotations

from decimal import Decimal

import pytest

from brickdesk.core.errors import ResolutionError
from brickdesk.domain.orders.resolver import display_unit_price, price_from_unit_price, resolve
from brickdesk.domain.orders.selection import PackageKey, ProductKey, format_selection_key, parse_selection_key


def test_parse_selection_key_long_and_short_forms():
    assert parse_selection_key("product:7") == ProductKey(7)
    assert parse_selection_key("package:9") == PackageKey(9)
    assert parse_selection_key("p:7") == ProductKey(7)
    assert parse_selection_key("k:9") == PackageKey(9)
    assert format_selection_key(PackageKey(9)) == "package:9"


@pytest.mark.parametrize("raw", ["", "product", "product:", "crate:1", "package:abc"])
def test_parse_selection_key_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_selection_key(raw)


def test_resolve_product_uses_unit_price(catalog):
    unit = resolve(ProductKey(1), catalog)
    assert unit.product_id == 1
    assert unit.package_product_id is None
    assert unit.seed_price == Decimal("5000")
    assert unit.is_package is False


def test_resolve_package_points_at_underlying_product(catalog):
    unit = resolve(PackageKey(10), catalog)
    assert unit.product_id == 1
    assert unit.package_product_id == 10
    assert unit.units_per_selection == 50
    assert unit.seed_price == Decimal("250000")


def test_resolve_unknown_package_fails(catalog):
    with pytest.raises(ResolutionError):
        resolve(PackageKey(999), catalog)


def test_unit_price_round_trip_has_no_drift():
    price = Decimal("100000")
    shown = display_unit_price(price, 100)
    assert shown == Decimal("1000.00")
    for _ in range(5):
        price = price_from_unit_price(shown, 100)
        shown = display_unit_price(price, 100)
    assert price == Decimal("100000")


def test_display_unit_price_rounds_to_places():
    assert display_unit_price(Decimal("100000"), 3) == Decimal("33333.33")
    assert display_unit_price(Decimal("100000"), 3, places=0) == Decimal("33333")
