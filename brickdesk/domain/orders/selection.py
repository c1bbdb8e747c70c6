from __future__ import annotations

from dataclasses import dataclass
from typing import Union

_PRODUCT_TAGS = {"product", "p"}
_PACKAGE_TAGS = {"package", "k"}


@dataclass(frozen=True)
class ProductKey:
    product_id: int


@dataclass(frozen=True)
class PackageKey:
    package_id: int


SelectionKey = Union[ProductKey, PackageKey]


def parse_selection_key(raw: str) -> SelectionKey:
    """Parse ``product:ID`` / ``package:ID`` (or the short ``p:ID`` / ``k:ID``)."""
    tag, sep, value = raw.strip().partition(":")
    if not sep or not value.strip():
        raise ValueError(f"invalid selection key: {raw!r}")
    try:
        ident = int(value)
    except ValueError as exc:
        raise ValueError(f"invalid selection id in key: {raw!r}") from exc
    tag = tag.strip().lower()
    if tag in _PRODUCT_TAGS:
        return ProductKey(ident)
    if tag in _PACKAGE_TAGS:
        return PackageKey(ident)
    raise ValueError(f"unknown selection kind in key: {raw!r}")


def format_selection_key(key: SelectionKey) -> str:
    if isinstance(key, PackageKey):
        return f"package:{key.package_id}"
    return f"product:{key.product_id}"
