from brickdesk.domain.catalog.models import (
    Catalog,
    Customer,
    Deliver,
    PackageOption,
    PackageProduct,
    Product,
)

__all__ = [
    "Catalog",
    "Customer",
    "Deliver",
    "PackageOption",
    "PackageProduct",
    "Product",
]
