from __future__ import annotations

from decimal import Decimal

from pydantic import ConfigDict, Field

from brickdesk.core.errors import ResolutionError
from brickdesk.domain.wire import ApiModel, Money


class CatalogModel(ApiModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Product(CatalogModel):
    id: int
    name: str
    price: Money = Field(ge=0, description="sale price of a single unit")
    quantity: int = 0


class PackageProduct(CatalogModel):
    id: int
    name: str
    product_id: int
    quantity: int = Field(default=0, description="packages in stock")
    quantity_product: int = Field(gt=0, description="product units in one package")


class Customer(CatalogModel):
    id: int
    name: str
    address: str = ""
    phone_number: str = ""


class Deliver(CatalogModel):
    id: int
    name: str
    phone_number: str = ""
    plate_number: str = ""


class PackageOption(CatalogModel):
    package_id: int
    label: str
    product_id: int
    quantity_product: int
    package_price: Money


class Catalog(CatalogModel):
    products: tuple[Product, ...] = ()
    packages: tuple[PackageProduct, ...] = ()
    customers: tuple[Customer, ...] = ()
    delivers: tuple[Deliver, ...] = ()

    def find_product(self, product_id: int) -> Product | None:
        return next((p for p in self.products if p.id == product_id), None)

    def find_package(self, package_id: int) -> PackageProduct | None:
        return next((p for p in self.packages if p.id == package_id), None)

    def product(self, product_id: int) -> Product:
        product = self.find_product(product_id)
        if product is None:
            raise ResolutionError(f"unknown product: {product_id}")
        return product

    def package(self, package_id: int) -> PackageProduct:
        package = self.find_package(package_id)
        if package is None:
            raise ResolutionError(f"unknown package: {package_id}")
        return package

    def customer(self, customer_id: int) -> Customer:
        customer = next((c for c in self.customers if c.id == customer_id), None)
        if customer is None:
            raise ResolutionError(f"unknown customer: {customer_id}")
        return customer

    def deliver(self, deliver_id: int) -> Deliver:
        deliver = next((d for d in self.delivers if d.id == deliver_id), None)
        if deliver is None:
            raise ResolutionError(f"unknown deliver: {deliver_id}")
        return deliver

    def package_options(self) -> list[PackageOption]:
        options: list[PackageOption] = []
        for package in self.packages:
            base = self.find_product(package.product_id)
            base_name = base.name if base else f"#{package.product_id}"
            price = base.price * package.quantity_product if base else Decimal("0")
            options.append(
                PackageOption(
                    package_id=package.id,
                    label=f"{package.name} - {base_name} ({package.quantity_product} units/package)",
                    product_id=package.product_id,
                    quantity_product=package.quantity_product,
                    package_price=price,
                )
            )
        return options
