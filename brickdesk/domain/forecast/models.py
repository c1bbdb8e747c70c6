from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from brickdesk.domain.wire import ApiModel


class ForecastItem(ApiModel):
    model_config = ConfigDict(frozen=True)

    product_id: int | None = None
    package_product_id: int | None = None
    required_quantity: int = Field(ge=0)


class ForecastRequest(ApiModel):
    model_config = ConfigDict(frozen=True)

    delivery_date: datetime
    items: tuple[ForecastItem, ...]


class ForecastLine(ApiModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    product_id: int | None = None
    package_product_id: int | None = None
    product_name: str = ""
    required_quantity: int
    estimated_quantity: int
    current_quantity: int = 0
    shortage: int = 0
    has_shortage: bool = False


class ForecastReport(ApiModel):
    model_config = ConfigDict(frozen=True)

    delivery_date: datetime | None = None
    forecasts: tuple[ForecastLine, ...] = ()
    has_any_shortage: bool = False

    def shortages(self) -> list[ForecastLine]:
        return [line for line in self.forecasts if line.has_shortage]
