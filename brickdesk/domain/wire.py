from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _money_to_json(value: Decimal) -> int | float:
    value = Decimal(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Amounts are Decimal in memory; the remote API speaks plain JSON numbers.
Money = Annotated[Decimal, PlainSerializer(_money_to_json, return_type=int | float, when_used="json")]


class ApiModel(BaseModel):
    """Base for models exchanged with the remote API (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
