"""Typed inputs for the createOrder and createCustomer mutations.

Attributes are snake_case in Python and serialized to the API's camelCase
names by :func:`to_variables`. Plain mappings are accepted by the client as
well; these models are a convenience, not a requirement.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Input(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaxType(StrEnum):
    PERCENT = "PERCENT"  # tax_rate is a percentage of the item price
    PRICE = "PRICE"  # tax_rate is a fixed amount


class ItemVariantInput(_Input):
    key: str
    value: str | None = None


class OrderMetadataInput(_Input):
    key: str
    value: str | None = None


class ItemInput(_Input):
    name: str
    description: str | None = None
    images: list[str] | None = None
    amount: float | None = None
    quantity: int | None = None
    variant: list[ItemVariantInput] | None = None
    tax_rate: float | None = None
    tax_type: TaxType | None = None


class OrderInput(_Input):
    """Order to pass through Flowycart's checkout."""

    ref_id: str | None = None  # vendor order id
    intent: bool = False
    items: list[ItemInput] = Field(default_factory=list)
    currency: str
    currency_value: float | None = None  # relative to the shop's default currency
    success_url: str
    cancel_url: str
    customer_id: str | None = None
    metadata: list[OrderMetadataInput] | None = None


class CountryRef(_Input):
    id: str


class ZoneRef(_Input):
    id: str


class AddressInput(_Input):
    id: str | None = None  # set to update an existing address
    first_name: str | None = None
    last_name: str | None = None
    line1: str
    line2: str | None = None
    zip: str
    phone: str | None = None
    country: CountryRef | None = None
    zone: ZoneRef | None = None
    city: str | None = None


class CustomerInput(_Input):
    ref_id: str  # vendor customer id
    first_name: str | None = None
    last_name: str | None = None
    email: str
    addresses: list[AddressInput] | None = None


def to_variables(params: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Return ``params`` as a JSON-ready dict keyed by API field names."""
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(params)
