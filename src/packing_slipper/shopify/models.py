"""Pydantic models for the parts of a Shopify order printed on the slip."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ShopifyModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ShippingAddress(_ShopifyModel):
    first_name: str = ""
    last_name: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    province_code: str = ""
    zip: str = ""
    country: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class LineItem(_ShopifyModel):
    name: str
    quantity: int
    sku: str = ""

    @field_validator("sku", mode="before")
    @classmethod
    def _null_sku(cls, value: object) -> object:
        return "" if value is None else value


class Order(_ShopifyModel):
    id: int
    name: str
    created_at: datetime
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress)
    line_items: list[LineItem] = Field(default_factory=list)

    @field_validator("shipping_address", mode="before")
    @classmethod
    def _missing_address(cls, value: object) -> object:
        # Orders without physical items come back with `null` here.
        return {} if value is None else value
