# src/storefront/schemas/product.py

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from src.storefront.models.product import DEFAULT_UNIT
from src.storefront.schemas.common import CamelModel, blank_strings_to_missing

NULLABLE_FIELDS = ("sku", "description", "image_url")
REQUIRED_ON_ROW = ("name", "price", "unit", "stock", "category_id", "is_active")
# NUMERIC(10, 0)
MAX_PRICE = Decimal(10) ** 10


def _whole_units(value: Optional[Decimal]) -> Optional[Decimal]:
    # prices are stored with zero fractional digits
    if value is None:
        return None
    return value.quantize(Decimal(1), rounding=ROUND_HALF_UP)


class ProductCreate(CamelModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    sku: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, lt=MAX_PRICE)
    unit: str = Field(default=DEFAULT_UNIT, min_length=1, max_length=50)
    stock: int = Field(default=0, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category_id: str = Field(min_length=1, max_length=36)
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def _drop_blanks(cls, data: Any) -> Any:
        return blank_strings_to_missing(data, nullable=NULLABLE_FIELDS)

    @field_validator("price", mode="after")
    @classmethod
    def _round_price(cls, v: Decimal) -> Decimal:
        return _whole_units(v)


class ProductPatch(CamelModel):
    """Settable product fields. Anything else in the payload (slug, id,
    timestamps) is ignored."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    sku: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, lt=MAX_PRICE)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=50)
    stock: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    is_active: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_blanks(cls, data: Any) -> Any:
        return blank_strings_to_missing(data, nullable=NULLABLE_FIELDS, required=REQUIRED_ON_ROW)

    @field_validator("price", mode="after")
    @classmethod
    def _round_price(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _whole_units(v)

    @model_validator(mode="after")
    def _reject_null_required(self) -> "ProductPatch":
        for name in REQUIRED_ON_ROW:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ProductFilter(CamelModel):
    # search text is matched as given, surrounding spaces included
    model_config = ConfigDict(str_strip_whitespace=False)

    category_id: Optional[str] = None
    search: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class ProductRead(CamelModel):
    id: str
    name: str
    slug: str
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Decimal
    unit: str
    stock: int
    image_url: Optional[str] = None
    category_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductStats(CamelModel):
    total: int
    in_stock: int
    out_of_stock: int
