# src/storefront/models/product.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field

from src.storefront.models.base import TIMESTAMP, new_id, utcnow

DEFAULT_UNIT = "piece"


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(nullable=False, max_length=255)
    slug: str = Field(nullable=False, unique=True, index=True, max_length=255)
    sku: Optional[str] = Field(default=None, unique=True, max_length=100)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    price: Decimal = Field(nullable=False, max_digits=10, decimal_places=0)
    unit: str = Field(default=DEFAULT_UNIT, nullable=False, max_length=50)
    stock: int = Field(default=0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category_id: str = Field(foreign_key="categories.id", nullable=False, index=True, max_length=36)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
