# src/storefront/models/category.py

from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from src.storefront.models.base import TIMESTAMP, new_id, utcnow


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(nullable=False, unique=True, max_length=100)
    slug: str = Field(nullable=False, unique=True, index=True, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
