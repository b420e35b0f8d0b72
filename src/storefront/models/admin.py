# src/storefront/models/admin.py

from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from src.storefront.models.base import TIMESTAMP, new_id, utcnow


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    username: str = Field(nullable=False, unique=True, index=True, max_length=50)
    password: str = Field(nullable=False, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
