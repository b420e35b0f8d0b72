# src/storefront/schemas/admin.py

from typing import Optional
from pydantic import BaseModel, Field

from src.storefront.schemas.common import CamelModel


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)


class AdminCreate(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    full_name: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = True


class AdminRead(CamelModel):
    id: str
    username: str
    full_name: Optional[str] = None
