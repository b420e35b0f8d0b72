# src/storefront/schemas/category.py

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from src.storefront.core.slugs import slugify
from src.storefront.schemas.common import CamelModel, blank_strings_to_missing


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100)
    icon: Optional[str] = Field(default=None, max_length=50)

    @model_validator(mode="before")
    @classmethod
    def _drop_blanks(cls, data: Any) -> Any:
        return blank_strings_to_missing(data, nullable=("slug", "icon"))

    @model_validator(mode="after")
    def _derive_slug(self) -> "CategoryCreate":
        self.slug = slugify(self.slug or self.name)
        if not self.slug:
            raise ValueError("slug must contain at least one letter or digit")
        return self


class CategoryRead(CamelModel):
    id: str
    name: str
    slug: str
    icon: Optional[str] = None
    created_at: datetime
