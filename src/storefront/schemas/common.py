# src/storefront/schemas/common.py
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageResponse(BaseModel):
    message: str


def blank_strings_to_missing(data: Any, nullable: Iterable[str] = (), required: Iterable[str] = ()) -> Any:
    """Form posts send "" for untouched inputs.

    Nullable fields become None. Fields in ``required`` keep the blank so
    validation rejects it. Any other blank field is treated as not sent.
    """
    if not isinstance(data, dict):
        return data
    nullable = set(nullable)
    required = set(required)
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, str) and not value.strip():
            if to_snake(key) in nullable:
                cleaned[key] = None
            elif to_snake(key) in required:
                cleaned[key] = value
            continue
        cleaned[key] = value
    return cleaned
