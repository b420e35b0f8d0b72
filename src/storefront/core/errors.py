# src/storefront/core/errors.py
from typing import Any, Optional


class StoreError(Exception):
    """Unexpected failure inside the relational store or its driver."""

    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class NotFoundError(StoreError):
    message = "Not found"


class ConflictError(StoreError):
    message = "Resource already exists"


class ReferencedEntityMissing(StoreError):
    """A foreign key points at a row that does not exist."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        super().__init__(message or f"Referenced {field} does not exist")
        self.field = field
        self.value = value


class UploadError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PayloadValidationError(Exception):
    """Request payload failed schema validation."""

    def __init__(self, message: str, errors: list):
        super().__init__(message)
        self.message = message
        self.errors = errors
