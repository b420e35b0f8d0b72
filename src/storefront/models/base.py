# src/storefront/models/base.py
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime

# timestamptz on PostgreSQL
TIMESTAMP = DateTime(timezone=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())
