# tests/conftest.py
import asyncio
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "8")
os.environ.setdefault("INIT_DEFAULT_DATA", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from src.storefront.core.config import Settings
from src.storefront.core.session_store import MemorySessionStore
from src.storefront.main import create_app
# register tables on the metadata
from src.storefront.models.admin import Admin  # noqa: F401
from src.storefront.models.category import Category  # noqa: F401
from src.storefront.models.product import Product  # noqa: F401

ADMIN_CREDENTIALS = {"username": "admin", "password": "admin123"}


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        MODE="test",
        SECRET_KEY="test-secret-key",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SESSION_BACKEND="memory",
        PASSWORD_HASH_ROUNDS=8,
        INIT_DEFAULT_DATA=True,
    )


@pytest.fixture()
def session_store():
    return MemorySessionStore()


@pytest.fixture()
def app(settings, session_store):
    return create_app(settings, session_store=session_store)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_client(client):
    r = client.post("/api/auth/login", json=ADMIN_CREDENTIALS)
    assert r.status_code == 200
    return client


@pytest.fixture()
def categories(client):
    r = client.get("/api/categories")
    assert r.status_code == 200
    return r.json()


@pytest.fixture()
def category_id(categories):
    return categories[0]["id"]


def create_product(client, category_id, **fields):
    data = {"name": "Green Tea", "price": "15000", "categoryId": category_id, "stock": "10"}
    data.update(fields)
    r = client.post("/api/products", data=data)
    assert r.status_code == 201, r.text
    return r.json()


def run_with_session(db_url, fn):
    """Run ``fn(session)`` against a fresh engine on ``db_url``."""
    async def _main():
        engine = create_async_engine(db_url)
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        factory = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with factory() as session:
                return await fn(session)
        finally:
            await engine.dispose()

    return asyncio.run(_main())
