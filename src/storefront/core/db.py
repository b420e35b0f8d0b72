# src/storefront/core/db.py
import logging
from contextlib import suppress
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from src.storefront.core.config import Settings, settings as default_settings


# Logger
logger = logging.getLogger("db_core")
logger.setLevel(logging.DEBUG if default_settings.MODE == "development" else logging.INFO)
if not logger.handlers:
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
    logger.addHandler(ch)


# Globals
async_engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker] = None


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # the builtin lower() only folds ASCII
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


# Async Engine
def _build_async_engine(db_url: str, cfg: Settings) -> AsyncEngine:
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(db_url, echo=cfg.MODE == "development")
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
        return engine
    return create_async_engine(
        db_url,
        echo=cfg.MODE == "development",
        pool_size=cfg.POOL_SIZE,
        max_overflow=5,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


def create_async_db_engine(cfg: Settings = default_settings) -> AsyncEngine:
    global async_engine, async_session_factory

    engine = _build_async_engine(str(cfg.DATABASE_URL), cfg)
    async_engine = engine
    async_session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    logger.info("Async engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


# Session Providers
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    if async_session_factory is None:
        create_async_db_engine()
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Initialize DB tables
async def init_db(cfg: Settings = default_settings):
    if async_engine is None:
        create_async_db_engine(cfg)
    # register tables on the metadata
    from src.storefront.models.admin import Admin  # noqa: F401
    from src.storefront.models.category import Category  # noqa: F401
    from src.storefront.models.product import Product  # noqa: F401
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Async DB initialized")


async def ping_db() -> bool:
    if async_engine is None:
        return False
    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database ping failed")
        return False


async def shutdown():
    global async_engine, async_session_factory
    if async_engine:
        with suppress(Exception):
            await async_engine.dispose()
    async_engine = None
    async_session_factory = None
    logger.info("Database engine disposed")
