# src/storefront/core/initial_data.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.storefront.core.config import Settings, settings as default_settings
from src.storefront.core.errors import ConflictError
from src.storefront.crud import admin as crud_admin
from src.storefront.crud import category as crud_category
from src.storefront.schemas.admin import AdminCreate
from src.storefront.schemas.category import CategoryCreate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Beverages", "slug": "beverages", "icon": "fas fa-wine-bottle"},
    {"name": "Snacks & Sweets", "slug": "snacks-sweets", "icon": "fas fa-cookie-bite"},
    {"name": "Vegetables", "slug": "vegetables", "icon": "fas fa-carrot"},
    {"name": "Dairy & Eggs", "slug": "dairy-eggs", "icon": "fas fa-cheese"},
    {"name": "Meat & Fish", "slug": "meat-fish", "icon": "fas fa-drumstick-bite"},
    {"name": "Household", "slug": "household", "icon": "fas fa-spray-can"},
]


async def init_super_admin(session: AsyncSession, cfg: Settings = default_settings):
    username = cfg.FIRST_SUPERUSER_USERNAME
    password = cfg.FIRST_SUPERUSER_PASSWORD

    if not username or not password:
        logger.warning("Superuser credentials not set, skipping superuser creation")
        return None

    existing = await crud_admin.get_admin_by_username(session, username)
    if existing:
        logger.info("Admin already exists: %s", username)
        return existing

    admin_in = AdminCreate(
        username=username,
        password=password,
        full_name=cfg.FIRST_SUPERUSER_FULL_NAME,
    )
    try:
        new_admin = await crud_admin.create_admin(session, admin_in, rounds=cfg.PASSWORD_HASH_ROUNDS)
    except ConflictError:
        # another worker bootstrapped first
        logger.info("Admin %s was created concurrently", username)
        return await crud_admin.get_admin_by_username(session, username)
    logger.info("Admin created: %s", username)
    return new_admin


async def init_categories(session: AsyncSession):
    existing = await crud_category.list_categories(session)
    if existing:
        return []
    created = []
    for data in DEFAULT_CATEGORIES:
        try:
            created.append(await crud_category.create_category(session, CategoryCreate(**data)))
        except ConflictError:
            logger.info("Category %s already exists", data["name"])
    logger.info("Created %d default categories", len(created))
    return created


async def init_default_data(session: AsyncSession, cfg: Settings = default_settings):
    """Create the default admin and categories. Safe to run repeatedly."""
    await init_super_admin(session, cfg)
    await init_categories(session)
