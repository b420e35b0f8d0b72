# src/storefront/crud/category.py

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.storefront.crud.common import store_operation
from src.storefront.models.category import Category
from src.storefront.schemas.category import CategoryCreate


@store_operation
async def list_categories(session: AsyncSession) -> Sequence[Category]:
    result = await session.execute(select(Category).order_by(Category.name))
    return result.scalars().all()


@store_operation
async def get_category(session: AsyncSession, category_id: str) -> Category | None:
    return await session.get(Category, category_id)


@store_operation
async def get_category_by_slug(session: AsyncSession, slug: str) -> Category | None:
    result = await session.execute(select(Category).where(Category.slug == slug))
    return result.scalar_one_or_none()


@store_operation
async def create_category(session: AsyncSession, category_in: CategoryCreate) -> Category:
    category = Category(name=category_in.name, slug=category_in.slug, icon=category_in.icon)
    session.add(category)
    await session.commit()
    await session.refresh(category)
    return category
