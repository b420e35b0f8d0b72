# src/storefront/crud/product.py

from typing import Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.storefront.core.errors import NotFoundError, ReferencedEntityMissing
from src.storefront.core.slugs import slugify
from src.storefront.crud.common import store_operation
from src.storefront.models.base import utcnow
from src.storefront.models.category import Category
from src.storefront.models.product import Product
from src.storefront.schemas.product import ProductCreate, ProductFilter, ProductPatch, ProductStats


async def _ensure_category(session: AsyncSession, category_id: str) -> None:
    if await session.get(Category, category_id) is None:
        raise ReferencedEntityMissing("category_id", category_id, "Category does not exist")


@store_operation
async def list_products(session: AsyncSession, filters: Optional[ProductFilter] = None) -> Sequence[Product]:
    filters = filters or ProductFilter()
    query = select(Product)
    if filters.category_id:
        query = query.where(Product.category_id == filters.category_id)
    if filters.search:
        query = query.where(Product.name.icontains(filters.search, autoescape=True))
    query = query.order_by(Product.created_at.desc())
    if filters.offset:
        query = query.offset(filters.offset)
    if filters.limit:
        query = query.limit(filters.limit)
    result = await session.execute(query)
    return result.scalars().all()


@store_operation
async def get_product(session: AsyncSession, product_id: str) -> Product | None:
    return await session.get(Product, product_id)


@store_operation
async def get_product_by_slug(session: AsyncSession, slug: str) -> Product | None:
    result = await session.execute(select(Product).where(Product.slug == slug))
    return result.scalar_one_or_none()


@store_operation
async def create_product(session: AsyncSession, product_in: ProductCreate) -> Product:
    await _ensure_category(session, product_in.category_id)
    product = Product(**product_in.model_dump(), slug=slugify(product_in.name))
    session.add(product)
    await session.commit()
    await session.refresh(product)
    return product


@store_operation
async def update_product(session: AsyncSession, product_id: str, patch: ProductPatch) -> Product:
    product = await session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")

    changes = patch.changes()
    if "category_id" in changes:
        await _ensure_category(session, changes["category_id"])
    for field, value in changes.items():
        setattr(product, field, value)
    if "name" in changes:
        product.slug = slugify(changes["name"])
    product.updated_at = utcnow()

    session.add(product)
    await session.commit()
    await session.refresh(product)
    return product


@store_operation
async def delete_product(session: AsyncSession, product_id: str) -> None:
    # deleting an unknown id is not an error
    await session.execute(delete(Product).where(Product.id == product_id))
    await session.commit()


@store_operation
async def get_stats(session: AsyncSession) -> ProductStats:
    # full scan; fine for a small catalog
    result = await session.execute(select(Product.stock))
    stocks = result.scalars().all()
    in_stock = sum(1 for stock in stocks if stock and stock > 0)
    return ProductStats(total=len(stocks), in_stock=in_stock, out_of_stock=len(stocks) - in_stock)
