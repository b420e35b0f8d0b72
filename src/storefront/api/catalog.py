# src/storefront/api/catalog.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.storefront.core.db import get_session
from src.storefront.core.errors import NotFoundError
from src.storefront.crud import category as crud_category
from src.storefront.crud import product as crud_product
from src.storefront.schemas.category import CategoryRead
from src.storefront.schemas.product import ProductFilter, ProductRead, ProductStats

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=list[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_session)):
    return await crud_category.list_categories(db)


@router.get("/categories/{slug}", response_model=CategoryRead)
async def get_category(slug: str, db: AsyncSession = Depends(get_session)):
    category = await crud_category.get_category_by_slug(db, slug)
    if category is None:
        raise NotFoundError("Category not found")
    return category


@router.get("/products", response_model=list[ProductRead])
async def list_products(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None, max_length=255),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
):
    filters = ProductFilter(category_id=category_id or None, search=search or None, limit=limit, offset=offset)
    return await crud_product.list_products(db, filters)


# registered before /products/{product_id} so "stats" is not taken for an id
@router.get("/products/stats", response_model=ProductStats)
async def product_stats(db: AsyncSession = Depends(get_session)):
    return await crud_product.get_stats(db)


@router.get("/products/slug/{slug}", response_model=ProductRead)
async def get_product_by_slug(slug: str, db: AsyncSession = Depends(get_session)):
    product = await crud_product.get_product_by_slug(db, slug)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.get("/products/{product_id}", response_model=ProductRead)
async def get_product(product_id: str, db: AsyncSession = Depends(get_session)):
    product = await crud_product.get_product(db, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product
