# tests/test_crud.py
from decimal import Decimal

import pytest

from conftest import run_with_session
from src.storefront.core.errors import ConflictError, NotFoundError, ReferencedEntityMissing
from src.storefront.core.initial_data import DEFAULT_CATEGORIES, init_categories, init_default_data, init_super_admin
from src.storefront.crud import admin as crud_admin
from src.storefront.crud import category as crud_category
from src.storefront.crud import product as crud_product
from src.storefront.models.admin import Admin
from src.storefront.models.base import utcnow
from src.storefront.models.category import Category
from src.storefront.models.product import Product
from src.storefront.schemas.category import CategoryCreate
from src.storefront.schemas.product import ProductCreate, ProductFilter, ProductPatch


async def _category(session, name="Beverages"):
    return await crud_category.create_category(session, CategoryCreate(name=name))


def _product(category_id, **fields):
    data = {"name": "Green Tea", "price": Decimal("15000"), "category_id": category_id}
    data.update(fields)
    return ProductCreate(**data)


def test_create_product_derives_slug(settings):
    async def scenario(session):
        category = await _category(session)
        return await crud_product.create_product(session, _product(category.id, name="Cà Phê Sữa"))

    product = run_with_session(str(settings.DATABASE_URL), scenario)
    assert product.slug == "ca-phe-sua"
    assert product.unit == "piece"
    assert product.stock == 0
    assert product.updated_at >= product.created_at


def test_create_product_with_unknown_category(settings):
    async def scenario(session):
        await crud_product.create_product(session, _product("missing"))

    with pytest.raises(ReferencedEntityMissing) as exc:
        run_with_session(str(settings.DATABASE_URL), scenario)
    assert exc.value.field == "category_id"


def test_duplicate_slug_is_conflict(settings):
    async def scenario(session):
        category = await _category(session)
        await crud_product.create_product(session, _product(category.id, name="Green Tea"))
        await crud_product.create_product(session, _product(category.id, name="GREEN tea!"))

    with pytest.raises(ConflictError):
        run_with_session(str(settings.DATABASE_URL), scenario)


def test_update_unknown_product(settings):
    async def scenario(session):
        await crud_product.update_product(session, "missing", ProductPatch(stock=1))

    with pytest.raises(NotFoundError):
        run_with_session(str(settings.DATABASE_URL), scenario)


def test_update_keeps_unset_fields(settings):
    async def scenario(session):
        category = await _category(session)
        created = await crud_product.create_product(session, _product(category.id, sku="TEA-1"))
        before = created.updated_at
        updated = await crud_product.update_product(session, created.id, ProductPatch(price=Decimal("12000")))
        return before, updated

    before, updated = run_with_session(str(settings.DATABASE_URL), scenario)
    assert updated.price == Decimal("12000")
    assert updated.sku == "TEA-1"
    assert updated.slug == "green-tea"
    assert updated.updated_at >= before


def test_delete_missing_product_is_not_an_error(settings):
    async def scenario(session):
        await crud_product.delete_product(session, "missing")
        category = await _category(session)
        product = await crud_product.create_product(session, _product(category.id))
        await crud_product.delete_product(session, product.id)
        return await crud_product.get_product(session, product.id)

    assert run_with_session(str(settings.DATABASE_URL), scenario) is None


def test_search_and_stats(settings):
    async def scenario(session):
        category = await _category(session)
        await crud_product.create_product(session, _product(category.id, name="Green Tea", stock=5))
        await crud_product.create_product(session, _product(category.id, name="Milk Tea", stock=0))
        await crud_product.create_product(session, _product(category.id, name="100% Juice", stock=2))
        tea = await crud_product.list_products(session, ProductFilter(search="TEA"))
        percent = await crud_product.list_products(session, ProductFilter(search="0%"))
        underscore = await crud_product.list_products(session, ProductFilter(search="_"))
        stats = await crud_product.get_stats(session)
        return tea, percent, underscore, stats

    tea, percent, underscore, stats = run_with_session(str(settings.DATABASE_URL), scenario)
    assert {p.name for p in tea} == {"Green Tea", "Milk Tea"}
    assert [p.name for p in percent] == ["100% Juice"]
    assert underscore == []
    assert (stats.total, stats.in_stock, stats.out_of_stock) == (3, 2, 1)


def test_init_default_data_is_idempotent(settings):
    async def scenario(session):
        await init_default_data(session, settings)
        await init_default_data(session, settings)
        categories = await crud_category.list_categories(session)
        admin = await crud_admin.get_admin_by_username(session, settings.FIRST_SUPERUSER_USERNAME)
        return categories, admin

    categories, admin = run_with_session(str(settings.DATABASE_URL), scenario)
    assert len(categories) == len(DEFAULT_CATEGORIES)
    assert admin is not None
    assert admin.password != settings.FIRST_SUPERUSER_PASSWORD


def test_timestamps_are_timezone_aware():
    assert utcnow().tzinfo is not None
    for table in (Admin.__table__, Category.__table__, Product.__table__):
        assert table.c.created_at.type.timezone is True


def test_bootstrap_hashes_with_configured_cost(settings):
    cfg = settings.model_copy(update={"PASSWORD_HASH_ROUNDS": 6})

    async def scenario(session):
        return await init_super_admin(session, cfg)

    admin = run_with_session(str(settings.DATABASE_URL), scenario)
    assert admin.password.startswith("$scrypt$ln=6,")


def test_bootstrap_tolerates_rows_created_concurrently(settings, monkeypatch):
    real_get_admin = crud_admin.get_admin_by_username
    real_list_categories = crud_category.list_categories
    lookups = []

    async def stale_get_admin(session, username):
        lookups.append(username)
        if len(lookups) == 1:
            return None
        return await real_get_admin(session, username)

    async def stale_list_categories(session):
        return []

    async def scenario(session):
        await init_default_data(session, settings)
        monkeypatch.setattr(crud_admin, "get_admin_by_username", stale_get_admin)
        monkeypatch.setattr(crud_category, "list_categories", stale_list_categories)
        admin = await init_super_admin(session, settings)
        created = await init_categories(session)
        return admin, created, await real_list_categories(session)

    admin, created, categories = run_with_session(str(settings.DATABASE_URL), scenario)
    assert admin.username == settings.FIRST_SUPERUSER_USERNAME
    assert created == []
    assert len(categories) == len(DEFAULT_CATEGORIES)
