# src/storefront/crud/admin.py

from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.storefront.crud.common import store_operation
from src.storefront.models.admin import Admin
from src.storefront.schemas.admin import AdminCreate
from src.storefront.core.security import hash_password


@store_operation
async def get_admin(session: AsyncSession, admin_id: str) -> Admin | None:
    return await session.get(Admin, admin_id)


@store_operation
async def get_admin_by_username(session: AsyncSession, username: str) -> Admin | None:
    result = await session.execute(select(Admin).where(Admin.username == username))
    return result.scalar_one_or_none()


@store_operation
async def create_admin(session: AsyncSession, admin_in: AdminCreate, rounds: Optional[int] = None) -> Admin:
    admin = Admin(
        username=admin_in.username,
        password=await run_in_threadpool(hash_password, admin_in.password, rounds),
        full_name=admin_in.full_name,
        is_active=admin_in.is_active,
    )
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    return admin
