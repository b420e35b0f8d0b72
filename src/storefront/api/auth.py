# src/storefront/api/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from src.storefront.core.config import Settings
from src.storefront.core.db import get_session
from src.storefront.core.security import new_session_id, verify_password
from src.storefront.core.session_store import SessionStore
from src.storefront.crud import admin as crud_admin
from src.storefront.deps.auth import (
    SessionData, clear_session_cookie, get_session_id, get_session_store, get_settings,
    require_admin, set_session_cookie,
)
from src.storefront.schemas.admin import AdminRead, LoginRequest
from src.storefront.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid username or password"


@router.post("/login", response_model=AdminRead)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
    old_session_id: Optional[str] = Depends(get_session_id),
):
    admin = await crud_admin.get_admin_by_username(db, payload.username)
    if not admin or not admin.is_active:
        logger.info("Login rejected for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if not await run_in_threadpool(verify_password, payload.password, admin.password):
        logger.info("Login rejected for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    # never reuse a session id that existed before authentication
    if old_session_id:
        await store.delete(old_session_id)

    session_id = new_session_id()
    await store.set(
        session_id,
        {"admin_id": admin.id, "admin_username": admin.username},
        cfg.SESSION_MAX_AGE,
    )
    set_session_cookie(response, session_id, cfg)
    logger.info("Admin %s logged in", admin.username)
    return admin


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
):
    if session_id:
        await store.delete(session_id)
        logger.info("Session destroyed")
    clear_session_cookie(response, cfg)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=AdminRead)
async def current_admin(
    session: SessionData = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
):
    admin = await crud_admin.get_admin(db, session.admin_id)
    if not admin:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found")
    return admin
