#src.storefront.deps.auth.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from src.storefront.core.config import Settings
from src.storefront.core.security import sign_session_id, unsign_session_id
from src.storefront.core.session_store import SessionStore


class SessionData(BaseModel):
    session_id: str
    admin_id: str
    admin_username: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def set_session_cookie(response: Response, session_id: str, cfg: Settings) -> None:
    response.set_cookie(
        cfg.SESSION_COOKIE_NAME,
        sign_session_id(session_id, cfg.SECRET_KEY),
        max_age=cfg.SESSION_MAX_AGE,
        httponly=True,
        secure=cfg.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response, cfg: Settings) -> None:
    response.delete_cookie(
        cfg.SESSION_COOKIE_NAME,
        httponly=True,
        secure=cfg.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def get_session_id(request: Request, cfg: Settings = Depends(get_settings)) -> Optional[str]:
    return unsign_session_id(request.cookies.get(cfg.SESSION_COOKIE_NAME), cfg.SECRET_KEY)


async def get_current_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> Optional[SessionData]:
    if not session_id:
        return None
    data = await store.get(session_id)
    if not data or not data.get("admin_id"):
        return None
    return SessionData(
        session_id=session_id,
        admin_id=data["admin_id"],
        admin_username=data.get("admin_username", ""),
    )


async def require_admin(
    response: Response,
    session: Optional[SessionData] = Depends(get_current_session),
    store: SessionStore = Depends(get_session_store),
    cfg: Settings = Depends(get_settings),
) -> SessionData:
    """Let the request through only when it carries an authenticated session.

    Each successful check pushes the session expiry forward, both in the
    store and on the cookie.
    """
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    await store.touch(session.session_id, cfg.SESSION_MAX_AGE)
    set_session_cookie(response, session.session_id, cfg)
    return session
