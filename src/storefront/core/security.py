# src/storefront/core/security.py
import functools
import logging
import secrets
from typing import Optional

from jose import jws, JWSError
from passlib.context import CryptContext

from src.storefront.core.config import settings

logger = logging.getLogger(__name__)


# scrypt is memory-hard; rounds is log2(N)
@functools.lru_cache(maxsize=None)
def password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["scrypt"], deprecated="auto", scrypt__rounds=rounds)


SESSION_SIGNING_ALGORITHM = "HS256"


# Password
def hash_password(password: str, rounds: Optional[int] = None) -> str:
    return password_context(rounds or settings.PASSWORD_HASH_ROUNDS).hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """
    Check a candidate password against a stored digest.

    The comparison inside passlib is constant-time. A digest that cannot be
    parsed counts as a mismatch rather than an error, so a corrupted admin
    row can never turn into an authentication bypass.
    """
    if not password or not hashed:
        return False
    try:
        # cost parameters are read from the digest itself
        return password_context(settings.PASSWORD_HASH_ROUNDS).verify(password, hashed)
    except (ValueError, TypeError):
        logger.warning("Stored password digest is malformed")
        return False


# Session ids
def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, key: Optional[str] = None) -> str:
    return jws.sign(session_id.encode("utf-8"), key or settings.SECRET_KEY, algorithm=SESSION_SIGNING_ALGORITHM)


def unsign_session_id(token: Optional[str], key: Optional[str] = None) -> Optional[str]:
    if not token:
        return None
    try:
        payload = jws.verify(token, key or settings.SECRET_KEY, algorithms=[SESSION_SIGNING_ALGORITHM])
    except JWSError:
        return None
    return payload.decode("utf-8")
