# src/storefront/crud/common.py
import functools
import logging
from typing import Any, Callable, Coroutine

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.storefront.core.errors import ConflictError, ReferencedEntityMissing, StoreError

logger = logging.getLogger(__name__)


def store_operation(func: Callable[..., Coroutine[Any, Any, Any]]):
    """Translate driver errors into store errors.

    The wrapped coroutine takes the session as its first argument; on failure
    the session is rolled back before the store error is raised.
    """
    @functools.wraps(func)
    async def wrapper(session: AsyncSession, *args, **kwargs):
        try:
            return await func(session, *args, **kwargs)
        except IntegrityError as e:
            await session.rollback()
            detail = str(e.orig).lower()
            if "foreign key" in detail:
                raise ReferencedEntityMissing("category_id", None) from e
            logger.info("Constraint violation in %s: %s", func.__name__, e.orig)
            raise ConflictError() from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception("Store failure in %s", func.__name__)
            raise StoreError() from e
    return wrapper
