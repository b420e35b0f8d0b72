# src/storefront/api/admin.py
import logging
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from src.storefront.core.config import Settings
from src.storefront.core.db import get_session
from src.storefront.core.errors import PayloadValidationError
from src.storefront.core.initial_data import init_default_data
from src.storefront.crud import category as crud_category
from src.storefront.crud import product as crud_product
from src.storefront.deps.auth import SessionData, get_settings, require_admin
from src.storefront.schemas.category import CategoryCreate, CategoryRead
from src.storefront.schemas.common import MessageResponse
from src.storefront.schemas.product import ProductCreate, ProductPatch, ProductRead
from src.storefront.service.uploads import UPLOAD_URL_PREFIX, read_image, store_image

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: Type[ModelT], data: Any, message: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadValidationError(message, e.errors(include_url=False)) from e


async def read_payload(request: Request) -> tuple[Any, Optional[UploadFile]]:
    """Return the submitted fields and the optional ``image`` file.

    JSON bodies and multipart/urlencoded forms are both accepted.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            return await request.json(), None
        except ValueError:
            raise PayloadValidationError(
                "Invalid request body",
                [{"loc": ("body",), "msg": "Body is not valid JSON", "type": "json_invalid"}],
            )

    form = await request.form()
    image = form.get("image")
    data = {key: value for key, value in form.multi_items() if key != "image" and isinstance(value, str)}
    if not isinstance(image, UploadFile) or not image.filename:
        image = None
    return data, image


async def _save_upload(image: Optional[UploadFile], cfg: Settings) -> Optional[str]:
    if image is None:
        return None
    data = await read_image(image, cfg.MAX_UPLOAD_SIZE)
    return await store_image(data, image.content_type, cfg.UPLOAD_DIR)


def _discard_upload(image_url: Optional[str], cfg: Settings) -> None:
    if image_url:
        path = Path(cfg.UPLOAD_DIR) / image_url[len(UPLOAD_URL_PREFIX) + 1:]
        path.unlink(missing_ok=True)


@router.post("/products", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: Request,
    current_admin: SessionData = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    cfg: Settings = Depends(get_settings),
):
    data, image = await read_payload(request)
    product_in = parse_payload(ProductCreate, data, "Invalid product data")

    image_url = await _save_upload(image, cfg)
    if image_url:
        product_in.image_url = image_url
    try:
        product = await crud_product.create_product(db, product_in)
    except Exception:
        _discard_upload(image_url, cfg)
        raise
    logger.info("Product %s created by %s", product.id, current_admin.admin_username)
    return product


@router.put("/products/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: str,
    request: Request,
    current_admin: SessionData = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
    cfg: Settings = Depends(get_settings),
):
    data, image = await read_payload(request)
    patch = parse_payload(ProductPatch, data, "Invalid product data")

    image_url = await _save_upload(image, cfg)
    if image_url:
        patch.image_url = image_url
    try:
        product = await crud_product.update_product(db, product_id, patch)
    except Exception:
        _discard_upload(image_url, cfg)
        raise
    logger.info("Product %s updated by %s", product.id, current_admin.admin_username)
    return product


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    current_admin: SessionData = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
):
    await crud_product.delete_product(db, product_id)
    logger.info("Product %s deleted by %s", product_id, current_admin.admin_username)


@router.post("/categories", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    current_admin: SessionData = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
):
    data, _ = await read_payload(request)
    category_in = parse_payload(CategoryCreate, data, "Invalid category data")
    return await crud_category.create_category(db, category_in)


@router.post("/init-data", response_model=MessageResponse)
async def init_data(
    db: AsyncSession = Depends(get_session),
    cfg: Settings = Depends(get_settings),
):
    await init_default_data(db, cfg)
    return {"message": "Data initialized successfully"}
