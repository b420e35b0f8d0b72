# src/storefront/service/uploads.py
import logging
import mimetypes
import secrets
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from src.storefront.core.errors import UploadError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


async def read_image(upload: UploadFile, max_size: int) -> bytes:
    """Read an uploaded image into memory, rejecting non-images and
    anything larger than ``max_size`` bytes."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise UploadError("Only image files are allowed")
    data = await upload.read(max_size + 1)
    if len(data) > max_size:
        raise UploadError(f"Image exceeds the {max_size // (1024 * 1024)}MB limit")
    return data


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def store_image(data: bytes, content_type: str, upload_dir: str) -> str:
    """Write image bytes under ``upload_dir`` and return the public URL."""
    ext = mimetypes.guess_extension(content_type) or ""
    filename = f"{secrets.token_hex(16)}{ext}"
    await run_in_threadpool(_write, Path(upload_dir) / filename, data)
    logger.info("Stored upload %s (%d bytes)", filename, len(data))
    return f"{UPLOAD_URL_PREFIX}/{filename}"
