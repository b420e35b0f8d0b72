# src/storefront/main.py
from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException

from src.storefront.core.config import Settings, settings
from src.storefront.core.db import create_async_db_engine, get_session, init_db, ping_db, shutdown
from src.storefront.core.errors import (
    ConflictError, NotFoundError, PayloadValidationError, ReferencedEntityMissing, StoreError, UploadError,
)
from src.storefront.core.initial_data import init_default_data
from src.storefront.core.session_store import SessionStore, build_session_store
from src.storefront.service.uploads import UPLOAD_URL_PREFIX

from src.storefront.api.auth import router as auth_router
from src.storefront.api.catalog import router as catalog_router
from src.storefront.api.admin import router as admin_router

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def format_errors(errors) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data", "errors": format_errors(exc.errors())},
        )

    @app.exception_handler(PayloadValidationError)
    async def payload_validation_handler(request: Request, exc: PayloadValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message, "errors": format_errors(exc.errors)},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if isinstance(exc, NotFoundError):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": exc.message})
        if isinstance(exc, ReferencedEntityMissing):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "message": exc.message,
                    "errors": [{"field": to_camel(exc.field), "message": exc.message, "type": "missing_reference"}],
                },
            )
        if isinstance(exc, ConflictError):
            return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": exc.message})
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app(cfg: Settings = settings, session_store: Optional[SessionStore] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            logger.info("Starting %s (%s mode)", cfg.PROJECT_NAME, cfg.MODE)
            Path(cfg.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

            #  Initialize DB
            create_async_db_engine(cfg)
            await init_db(cfg)

            # Session store
            app.state.session_store = session_store or build_session_store(cfg)

            if cfg.INIT_DEFAULT_DATA:
                async for session in get_session():
                    await init_default_data(session, cfg)

            yield

        finally:
            # Shutdown logic
            store = getattr(app.state, "session_store", None)
            if store is not None:
                await store.close()
            await shutdown()
            logger.info("Shutting down %s", cfg.PROJECT_NAME)

    # Create FastAPI app
    app = FastAPI(
        title=cfg.PROJECT_NAME,
        version=cfg.API_VERSION,
        lifespan=lifespan
    )
    app.state.settings = cfg

    if cfg.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cfg.all_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Health check route
    @app.get("/health")
    async def health_check(request: Request):
        store: SessionStore = request.app.state.session_store
        try:
            sessions = "alive" if await store.ping() else "dead"
        except StoreError:
            sessions = "error"
        return {
            "status": "ok",
            "database": "alive" if await ping_db() else "dead",
            "sessions": sessions,
        }

    app.include_router(auth_router, prefix="/api")
    app.include_router(catalog_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    # Serve uploaded images
    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=cfg.UPLOAD_DIR, check_dir=False), name="uploads")

    return app


app = create_app()
