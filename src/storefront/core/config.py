# src/storefront/core/config.py
import os
import warnings
import logging
from typing import Optional, Union

from pydantic import Field, PostgresDsn, AnyHttpUrl, ValidationInfo, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

SQLITE_FALLBACK_URI = "sqlite+aiosqlite:///instance/storefront.db"


class Settings(BaseSettings):
    # ---------------- General ----------------
    MODE: str = "development"
    PROJECT_NAME: str = "Storefront"
    API_VERSION: str = "v1"

    # ---------------- Security ----------------
    SECRET_KEY: Optional[str] = None
    PASSWORD_HASH_ROUNDS: int = 16

    # ---------------- Main DB ----------------
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: int = 5432
    DATABASE_NAME: Optional[str] = None
    DATABASE_URL: Optional[Union[PostgresDsn, str]] = Field(default=None, validate_default=True)

    # ---------------- Sessions ----------------
    SESSION_BACKEND: str = "memory"
    SESSION_COOKIE_NAME: str = "sid"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60

    # ---------------- Redis ----------------
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_URL: Optional[str] = None

    # ---------------- Uploads ----------------
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    # ---------------- Superuser ----------------
    FIRST_SUPERUSER_USERNAME: str = "admin"
    FIRST_SUPERUSER_PASSWORD: str = "admin123"
    FIRST_SUPERUSER_FULL_NAME: str = "Administrator"
    INIT_DEFAULT_DATA: bool = True

    # ---------------- Performance ----------------
    DB_POOL_SIZE: int = 10
    WEB_CONCURRENCY: int = 2

    # ---------------- Computed ----------------
    @computed_field
    @property
    def WORKERS(self) -> int:
        # in-memory sessions live in one process
        if self.SESSION_BACKEND == "memory":
            return 1
        return max(1, self.WEB_CONCURRENCY)

    @computed_field
    @property
    def POOL_SIZE(self) -> int:
        return max(self.DB_POOL_SIZE // self.WORKERS, 2)

    @computed_field
    @property
    def redis_url(self) -> str:
        return self.REDIS_URL or f"redis://{self.REDIS_HOST or 'localhost'}:{self.REDIS_PORT}"

    # ---------------- DB URI Validators ----------------
    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def assemble_db_uri(cls, v: Optional[str], info: ValidationInfo) -> str:
        if v:
            return str(v)
        data = info.data
        if not data.get("DATABASE_HOST"):
            return SQLITE_FALLBACK_URI
        db_name = str(data.get("DATABASE_NAME") or "").lstrip("/")
        return str(PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data.get("DATABASE_USER") or "",
            password=data.get("DATABASE_PASSWORD") or "",
            host=data.get("DATABASE_HOST"),
            port=int(data.get("DATABASE_PORT") or 5432),
            path=f"{db_name}"
        ))

    @field_validator("SESSION_BACKEND", mode="after")
    @classmethod
    def check_session_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("memory", "redis"):
            raise ValueError(f"Unknown session backend: {v}")
        return v

    # ---------------- CORS ----------------
    BACKEND_CORS_ORIGINS: Union[list[str], list[AnyHttpUrl], str] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="after")
    @classmethod
    def assemble_backend_cors_origins(cls, v: Union[str, list[str]]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return [str(origin) for origin in v]
        raise ValueError(f"Invalid cors origins: {v}")

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [origin.rstrip("/") for origin in self.BACKEND_CORS_ORIGINS or []]

    # ---------------- Validation ----------------
    @model_validator(mode="after")
    def check_required_secrets(self) -> "Settings":
        if self.MODE != "development" and self.SECRET_KEY in (None, "", "changethis"):
            raise ValueError("SECRET_KEY is not set or insecure. Update in production!")
        if self.SECRET_KEY is None and self.MODE == "development":
            warnings.warn("SECRET_KEY is not set. Using insecure defaults in development.")
            self.SECRET_KEY = "dev-secret-key-change-in-production"
        return self

    @model_validator(mode="after")
    def check_worker_sessions(self) -> "Settings":
        if self.MODE != "development" and self.SESSION_BACKEND == "memory" and self.WEB_CONCURRENCY > 1:
            logger.warning("Memory session backend runs a single worker; set SESSION_BACKEND=redis to scale out")
        return self

    @property
    def is_sqlite(self) -> bool:
        return str(self.DATABASE_URL).startswith("sqlite")

    # ---------------- Model Config ----------------
    model_config = SettingsConfigDict(
        env_file=os.path.expanduser(".env"),
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
