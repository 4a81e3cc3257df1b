from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "E-Government Portal"
    env: str = "dev"

    mongo_uri: str = Field("mongodb://localhost:27017", alias="MONGO_URI")
    mongo_db: str = Field("egov_portal", alias="MONGO_DB")

    secret_key: str = Field("change-me", alias="SECRET_KEY")
    session_ttl_seconds: int = Field(8 * 3600, alias="SESSION_TTL_SECONDS")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")

    upload_dir: str = Field("uploads", alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(5 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    allowed_attachment_types: List[str] = Field(
        default_factory=lambda: [
            "application/pdf",
            "image/jpeg",
            "image/png",
            "image/webp",
        ],
        alias="ALLOWED_ATTACHMENT_TYPES",
    )

    notifications_limit: int = Field(10, alias="NOTIFICATIONS_LIMIT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("text", alias="LOG_FORMAT")

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        alias="CORS_ORIGINS",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
