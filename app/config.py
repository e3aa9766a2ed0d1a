"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils import normalize_base_url

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="CineBusca", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    catalog_api_url: str = Field(
        default="http://localhost:5002/api", alias="CATALOG_API_URL"
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500", alias="IMAGE_BASE_URL"
    )

    request_timeout_seconds: float = Field(
        default=10.0, alias="REQUEST_TIMEOUT", gt=0, le=120
    )
    connect_timeout_seconds: float = Field(
        default=5.0, alias="CONNECT_TIMEOUT", gt=0, le=60
    )

    load_on_startup: bool = Field(default=True, alias="LOAD_ON_STARTUP")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("catalog_api_url", mode="before")
    @classmethod
    def _parse_catalog_api_url(cls, value: object) -> str:
        """Strip whitespace and trailing slashes from the catalog API URL."""

        normalized = normalize_base_url(str(value) if value is not None else None)
        if not normalized:
            raise ValueError("CATALOG_API_URL must not be empty")
        if not normalized.startswith(("http://", "https://")):
            raise ValueError("CATALOG_API_URL must be an http(s) URL")
        return normalized

    @field_validator("image_base_url", mode="before")
    @classmethod
    def _parse_image_base_url(cls, value: object) -> str:
        return normalize_base_url(str(value) if value is not None else None) or ""

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
