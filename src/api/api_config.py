# This file defines runtime settings for the book API in one place.
# It exists so the store location, route prefix, seeding, and CORS can be configured without code edits.
# The config loader reads environment variables and applies defaults for local development.
# It also validates the table name and base path to prevent unsafe SQL identifier usage.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

DEFAULT_DATABASE_URL = "sqlite:///./books.db"


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Book Management API"
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "local"
    database_url: str = DEFAULT_DATABASE_URL
    books_table_name: str = "books"
    books_base_path: str = "/api/books"
    seed_sample_data: bool = True
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "1.0.0"

    @field_validator("books_base_path")
    @classmethod
    def validate_books_base_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("books_base_path must start with '/'.")
        cleaned = value.rstrip("/")
        if not cleaned:
            raise ValueError("books_base_path must not be the root path.")
        return cleaned

    @field_validator("books_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("port must be between 1 and 65535.")
        return value

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("database_url must not be empty.")
        return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Book Management API"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 3000),
        "environment": os.getenv("ENV", "local"),
        "database_url": os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        "books_table_name": os.getenv("API_BOOKS_TABLE_NAME", "books"),
        "books_base_path": os.getenv("API_BOOKS_BASE_PATH", "/api/books"),
        "seed_sample_data": _env_bool("API_SEED_SAMPLE_DATA", True),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "1.0.0"),
    }

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
