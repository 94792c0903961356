# This file provides dependency factories for FastAPI routes and startup hooks.
# It exists so the database client and book store are created once and injected, never imported as globals.
# Tests replace these factories through `app.dependency_overrides` to get isolated stores.

from __future__ import annotations

from functools import lru_cache

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DatabaseClient
from src.api.services.book_store import BookStore


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    config = get_api_config()
    return DatabaseClient(database_url=config.database_url)


@lru_cache(maxsize=1)
def get_book_store() -> BookStore:
    config = get_api_config()
    db_client = get_database_client()
    return BookStore(db=db_client, table_name=config.books_table_name)


def get_config() -> ApiConfig:
    return get_api_config()
