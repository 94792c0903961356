# This file provides shared helpers for API endpoint tests.
# It exists so tests can swap the book store for fakes or for a throwaway SQLite database.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient

from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.db_access import DatabaseClient
from src.api.dependencies import get_book_store, get_config, get_database_client
from src.api.services.book_store import BookStore


def build_test_config(*, database_url: str = "sqlite+pysqlite:///:memory:") -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Book Management API",
        host="0.0.0.0",
        port=3000,
        environment="test",
        database_url=database_url,
        books_table_name="books",
        books_base_path="/api/books",
        seed_sample_data=False,
        allowed_origins=[],
        app_version="1.0.0",
    )


def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+pysqlite:///{tmp_path / 'books_test.db'}"


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables if existing_tables is not None else {"books"}

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables

    def validate_identifier(self, identifier: str) -> str:
        return identifier

    def execute(self, *_: Any, **__: Any) -> int:
        return 0


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    book_store: Any | None = None,
    raise_server_exceptions: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client
    if book_store is not None:
        app.dependency_overrides[get_book_store] = lambda: book_store

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@contextmanager
def sqlite_test_client(tmp_path: Path, *, seed_sample_data: bool = False) -> Iterator[TestClient]:
    """Yield a TestClient wired to a real store on a fresh SQLite file."""

    config = build_test_config(database_url=sqlite_url(tmp_path)).model_copy(
        update={"seed_sample_data": seed_sample_data}
    )
    db_client = DatabaseClient(database_url=config.database_url)
    store = BookStore(db=db_client, table_name=config.books_table_name)
    try:
        with api_test_client(config=config, db_client=db_client, book_store=store) as client:
            yield client
    finally:
        db_client.dispose()
