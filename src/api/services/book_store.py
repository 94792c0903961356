# This file implements the data-access layer for the books table.
# It exists so routers can create, read, update, and delete books without embedding SQL.
# Every operation is awaitable; the blocking SQLAlchemy work runs in the worker thread pool.
# Store failures surface as typed errors so callers never have to match on driver messages.

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.api.db_access import DatabaseClient

T = TypeVar("T")

BOOK_FIELDS: tuple[str, ...] = (
    "title",
    "author",
    "isbn",
    "published_year",
    "genre",
    "description",
)

# SQLite, PostgreSQL and MySQL spellings of a unique-key failure.
_UNIQUE_FIELD_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)"),
    re.compile(r"duplicate key value violates unique constraint.*?Key \((\w+)\)", re.DOTALL),
    re.compile(r"Duplicate entry .* for key '(?:\w+\.)?(\w+)'"),
)


class StoreError(Exception):
    """Any failure raised by the underlying store, with the raw store message attached."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConstraintViolation(StoreError):
    """A unique constraint rejected the write; `field` names the violated column when known."""

    def __init__(self, message: str, *, field: str | None) -> None:
        self.field = field
        super().__init__(message)


def _raw_message(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    return str(original) if original is not None else str(exc)


def classify_store_error(exc: SQLAlchemyError) -> StoreError:
    """Translate a SQLAlchemy failure into the store's typed error hierarchy."""

    message = _raw_message(exc)
    if isinstance(exc, IntegrityError):
        for pattern in _UNIQUE_FIELD_PATTERNS:
            match = pattern.search(message)
            if match:
                return ConstraintViolation(message, field=match.group(1))
    return StoreError(message)


def business_params(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Pick the six writable book columns; missing optional ones are stored as NULL."""

    return {name: fields.get(name) for name in BOOK_FIELDS}


class BookStore:
    """Async CRUD access to the books table."""

    def __init__(self, *, db: DatabaseClient, table_name: str = "books") -> None:
        self.db = db
        self.table = db.validate_identifier(table_name)

    async def list_books(self) -> list[dict[str, Any]]:
        """Return every book, newest first."""

        return await self._run(self._list_books)

    async def get_book(self, book_id: int | str) -> dict[str, Any] | None:
        return await self._run(self._get_book, book_id)

    async def create_book(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Insert a book and return the stored row, including its generated id and timestamps."""

        return await self._run(self._create_book, business_params(fields))

    async def update_book(self, book_id: int | str, fields: Mapping[str, Any]) -> dict[str, Any] | None:
        """Overwrite all business fields of a book; None when no row has that id."""

        return await self._run(self._update_book, book_id, business_params(fields))

    async def delete_book(self, book_id: int | str) -> dict[str, Any] | None:
        """Delete a book and return the row as it was just before deletion."""

        return await self._run(self._delete_book, book_id)

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await run_in_threadpool(func, *args)
        except SQLAlchemyError as exc:
            raise classify_store_error(exc) from exc
        except (OverflowError, ValueError) as exc:
            # the sqlite3 driver rejects out-of-range integers before SQLAlchemy can wrap them
            raise StoreError(str(exc)) from exc

    def _list_books(self) -> list[dict[str, Any]]:
        query = f"""
        SELECT *
        FROM {self.table}
        ORDER BY created_at DESC, id DESC
        """
        return self.db.fetch_all(query)

    def _get_book(self, book_id: int | str) -> dict[str, Any] | None:
        return self.db.fetch_one(f"SELECT * FROM {self.table} WHERE id = :book_id", {"book_id": book_id})

    def _select_by_id(self, connection: Connection, book_id: int | str) -> dict[str, Any] | None:
        row = (
            connection.execute(
                text(f"SELECT * FROM {self.table} WHERE id = :book_id"),
                {"book_id": book_id},
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    def _create_book(self, params: dict[str, Any]) -> dict[str, Any]:
        query = f"""
        INSERT INTO {self.table} (title, author, isbn, published_year, genre, description)
        VALUES (:title, :author, :isbn, :published_year, :genre, :description)
        """
        with self.db.begin() as connection:
            result = connection.execute(text(query), params)
            created = self._select_by_id(connection, result.lastrowid)
        if created is None:
            raise StoreError(f"Inserted row {result.lastrowid} could not be read back")
        return created

    def _update_book(self, book_id: int | str, params: dict[str, Any]) -> dict[str, Any] | None:
        query = f"""
        UPDATE {self.table}
        SET title = :title,
            author = :author,
            isbn = :isbn,
            published_year = :published_year,
            genre = :genre,
            description = :description,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = :book_id
        """
        with self.db.begin() as connection:
            result = connection.execute(text(query), {**params, "book_id": book_id})
            if result.rowcount == 0:
                return None
            return self._select_by_id(connection, book_id)

    def _delete_book(self, book_id: int | str) -> dict[str, Any] | None:
        with self.db.begin() as connection:
            snapshot = self._select_by_id(connection, book_id)
            if snapshot is None:
                return None
            connection.execute(
                text(f"DELETE FROM {self.table} WHERE id = :book_id"),
                {"book_id": book_id},
            )
        return snapshot
