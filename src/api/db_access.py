# This file wraps database access so the book store can run parameterized SQL safely.
# It exists to keep SQL execution details out of router code and make testing easier.
# The helper also centralizes connectivity and table-existence checks for readiness probes.

from __future__ import annotations

import re
import threading
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager, nullcontext
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def is_in_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _engine_options(database_url: str) -> dict[str, Any]:
    if make_url(database_url).get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    if is_in_memory_sqlite(database_url):
        # one shared connection, otherwise every worker thread sees its own empty database
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"connect_args": {"check_same_thread": False}}


class DatabaseClient:
    """Minimal SQLAlchemy wrapper for API read/write access.

    An in-memory SQLite database lives on a single DBAPI connection shared by every thread,
    so all access to it is serialized through one lock. That mode exists for tests and demos;
    file-backed databases use a regular connection pool and take no lock.
    """

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, future=True, **_engine_options(database_url))
        self._shared_connection_lock: AbstractContextManager[Any] | None = (
            threading.RLock() if is_in_memory_sqlite(database_url) else None
        )

    @property
    def shares_connection(self) -> bool:
        return self._shared_connection_lock is not None

    def _guard(self) -> AbstractContextManager[Any]:
        return self._shared_connection_lock or nullcontext()

    @contextmanager
    def _connect(self) -> Iterator[Connection]:
        with self._guard(), self._engine.connect() as connection:
            yield connection

    def can_connect(self) -> bool:
        try:
            with self._connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def table_exists(self, table_name: str) -> bool:
        self.validate_identifier(table_name)
        with self._guard():
            return bool(inspect(self._engine).has_table(table_name))

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._connect() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._connect() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def fetch_scalar(self, query: str, params: Mapping[str, Any] | None = None) -> Any:
        with self._connect() as connection:
            return connection.execute(text(query), dict(params or {})).scalar_one()

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> int:
        """Run one write statement in its own transaction and return the affected row count."""

        with self.begin() as connection:
            result = connection.execute(text(query), dict(params or {}))
            return result.rowcount

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a connection whose statements commit together or roll back together."""

        with self._guard(), self._engine.begin() as connection:
            yield connection

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    def validate_identifier(identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier
