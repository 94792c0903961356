"""DDL and sample-data helpers for the books table."""

from __future__ import annotations

import logging

from sqlalchemy import text

from src.api.db_access import DatabaseClient

logger = logging.getLogger(__name__)

SAMPLE_BOOKS: tuple[dict[str, object], ...] = (
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "isbn": "978-0-7432-7356-5",
        "published_year": 1925,
        "genre": "Fiction",
        "description": "A classic American novel",
    },
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "isbn": "978-0-06-112008-4",
        "published_year": 1960,
        "genre": "Fiction",
        "description": "A story of racial injustice and childhood",
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "978-0-452-28423-4",
        "published_year": 1949,
        "genre": "Dystopian Fiction",
        "description": "A dystopian social science fiction novel",
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "isbn": "978-0-14-143951-8",
        "published_year": 1813,
        "genre": "Romance",
        "description": "A romantic novel of manners",
    },
)


def apply_books_ddl(db: DatabaseClient, table_name: str = "books") -> None:
    """Create the books table if not present."""

    table = db.validate_identifier(table_name)
    db.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            author TEXT NOT NULL,
            isbn TEXT UNIQUE,
            published_year INTEGER,
            genre TEXT,
            description TEXT,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        """
    )
    logger.info("Ensured table %s exists", table)


def seed_sample_books(db: DatabaseClient, table_name: str = "books") -> int:
    """Insert the sample catalogue when the table is empty; return the number of rows inserted."""

    table = db.validate_identifier(table_name)
    with db.begin() as connection:
        existing = connection.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
        if existing:
            return 0
        connection.execute(
            text(
                f"""
                INSERT INTO {table} (title, author, isbn, published_year, genre, description)
                VALUES (:title, :author, :isbn, :published_year, :genre, :description)
                """
            ),
            [dict(book) for book in SAMPLE_BOOKS],
        )
    logger.info("Inserted %d sample books into %s", len(SAMPLE_BOOKS), table)
    return len(SAMPLE_BOOKS)
