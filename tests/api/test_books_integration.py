# This file tests the full stack: routers, book store, and a real SQLite file.
# It exists to verify the CRUD lifecycle, isbn uniqueness, ordering, and transport-level errors.
# Each test gets its own database file under pytest's tmp_path.

from __future__ import annotations

import re
from pathlib import Path

from tests.api.support import sqlite_test_client

STORED_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")
ORWELL = {"title": "1984", "author": "George Orwell", "isbn": "978-0-452-28423-4"}


def test_full_crud_lifecycle(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        created = client.post(
            "/api/books",
            json={**ORWELL, "published_year": 1949, "genre": "Dystopian Fiction"},
        )
        assert created.status_code == 201
        book = created.json()["data"]
        book_id = book["id"]
        assert isinstance(book_id, int)
        assert book["title"] == "1984"
        assert book["created_at"]
        assert book["updated_at"]

        fetched = client.get(f"/api/books/{book_id}")
        assert fetched.status_code == 200
        assert fetched.json()["data"] == book

        updated = client.put(
            f"/api/books/{book_id}",
            json={"title": "Nineteen Eighty-Four", "author": "George Orwell", "isbn": ORWELL["isbn"]},
        )
        assert updated.status_code == 200
        updated_book = updated.json()["data"]
        assert updated_book["id"] == book_id
        assert updated_book["title"] == "Nineteen Eighty-Four"
        assert updated_book["published_year"] is None
        assert updated_book["genre"] is None
        assert updated_book["created_at"] == book["created_at"]

        deleted = client.delete(f"/api/books/{book_id}")
        assert deleted.status_code == 200
        assert deleted.json()["data"]["deletedBook"] == updated_book

        gone = client.get(f"/api/books/{book_id}")
        assert gone.status_code == 404
        assert gone.json()["message"] == "Book not found"

        assert client.delete(f"/api/books/{book_id}").status_code == 404


def test_create_without_isbn_stores_null(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        response = client.post(
            "/api/books",
            json={"title": "Test Book with Nulls", "author": "Test Author", "isbn": None, "genre": None},
        )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["id"] >= 1
    assert data["isbn"] is None
    assert data["genre"] is None


def test_duplicate_isbn_is_a_conflict(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        first = client.post("/api/books", json=ORWELL)
        second = client.post("/api/books", json={**ORWELL, "title": "Animal Farm"})
        other = client.post("/api/books", json={"title": "Other", "author": "X", "isbn": "111"})
        clash = client.put(
            f"/api/books/{other.json()['data']['id']}",
            json={"title": "Other", "author": "X", "isbn": ORWELL["isbn"]},
        )
        listing = client.get("/api/books")

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"success": False, "message": "ISBN already exists"}
    assert clash.status_code == 400
    assert clash.json() == {"success": False, "message": "ISBN already exists"}
    titles = sorted(book["title"] for book in listing.json()["data"])
    assert titles == ["1984", "Other"]
    isbns = {book["title"]: book["isbn"] for book in listing.json()["data"]}
    assert isbns["Other"] == "111"


def test_books_without_isbn_do_not_conflict(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        first = client.post("/api/books", json={"title": "A", "author": "One"})
        second = client.post("/api/books", json={"title": "B", "author": "Two"})

    assert first.status_code == 201
    assert second.status_code == 201


def test_list_returns_newest_first(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        first = client.post("/api/books", json={"title": "First Book", "author": "Author 1"})
        second = client.post("/api/books", json={"title": "Second Book", "author": "Author 2"})
        response = client.get("/api/books")

    payload = response.json()
    assert response.status_code == 200
    assert payload["total"] == 2
    assert [book["id"] for book in payload["data"]] == [
        second.json()["data"]["id"],
        first.json()["data"]["id"],
    ]


def test_ids_are_not_reused_after_delete(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        first_id = client.post("/api/books", json={"title": "A", "author": "B"}).json()["data"]["id"]
        client.delete(f"/api/books/{first_id}")
        second_id = client.post("/api/books", json={"title": "C", "author": "D"}).json()["data"]["id"]

    assert second_id > first_id


def test_update_missing_book_changes_nothing(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        client.post("/api/books", json=ORWELL)
        response = client.put("/api/books/99999", json={"title": "T", "author": "A"})
        listing = client.get("/api/books").json()

    assert response.status_code == 404
    assert listing["total"] == 1
    assert listing["data"][0]["title"] == "1984"


def test_malformed_json_is_rejected_with_400(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        book_id = client.post("/api/books", json={"title": "JSON", "author": "Test"}).json()["data"]["id"]
        post = client.post(
            "/api/books",
            content="{ invalid json }",
            headers={"Content-Type": "application/json"},
        )
        put = client.put(
            f"/api/books/{book_id}",
            content="{ invalid json }",
            headers={"Content-Type": "application/json"},
        )

    for response in (post, put):
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == "Invalid request body"


def test_unknown_endpoint_returns_404_envelope(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        response = client.get("/api/invalid-endpoint")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Endpoint not found"}


def test_long_strings_are_accepted(tmp_path: Path) -> None:
    long_string = "A" * 1000
    with sqlite_test_client(tmp_path) as client:
        response = client.post(
            "/api/books",
            json={"title": long_string, "author": long_string, "description": long_string},
        )

    assert response.status_code == 201
    assert response.json()["data"]["description"] == long_string


def test_startup_seeds_sample_books(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path, seed_sample_data=True) as client:
        response = client.get("/api/books")

    payload = response.json()
    assert payload["total"] == 4
    assert {book["title"] for book in payload["data"]} == {
        "The Great Gatsby",
        "To Kill a Mockingbird",
        "1984",
        "Pride and Prejudice",
    }


def test_timestamps_keep_the_stored_text_format(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        created = client.post("/api/books", json=ORWELL).json()["data"]
        listed = client.get("/api/books").json()["data"][0]

    assert STORED_TIMESTAMP.match(created["created_at"])
    assert STORED_TIMESTAMP.match(created["updated_at"])
    assert listed["created_at"] == created["created_at"]


def test_out_of_range_year_is_a_store_error(tmp_path: Path) -> None:
    with sqlite_test_client(tmp_path) as client:
        created = client.post("/api/books", json={"title": "Huge", "author": "Year", "published_year": 10**20})
        book_id = client.post("/api/books", json=ORWELL).json()["data"]["id"]
        updated = client.put(
            f"/api/books/{book_id}",
            json={"title": "1984", "author": "George Orwell", "published_year": 10**20},
        )
        listing = client.get("/api/books").json()

    assert created.status_code == 500
    assert created.json()["message"] == "Error creating book"
    assert "too large" in created.json()["error"]
    assert updated.status_code == 500
    assert updated.json()["message"] == "Error updating book"
    assert "too large" in updated.json()["error"]
    assert listing["total"] == 1
    assert listing["data"][0]["published_year"] is None
