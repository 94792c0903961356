# This file defines the CRUD endpoints for book records.
# Each handler validates the request, delegates to the book store, and shapes the JSON envelope.
# Store failures are mapped here: isbn collisions become 400, everything else becomes 500.

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_book_store
from src.api.error_handlers import (
    ConflictError,
    NotFoundError,
    UnclassifiedStoreError,
    ValidationError,
)
from src.api.response_envelope import build_list_envelope, build_object_envelope
from src.api.schemas.book_schemas import (
    BookDeletedResponse,
    BookListResponse,
    BookMutationResponse,
    BookPayload,
    BookResponse,
)
from src.api.schemas.common import ErrorResponse
from src.api.services.book_store import BookStore, ConstraintViolation, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["books"])
BookStoreDep = Annotated[BookStore, Depends(get_book_store)]

BOOK_NOT_FOUND = "Book not found"
REQUIRED_FIELDS_MESSAGE = "Title and author are required"
ISBN_CONFLICT_MESSAGE = "ISBN already exists"

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _require_title_and_author(payload: BookPayload | None) -> BookPayload:
    if payload is None or not payload.title or not payload.author:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    return payload


def _store_failure(exc: StoreError, *, message: str) -> UnclassifiedStoreError:
    logger.error("%s: %s", message, exc.message, exc_info=exc)
    return UnclassifiedStoreError(message, error=exc.message)


def _write_failure(exc: StoreError, *, message: str) -> ConflictError | UnclassifiedStoreError:
    if isinstance(exc, ConstraintViolation) and exc.field == "isbn":
        return ConflictError(ISBN_CONFLICT_MESSAGE)
    return _store_failure(exc, message=message)


@router.get("", response_model=BookListResponse, responses=_ERROR_RESPONSES)
async def list_books(store: BookStoreDep) -> dict[str, object]:
    try:
        books = await store.list_books()
    except StoreError as exc:
        raise _store_failure(exc, message="Error retrieving books") from exc

    return build_list_envelope(data=books)


@router.get("/{book_id}", response_model=BookResponse, responses=_ERROR_RESPONSES)
async def get_book(book_id: str, store: BookStoreDep) -> dict[str, object]:
    try:
        book = await store.get_book(book_id)
    except StoreError as exc:
        raise _store_failure(exc, message="Error retrieving book") from exc

    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return build_object_envelope(data=book)


@router.post("", status_code=201, response_model=BookMutationResponse, responses=_ERROR_RESPONSES)
async def create_book(store: BookStoreDep, payload: BookPayload | None = None) -> dict[str, object]:
    fields = _require_title_and_author(payload)

    try:
        book = await store.create_book(fields.model_dump())
    except StoreError as exc:
        raise _write_failure(exc, message="Error creating book") from exc

    logger.info("Created book id=%s", book.get("id"))
    return build_object_envelope(data=book, message="Book created successfully")


@router.put("/{book_id}", response_model=BookMutationResponse, responses=_ERROR_RESPONSES)
async def update_book(
    book_id: str,
    store: BookStoreDep,
    payload: BookPayload | None = None,
) -> dict[str, object]:
    fields = _require_title_and_author(payload)

    try:
        book = await store.update_book(book_id, fields.model_dump())
    except StoreError as exc:
        raise _write_failure(exc, message="Error updating book") from exc

    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    return build_object_envelope(data=book, message="Book updated successfully")


@router.delete("/{book_id}", response_model=BookDeletedResponse, responses=_ERROR_RESPONSES)
async def delete_book(book_id: str, store: BookStoreDep) -> dict[str, object]:
    try:
        book = await store.delete_book(book_id)
    except StoreError as exc:
        raise _store_failure(exc, message="Error deleting book") from exc

    if book is None:
        raise NotFoundError(BOOK_NOT_FOUND)
    logger.info("Deleted book id=%s", book.get("id"))
    return build_object_envelope(data={"deletedBook": book}, message="Book deleted successfully")
