# This file defines request and response schemas for the book endpoints.
# It exists so the book record shape and every envelope variant are explicit in OpenAPI.
# The request model leaves title and author optional; the router reports them missing itself.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.api.schemas.common import SuccessEnvelope


class BookPayload(BaseModel):
    """Body accepted by create and update."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    author: str | None = None
    isbn: str | None = None
    published_year: int | None = None
    genre: str | None = None
    description: str | None = None


class BookRecord(BaseModel):
    id: int
    title: str
    author: str
    isbn: str | None = None
    published_year: int | None = None
    genre: str | None = None
    description: str | None = None
    # stored text, e.g. "2026-02-25 10:00:00", returned unchanged
    created_at: str | None = None
    updated_at: str | None = None


class BookListResponse(SuccessEnvelope):
    data: list[BookRecord]
    total: int = Field(ge=0)


class BookResponse(SuccessEnvelope):
    data: BookRecord


class BookMutationResponse(SuccessEnvelope):
    message: str
    data: BookRecord


class DeletedBookData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_book: BookRecord = Field(alias="deletedBook")


class BookDeletedResponse(SuccessEnvelope):
    message: str
    data: DeletedBookData
