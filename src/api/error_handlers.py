# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same `{success, message, error?}` failure shape.
# The handlers translate validation, HTTP, and unexpected failures into safe client messages.

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.response_envelope import build_error_envelope

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(self, *, status_code: int, message: str, error: Any | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(message)


class ValidationError(APIError):
    """A required request field is missing or empty."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=400, message=message)


class ConflictError(APIError):
    """A write collided with a unique value already stored."""

    def __init__(self, message: str) -> None:
        super().__init__(status_code=400, message=message)


class NotFoundError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=404, message=message)


class UnclassifiedStoreError(APIError):
    """Any other store failure; the raw store text travels in `error` for diagnostics."""

    def __init__(self, message: str, *, error: str) -> None:
        super().__init__(status_code=500, message=message, error=error)


def _error_response(*, status_code: int, message: str, error: Any | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=build_error_envelope(message=message, error=error),
    )


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return _error_response(status_code=exc.status_code, message=exc.message, error=exc.error)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"loc": list(item.get("loc", ())), "type": item.get("type"), "msg": item.get("msg")}
            for item in exc.errors()
        ]
        return _error_response(status_code=400, message="Invalid request body", error=details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == 404 and message == "Not Found":
            message = "Endpoint not found"
        response = _error_response(status_code=exc.status_code, message=message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s (request_id=%s)",
            request.method,
            request.url.path,
            _request_id(request),
            exc_info=exc,
        )
        return _error_response(status_code=500, message="Internal server error")
