# This file builds response envelopes for API endpoints in a consistent format.
# It exists so clients always receive `success` plus `data`, `message`, `error`, or `total` as needed.
# The helpers return plain dictionaries that Pydantic response models validate at runtime.

from __future__ import annotations

from typing import Any


def build_list_envelope(*, data: list[dict[str, Any]]) -> dict[str, Any]:
    """Build standard list response envelope; `total` is always the length of `data`."""

    return {
        "success": True,
        "data": data,
        "total": len(data),
    }


def build_object_envelope(*, data: Any, message: str | None = None) -> dict[str, Any]:
    """Build standard single-object response envelope."""

    payload: dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    payload["data"] = data
    return payload


def build_error_envelope(*, message: str, error: Any | None = None) -> dict[str, Any]:
    """Build standard failure envelope; `error` is omitted when there is nothing to report."""

    payload: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        payload["error"] = error
    return payload
