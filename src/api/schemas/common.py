# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so success and error envelopes stay consistent across routes.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class SuccessEnvelope(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Any | None = None
