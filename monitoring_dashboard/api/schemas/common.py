# This file defines shared schema pieces reused by multiple API endpoints.
# Envelope metadata and the error payload stay consistent across routes.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class EnvelopeFields(BaseModel):
    api_version: str
    schema_version: str
    success: bool
    message: str
    request_id: str
    generated_at: datetime
    warnings: list[str] | None = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    error_code: str
    details: Any | None = None
    request_id: str
    timestamp: datetime
