# Response envelope builders for the monitoring dashboard API.
# Success bodies always carry `success: true`, a message, version metadata, and the request id
# so dashboard clients can handle every endpoint the same way.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from monitoring_dashboard.api.schema_versions import build_version_fields


def utc_now() -> datetime:
    """Return timezone-aware UTC timestamp for response generation."""

    return datetime.now(tz=UTC)


def build_success_envelope(
    *,
    api_version_path: str,
    schema_version: str,
    request_id: str,
    message: str,
    data: dict[str, Any] | None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build standard success response envelope."""

    return {
        **build_version_fields(api_version_path=api_version_path, schema_version=schema_version),
        "success": True,
        "message": message,
        "request_id": request_id,
        "generated_at": utc_now(),
        "data": data,
        "warnings": warnings,
    }
