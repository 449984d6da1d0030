# Helpers for API path versioning and schema version metadata.
# Every response carries explicit version fields, and the contract-check script uses
# `detect_breaking_schema_changes` to compare OpenAPI snapshots between releases.

from __future__ import annotations

from typing import Any


def api_version_label(api_version_path: str) -> str:
    """Convert `/api/v1` style paths into `v1` labels."""

    parts = [part for part in api_version_path.rstrip("/").split("/") if part]
    if not parts:
        raise ValueError(f"Invalid api_version_path: {api_version_path!r}")
    return parts[-1]


def build_version_fields(*, api_version_path: str, schema_version: str) -> dict[str, str]:
    return {
        "api_version": api_version_label(api_version_path),
        "schema_version": schema_version,
    }


def _schemas(snapshot: dict[str, Any]) -> dict[str, Any]:
    return dict(snapshot.get("components", {}).get("schemas", {}))


def detect_breaking_schema_changes(
    *,
    previous_snapshot: dict[str, Any],
    current_snapshot: dict[str, Any],
) -> list[str]:
    """List removed paths, schema components, required fields, and properties."""

    findings = [
        f"Removed API path: {path}"
        for path in sorted(
            set(previous_snapshot.get("paths", {})) - set(current_snapshot.get("paths", {}))
        )
    ]

    current_schemas = _schemas(current_snapshot)
    for name, previous in _schemas(previous_snapshot).items():
        current = current_schemas.get(name)
        if current is None:
            findings.append(f"Removed schema component: {name}")
            continue

        dropped_required = set(previous.get("required", [])) - set(current.get("required", []))
        findings.extend(
            f"Schema {name} removed required field: {field}" for field in sorted(dropped_required)
        )
        dropped_props = set(previous.get("properties", {})) - set(current.get("properties", {}))
        findings.extend(f"Schema {name} removed property: {field}" for field in sorted(dropped_props))

    return findings
