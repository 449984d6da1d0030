# This file defines liveness and version endpoints for API operations.
# Orchestrators and uptime checks use them to verify the service quickly.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from monitoring_dashboard.api.api_config import ApiConfig
from monitoring_dashboard.api.dependencies import get_config, get_monitoring_store
from monitoring_dashboard.api.schema_versions import build_version_fields
from monitoring_dashboard.api.schemas.health_schemas import HealthResponse, VersionResponse
from monitoring_dashboard.monitoring.store import MonitoringStore

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
StoreDep = Annotated[MonitoringStore, Depends(get_monitoring_store)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
    store: StoreDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "stored_records": store.count(),
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
