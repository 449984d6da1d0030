# This file defines the monitoring dashboard route under the versioned API path.
# POST collects a monitoring record, GET returns dashboard statistics, PUT updates the
# dashboard config, and DELETE purges stored records.
# Each verb delegates to DashboardService and wraps the result in the success envelope.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from monitoring_dashboard.api.api_config import ApiConfig
from monitoring_dashboard.api.dependencies import get_config, get_dashboard_service
from monitoring_dashboard.api.response_envelope import build_success_envelope
from monitoring_dashboard.api.schemas.common import ErrorResponse
from monitoring_dashboard.api.schemas.dashboard_schemas import (
    CollectResponseV1,
    DashboardConfigResponseV1,
    DashboardConfigUpdate,
    DashboardResponseV1,
    PurgeResponseV1,
)
from monitoring_dashboard.api.services.dashboard_service import (
    ALL_SOURCES,
    DashboardService,
    PurgeScope,
    parse_request_body,
)

router = APIRouter(
    prefix="/monitoring/dashboard",
    tags=["monitoring"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=CollectResponseV1, response_model_exclude_none=True)
async def collect_monitoring_data(
    request: Request,
    service: DashboardServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    payload = parse_request_body(await request.body())
    result = service.collect(payload)
    return build_success_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        message="Monitoring data received successfully",
        data=result,
    )


@router.get("", response_model=DashboardResponseV1, response_model_exclude_none=True)
def fetch_dashboard(
    request: Request,
    response: Response,
    service: DashboardServiceDep,
    config: ConfigDep,
    source: str = Query(default=ALL_SOURCES),
    time_range: str | None = Query(default=None),
    environment: str | None = Query(default=None),
) -> dict[str, object]:
    data = service.fetch_dashboard(
        source=source,
        time_range=time_range or config.default_time_range,
        environment=environment or config.default_environment,
    )
    response.headers["Cache-Control"] = (
        f"public, max-age={config.dashboard_cache_max_age_seconds}"
    )
    return build_success_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        message="Monitoring data retrieved successfully",
        data=data,
    )


@router.put("", response_model=DashboardConfigResponseV1, response_model_exclude_none=True)
def update_dashboard_config(
    request: Request,
    update: DashboardConfigUpdate,
    service: DashboardServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    updated = service.update_config(update)
    return build_success_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        message="Dashboard configuration updated successfully",
        data=updated.model_dump(),
    )


@router.delete("", response_model=PurgeResponseV1)
def purge_monitoring_data(
    request: Request,
    service: DashboardServiceDep,
    config: ConfigDep,
    scope: PurgeScope = Query(default="stale"),
    source: str | None = Query(default=None),
) -> dict[str, object]:
    result = service.purge(scope=scope, source=source)
    return build_success_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        message="Monitoring data purged successfully",
        data=result,
    )
