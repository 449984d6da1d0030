# Shared helpers for API endpoint tests.
# Tests get a fresh in-memory store and a dashboard service with a fixed clock,
# wired into the app through scoped dependency overrides.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi.testclient import TestClient

from monitoring_dashboard.api.api_config import ApiConfig
from monitoring_dashboard.api.app import app
from monitoring_dashboard.api.dependencies import (
    get_config,
    get_dashboard_service,
    get_monitoring_store,
)
from monitoring_dashboard.api.services.dashboard_service import DashboardService
from monitoring_dashboard.monitoring.retention import TimeUnits
from monitoring_dashboard.monitoring.store import InMemoryMonitoringStore

FIXED_NOW_MS = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


def build_test_config(**overrides: object) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, object] = {
        "api_name": "Test Monitoring API",
        "api_version_path": "/api/v1",
        "schema_version": "1.0.0",
        "environment": "test",
        "enable_request_logging": False,
        "allowed_origins": [],
        "app_version": "0.1.0",
        "max_stored_records": 100,
        "dashboard_cache_max_age_seconds": 30,
    }
    values.update(overrides)
    return ApiConfig.model_validate(values)


def build_test_service(
    *,
    config: ApiConfig | None = None,
    store: InMemoryMonitoringStore | None = None,
    now_ms: int = FIXED_NOW_MS,
) -> DashboardService:
    resolved_config = config or build_test_config()
    return DashboardService(
        config=resolved_config,
        store=store or InMemoryMonitoringStore(max_records=resolved_config.max_stored_records),
        clock=lambda: now_ms,
        time_units=TimeUnits(),
    )


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    service: DashboardService | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_service = service or build_test_service(config=resolved_config)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_dashboard_service] = lambda: resolved_service
    app.dependency_overrides[get_monitoring_store] = lambda: resolved_service.store

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
