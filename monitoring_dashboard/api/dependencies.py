# This file provides dependency factories for FastAPI routes and middleware.
# The record store and dashboard service are created once and shared through dependency injection,
# which keeps routers thin and lets tests swap in their own instances.

from __future__ import annotations

from functools import lru_cache

from monitoring_dashboard.api.api_config import ApiConfig, get_api_config
from monitoring_dashboard.api.services.dashboard_service import DashboardService
from monitoring_dashboard.monitoring.store import InMemoryMonitoringStore, MonitoringStore


@lru_cache(maxsize=1)
def get_monitoring_store() -> MonitoringStore:
    config = get_api_config()
    return InMemoryMonitoringStore(max_records=config.max_stored_records)


@lru_cache(maxsize=1)
def get_dashboard_service() -> DashboardService:
    config = get_api_config()
    return DashboardService(config=config, store=get_monitoring_store())


def get_config() -> ApiConfig:
    return get_api_config()
