# This file defines request and response schemas for the monitoring dashboard route.
# Collect, fetch, config update, and purge each get an explicit response contract.
# The dashboard config models are shared with the service layer, which owns the live config.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from monitoring_dashboard.api.schemas.common import EnvelopeFields


class DashboardConfig(BaseModel):
    """Tunable dashboard settings."""

    refresh_interval_ms: int = Field(default=30_000, gt=0)
    health_check_interval_ms: int = Field(default=60_000, gt=0)
    performance_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    error_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    alert_thresholds: dict[str, float] = Field(default_factory=dict)


class DashboardConfigUpdate(BaseModel):
    """Partial config update; omitted fields keep their current value."""

    model_config = ConfigDict(extra="forbid")

    refresh_interval_ms: int | None = Field(default=None, gt=0)
    health_check_interval_ms: int | None = Field(default=None, gt=0)
    performance_sample_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    error_sample_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    alert_thresholds: dict[str, float] | None = None


class CollectResultV1(BaseModel):
    record_id: str
    source: str
    processed_at: int
    status: Literal["processed"]


class CollectResponseV1(EnvelopeFields):
    data: CollectResultV1


class DashboardSummaryV1(BaseModel):
    total_records: int
    records_in_range: int
    unique_sources: int
    last_updated: int | None = None


class RetentionSummaryV1(BaseModel):
    short_window_ms: int
    long_window_ms: int
    recent: int
    current: int
    stale: int
    unknown: int


class SystemHealthV1(BaseModel):
    status: Literal["healthy", "degraded", "stale", "no_data"]
    last_record_age_ms: int | None = None


class SourceSummaryV1(BaseModel):
    source: str
    record_count: int
    last_seen: int | None = None
    freshness: str


class MetricSummaryV1(BaseModel):
    metric: str
    count: int
    mean: float
    min: float
    max: float
    latest: float


class AlertV1(BaseModel):
    level: Literal["warning", "critical"]
    source: str | None = None
    metric: str | None = None
    message: str


class DashboardDataV1(BaseModel):
    source: str
    time_range: str
    environment: str
    summary: DashboardSummaryV1
    retention: RetentionSummaryV1
    system_health: SystemHealthV1
    sources: list[SourceSummaryV1]
    metrics: list[MetricSummaryV1]
    alerts: list[AlertV1]
    config: DashboardConfig


class DashboardResponseV1(EnvelopeFields):
    data: DashboardDataV1


class DashboardConfigResponseV1(EnvelopeFields):
    data: DashboardConfig


class PurgeResultV1(BaseModel):
    scope: Literal["stale", "all"]
    source: str | None = None
    purged_count: int
    remaining_count: int
    cutoff_ms: int | None = None


class PurgeResponseV1(EnvelopeFields):
    data: PurgeResultV1
