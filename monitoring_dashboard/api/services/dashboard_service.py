# This file implements the monitoring dashboard operations behind the HTTP route.
# Collect validates and stores incoming records, fetch builds statistics, update merges the
# dashboard config, and purge drops stale or selected records from the store.
# Failures inside an operation are logged and surfaced as APIError with an operation-specific code.

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Literal

from prometheus_client import Counter

from monitoring_dashboard.api import error_codes
from monitoring_dashboard.api.api_config import ApiConfig
from monitoring_dashboard.api.error_handlers import APIError
from monitoring_dashboard.api.schemas.dashboard_schemas import (
    DashboardConfig,
    DashboardConfigUpdate,
)
from monitoring_dashboard.monitoring.records import MonitoringRecord, validate_monitoring_data
from monitoring_dashboard.monitoring.retention import (
    LONG_RETENTION_WINDOW_MS,
    SHORT_RETENTION_WINDOW_MS,
    TimeUnits,
    compute_retention_window_ms,
    parse_time_range,
)
from monitoring_dashboard.monitoring.stats import build_dashboard_stats
from monitoring_dashboard.monitoring.store import MonitoringStore, StoredRecord

LOGGER = logging.getLogger("monitoring.dashboard")

RECORDS_ACCEPTED_TOTAL = Counter(
    "monitoring_records_accepted_total",
    "Monitoring records accepted by the collect endpoint.",
)
RECORDS_REJECTED_TOTAL = Counter(
    "monitoring_records_rejected_total",
    "Monitoring payloads rejected by the collect endpoint.",
    ["reason"],
)
RECORDS_PURGED_TOTAL = Counter(
    "monitoring_records_purged_total",
    "Monitoring records removed by purge requests.",
)

PurgeScope = Literal["stale", "all"]
ALL_SOURCES = "all"


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def parse_request_body(body: bytes) -> Any:
    """Decode a raw JSON request body; empty or malformed bodies raise APIError (500)."""

    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError) as exc:
        RECORDS_REJECTED_TOTAL.labels(reason="unparseable").inc()
        LOGGER.error("Failed to decode monitoring payload: %s", exc)
        raise APIError(
            status_code=500,
            error_code=error_codes.MONITORING_PROCESS_FAILED,
            message="Internal server error",
        ) from exc


class DashboardService:
    """Monitoring dashboard operations backed by a `MonitoringStore`."""

    def __init__(
        self,
        *,
        config: ApiConfig,
        store: MonitoringStore,
        clock: Callable[[], int] | None = None,
        time_units: TimeUnits | None = None,
        dashboard_config: DashboardConfig | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.clock = clock or _epoch_ms
        self.time_units = time_units
        if time_units is None:
            self.short_window_ms = SHORT_RETENTION_WINDOW_MS
            self.long_window_ms = LONG_RETENTION_WINDOW_MS
        else:
            self.short_window_ms = compute_retention_window_ms(time_units.count_pair, time_units)
            self.long_window_ms = compute_retention_window_ms(time_units.hours_per_day, time_units)
        self._dashboard_config = dashboard_config or DashboardConfig()
        self._config_lock = threading.Lock()

    @property
    def dashboard_config(self) -> DashboardConfig:
        with self._config_lock:
            return self._dashboard_config

    def collect(self, payload: Any) -> dict[str, Any]:
        if not validate_monitoring_data(payload):
            RECORDS_REJECTED_TOTAL.labels(reason="invalid_format").inc()
            LOGGER.warning("Rejected monitoring payload of type %s", type(payload).__name__)
            raise APIError(
                status_code=400,
                error_code=error_codes.MONITORING_INVALID_FORMAT,
                message="Invalid monitoring data format",
            )

        try:
            record = MonitoringRecord.from_payload(payload)
            processed_at = self.clock()
            stored = self.store.add(record, received_at_ms=processed_at)
        except Exception as exc:
            LOGGER.exception("Failed to store monitoring record")
            raise APIError(
                status_code=500,
                error_code=error_codes.MONITORING_PROCESS_FAILED,
                message="Internal server error",
            ) from exc

        RECORDS_ACCEPTED_TOTAL.inc()
        LOGGER.info(
            "Monitoring data received (source=%s, record_id=%s, metrics=%d)",
            record.source_label,
            stored.record_id,
            len(record.numeric_metrics),
        )
        return {
            "record_id": stored.record_id,
            "source": record.source_label,
            "processed_at": processed_at,
            "status": "processed",
        }

    def fetch_dashboard(self, *, source: str, time_range: str, environment: str) -> dict[str, Any]:
        try:
            hours = parse_time_range(time_range)
        except ValueError as exc:
            raise APIError(
                status_code=400,
                error_code=error_codes.INVALID_TIME_RANGE,
                message=str(exc),
            ) from exc

        try:
            records = self._select_records(source=source, environment=environment)
            dashboard_config = self.dashboard_config
            stats = build_dashboard_stats(
                records,
                now_ms=self.clock(),
                time_range_ms=compute_retention_window_ms(hours, self.time_units),
                short_window_ms=self.short_window_ms,
                long_window_ms=self.long_window_ms,
                alert_thresholds=dashboard_config.alert_thresholds,
            )
        except Exception as exc:
            LOGGER.exception("Failed to build dashboard statistics")
            raise APIError(
                status_code=500,
                error_code=error_codes.MONITORING_RETRIEVE_FAILED,
                message="Failed to retrieve monitoring data",
            ) from exc

        return {
            "source": source,
            "time_range": time_range,
            "environment": environment,
            **stats,
            "config": dashboard_config.model_dump(),
        }

    def update_config(self, update: DashboardConfigUpdate) -> DashboardConfig:
        changes = update.model_dump(exclude_none=True)
        try:
            with self._config_lock:
                merged = DashboardConfig.model_validate(
                    {**self._dashboard_config.model_dump(), **changes}
                )
                self._dashboard_config = merged
        except Exception as exc:
            LOGGER.exception("Failed to update dashboard configuration")
            raise APIError(
                status_code=500,
                error_code=error_codes.MONITORING_CONFIG_UPDATE_FAILED,
                message="Failed to update dashboard configuration",
            ) from exc

        LOGGER.info("Dashboard configuration updated (fields=%s)", sorted(changes))
        return merged

    def purge(self, *, scope: PurgeScope, source: str | None) -> dict[str, Any]:
        cutoff_ms = self.clock() - self.long_window_ms if scope == "stale" else None
        try:
            purged = self.store.purge(cutoff_ms=cutoff_ms, source=source)
            remaining = self.store.count()
        except Exception as exc:
            LOGGER.exception("Failed to purge monitoring data")
            raise APIError(
                status_code=500,
                error_code=error_codes.MONITORING_PURGE_FAILED,
                message="Failed to purge monitoring data",
            ) from exc

        RECORDS_PURGED_TOTAL.inc(purged)
        LOGGER.info(
            "Purged %d monitoring records (scope=%s, source=%s, remaining=%d)",
            purged,
            scope,
            source or ALL_SOURCES,
            remaining,
        )
        return {
            "scope": scope,
            "source": source,
            "purged_count": purged,
            "remaining_count": remaining,
            "cutoff_ms": cutoff_ms,
        }

    def _select_records(self, *, source: str, environment: str) -> list[StoredRecord]:
        records = self.store.list_records(source=None if source == ALL_SOURCES else source)
        return [
            item
            for item in records
            if item.record.environment is None or item.record.environment == environment
        ]
