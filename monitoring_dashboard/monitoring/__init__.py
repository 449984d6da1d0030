"""
Core monitoring record validation, retention windows, storage, and statistics.
"""

from monitoring_dashboard.monitoring.records import MonitoringRecord, validate_monitoring_data
from monitoring_dashboard.monitoring.retention import (
    LONG_RETENTION_WINDOW_MS,
    SHORT_RETENTION_WINDOW_MS,
    compute_retention_window_ms,
)

__all__ = [
    "LONG_RETENTION_WINDOW_MS",
    "SHORT_RETENTION_WINDOW_MS",
    "MonitoringRecord",
    "compute_retention_window_ms",
    "validate_monitoring_data",
]
