# Machine-readable error codes returned in API error bodies.

from __future__ import annotations

from typing import Final

MONITORING_INVALID_FORMAT: Final = "MONITORING_INVALID_FORMAT"
MONITORING_PROCESS_FAILED: Final = "MONITORING_PROCESS_FAILED"
MONITORING_RETRIEVE_FAILED: Final = "MONITORING_RETRIEVE_FAILED"
MONITORING_CONFIG_UPDATE_FAILED: Final = "MONITORING_CONFIG_UPDATE_FAILED"
MONITORING_PURGE_FAILED: Final = "MONITORING_PURGE_FAILED"
INVALID_TIME_RANGE: Final = "INVALID_TIME_RANGE"
VALIDATION_ERROR: Final = "VALIDATION_ERROR"
HTTP_ERROR: Final = "HTTP_ERROR"
INTERNAL_SERVER_ERROR: Final = "INTERNAL_SERVER_ERROR"
