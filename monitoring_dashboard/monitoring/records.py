"""
Monitoring record shape and the presence-only validator used at ingestion.

Validation is deliberately shallow: a payload qualifies when it is a mapping that
carries `source`, `metrics`, and `timestamp`. Value types are not checked, so
consumers must still cope with e.g. a string timestamp. Unknown fields are kept.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from numbers import Real
from typing import Any, Final, TypeGuard

from pydantic import BaseModel, ConfigDict

REQUIRED_FIELDS: Final[tuple[str, ...]] = ("source", "metrics", "timestamp")

LOGGER = logging.getLogger("monitoring.records")


def validate_monitoring_data(candidate: Any) -> TypeGuard[Mapping[str, Any]]:
    """Return True when `candidate` is a mapping holding every required field."""

    if candidate is None or not isinstance(candidate, Mapping):
        return False
    try:
        return all(field in candidate for field in REQUIRED_FIELDS)
    except Exception:
        LOGGER.debug("Membership check raised for %s", type(candidate).__name__, exc_info=True)
        return False


def _is_real_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


class MonitoringRecord(BaseModel):
    """A validated monitoring payload. Extra fields are preserved as-is."""

    model_config = ConfigDict(extra="allow", frozen=True)

    source: Any
    metrics: Any
    timestamp: Any

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> MonitoringRecord:
        if not validate_monitoring_data(payload):
            raise ValueError("Payload is not a monitoring record")
        return cls.model_validate(dict(payload))

    @property
    def source_label(self) -> str:
        return str(self.source)

    @property
    def timestamp_ms(self) -> int | None:
        if _is_real_number(self.timestamp):
            return int(self.timestamp)
        return None

    @property
    def environment(self) -> str | None:
        value = (self.model_extra or {}).get("environment")
        return str(value) if value is not None else None

    @property
    def numeric_metrics(self) -> dict[str, float]:
        if not isinstance(self.metrics, Mapping):
            return {}
        return {
            str(name): float(value)
            for name, value in self.metrics.items()
            if _is_real_number(value)
        }

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump()


def record_age_ms(record: MonitoringRecord, now_ms: int) -> int | None:
    """Age of a record relative to `now_ms`; None when its timestamp is not numeric."""

    captured_at = record.timestamp_ms
    if captured_at is None:
        return None
    return now_ms - captured_at
