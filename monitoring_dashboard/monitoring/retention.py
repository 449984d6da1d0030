"""
Retention windows for monitoring data.

A retention window is a duration in milliseconds used to decide whether a record is
recent or eligible for cleanup. Windows are derived from `TimeUnits` rather than
hardcoded millisecond literals so the base units can be tuned per environment
(for example an accelerated clock in tests via `MONITORING_MS_PER_SECOND`).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from dotenv import load_dotenv

_TIME_RANGE_RE = re.compile(r"^(?P<count>\d+)(?P<unit>[hd])$")
SUPPORTED_TIME_RANGES: Final[tuple[str, ...]] = ("1h", "2h", "6h", "12h", "24h", "7d", "30d")


@dataclass(frozen=True)
class TimeUnits:
    minutes_per_hour: int = 60
    seconds_per_minute: int = 60
    ms_per_second: int = 1000
    hours_per_day: int = 24
    count_pair: int = 2


class RecordFreshness(str, Enum):
    RECENT = "recent"
    CURRENT = "current"
    STALE = "stale"
    UNKNOWN = "unknown"


def load_time_units(*, load_env: bool = True) -> TimeUnits:
    """Resolve time units, honoring `MONITORING_MS_PER_SECOND` when set."""

    if load_env:
        load_dotenv()

    raw = os.getenv("MONITORING_MS_PER_SECOND")
    if raw is None or raw.strip() == "":
        return TimeUnits()
    try:
        ms_per_second = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"MONITORING_MS_PER_SECOND must be an integer, got {raw!r}") from exc
    if ms_per_second <= 0:
        raise RuntimeError(f"MONITORING_MS_PER_SECOND must be greater than 0, got {raw!r}")
    return TimeUnits(ms_per_second=ms_per_second)


def compute_retention_window_ms(hours: int, units: TimeUnits | None = None) -> int:
    """Return the length of an `hours`-long window in milliseconds."""

    resolved = units or DEFAULT_TIME_UNITS
    return hours * resolved.minutes_per_hour * resolved.seconds_per_minute * resolved.ms_per_second


def parse_time_range(label: str) -> int:
    """Convert a dashboard time range label such as `24h` or `7d` into hours."""

    if label not in SUPPORTED_TIME_RANGES:
        raise ValueError(
            f"Unsupported time range {label!r}; expected one of {', '.join(SUPPORTED_TIME_RANGES)}"
        )
    match = _TIME_RANGE_RE.match(label)
    assert match is not None
    count = int(match.group("count"))
    if match.group("unit") == "d":
        return count * DEFAULT_TIME_UNITS.hours_per_day
    return count


def classify_record_age(
    age_ms: int | None,
    *,
    short_window_ms: int,
    long_window_ms: int,
) -> RecordFreshness:
    if age_ms is None:
        return RecordFreshness.UNKNOWN
    if age_ms <= short_window_ms:
        return RecordFreshness.RECENT
    if age_ms <= long_window_ms:
        return RecordFreshness.CURRENT
    return RecordFreshness.STALE


DEFAULT_TIME_UNITS: Final[TimeUnits] = load_time_units()

LONG_RETENTION_WINDOW_MS: Final[int] = compute_retention_window_ms(DEFAULT_TIME_UNITS.hours_per_day)
SHORT_RETENTION_WINDOW_MS: Final[int] = compute_retention_window_ms(DEFAULT_TIME_UNITS.count_pair)
