"""
Unit tests for retention window computation and record freshness classification.
"""

from __future__ import annotations

import pytest

from monitoring_dashboard.monitoring import retention
from monitoring_dashboard.monitoring.retention import (
    LONG_RETENTION_WINDOW_MS,
    SHORT_RETENTION_WINDOW_MS,
    RecordFreshness,
    TimeUnits,
    classify_record_age,
    compute_retention_window_ms,
    load_time_units,
    parse_time_range,
)


def test_standard_windows_use_default_units() -> None:
    units = retention.DEFAULT_TIME_UNITS
    assert LONG_RETENTION_WINDOW_MS == 24 * 60 * 60 * units.ms_per_second
    assert SHORT_RETENTION_WINDOW_MS == 2 * 60 * 60 * units.ms_per_second


def test_compute_window_with_millisecond_units() -> None:
    units = TimeUnits(ms_per_second=1000)
    assert compute_retention_window_ms(24, units) == 86_400_000
    assert compute_retention_window_ms(2, units) == 7_200_000


def test_compute_window_honors_accelerated_clock() -> None:
    assert compute_retention_window_ms(24, TimeUnits(ms_per_second=10)) == 864_000


def test_load_time_units_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONITORING_MS_PER_SECOND", "10")
    assert load_time_units(load_env=False) == TimeUnits(ms_per_second=10)

    monkeypatch.delenv("MONITORING_MS_PER_SECOND")
    assert load_time_units(load_env=False).ms_per_second == 1000


@pytest.mark.parametrize("raw", ["fast", "0", "-5"])
def test_load_time_units_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("MONITORING_MS_PER_SECOND", raw)
    with pytest.raises(RuntimeError, match="MONITORING_MS_PER_SECOND"):
        load_time_units(load_env=False)


@pytest.mark.parametrize(
    ("label", "hours"),
    [("1h", 1), ("2h", 2), ("24h", 24), ("7d", 168), ("30d", 720)],
)
def test_parse_time_range(label: str, hours: int) -> None:
    assert parse_time_range(label) == hours


@pytest.mark.parametrize("label", ["", "3w", "5h", "h", "24"])
def test_parse_time_range_rejects_unknown_labels(label: str) -> None:
    with pytest.raises(ValueError, match="Unsupported time range"):
        parse_time_range(label)


def test_classify_record_age_boundaries() -> None:
    windows = {"short_window_ms": 100, "long_window_ms": 1_000}
    assert classify_record_age(None, **windows) is RecordFreshness.UNKNOWN
    assert classify_record_age(-50, **windows) is RecordFreshness.RECENT
    assert classify_record_age(100, **windows) is RecordFreshness.RECENT
    assert classify_record_age(101, **windows) is RecordFreshness.CURRENT
    assert classify_record_age(1_000, **windows) is RecordFreshness.CURRENT
    assert classify_record_age(1_001, **windows) is RecordFreshness.STALE
