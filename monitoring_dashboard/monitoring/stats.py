# This module aggregates stored monitoring records into dashboard statistics.
# Records are classified as recent, current, or stale against the retention windows.
# Numeric metrics inside the requested time range are summarized per metric name.

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd

from monitoring_dashboard.monitoring.records import record_age_ms
from monitoring_dashboard.monitoring.retention import RecordFreshness, classify_record_age
from monitoring_dashboard.monitoring.store import StoredRecord

RECORD_COLUMNS = ["record_id", "source", "timestamp_ms", "age_ms", "freshness"]
METRIC_COLUMNS = ["source", "timestamp_ms", "age_ms", "metric", "value"]


def build_record_frame(
    records: Sequence[StoredRecord],
    *,
    now_ms: int,
    short_window_ms: int,
    long_window_ms: int,
) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for item in records:
        age = record_age_ms(item.record, now_ms)
        rows.append(
            {
                "record_id": item.record_id,
                "source": item.record.source_label,
                "timestamp_ms": item.record.timestamp_ms,
                "age_ms": age,
                "freshness": classify_record_age(
                    age,
                    short_window_ms=short_window_ms,
                    long_window_ms=long_window_ms,
                ).value,
            }
        )
    frame = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    # Non-numeric timestamps become NaN so aggregations skip them.
    frame["timestamp_ms"] = pd.to_numeric(frame["timestamp_ms"], errors="coerce")
    frame["age_ms"] = pd.to_numeric(frame["age_ms"], errors="coerce")
    return frame


def build_metric_frame(records: Sequence[StoredRecord], *, now_ms: int) -> pd.DataFrame:
    """Long-format frame with one row per numeric metric value."""

    rows: list[dict[str, Any]] = []
    for item in records:
        captured_at = item.record.timestamp_ms
        if captured_at is None:
            continue
        for metric, value in item.record.numeric_metrics.items():
            rows.append(
                {
                    "source": item.record.source_label,
                    "timestamp_ms": captured_at,
                    "age_ms": now_ms - captured_at,
                    "metric": metric,
                    "value": value,
                }
            )
    return pd.DataFrame(rows, columns=METRIC_COLUMNS)


def _optional_int(value: Any) -> int | None:
    return int(value) if pd.notna(value) else None


def _system_health(newest_age_ms: int | None, *, short_window_ms: int, long_window_ms: int) -> str:
    freshness = classify_record_age(
        newest_age_ms,
        short_window_ms=short_window_ms,
        long_window_ms=long_window_ms,
    )
    return {
        RecordFreshness.RECENT: "healthy",
        RecordFreshness.CURRENT: "degraded",
        RecordFreshness.STALE: "stale",
        RecordFreshness.UNKNOWN: "no_data",
    }[freshness]


def summarize_sources(
    frame: pd.DataFrame, *, now_ms: int, short_window_ms: int, long_window_ms: int
) -> list[dict[str, Any]]:
    if frame.empty:
        return []

    grouped = (
        frame.groupby("source", sort=True)
        .agg(record_count=("record_id", "count"), last_seen=("timestamp_ms", "max"))
        .reset_index()
    )
    sources: list[dict[str, Any]] = []
    for row in grouped.to_dict(orient="records"):
        last_seen = _optional_int(row["last_seen"])
        age = now_ms - last_seen if last_seen is not None else None
        sources.append(
            {
                "source": str(row["source"]),
                "record_count": int(row["record_count"]),
                "last_seen": last_seen,
                "freshness": classify_record_age(
                    age,
                    short_window_ms=short_window_ms,
                    long_window_ms=long_window_ms,
                ).value,
            }
        )
    return sources


def summarize_metrics(metric_frame: pd.DataFrame) -> list[dict[str, Any]]:
    if metric_frame.empty:
        return []

    ordered = metric_frame.sort_values(["metric", "timestamp_ms"], kind="mergesort")
    grouped = ordered.groupby("metric", sort=True)["value"]
    summary = grouped.agg(["count", "mean", "min", "max", "last"]).reset_index()

    return [
        {
            "metric": str(row["metric"]),
            "count": int(row["count"]),
            "mean": float(row["mean"]),
            "min": float(row["min"]),
            "max": float(row["max"]),
            "latest": float(row["last"]),
        }
        for row in summary.to_dict(orient="records")
    ]


def build_alerts(
    sources: list[dict[str, Any]],
    metrics: list[dict[str, Any]],
    *,
    alert_thresholds: Mapping[str, float],
) -> list[dict[str, Any]]:
    alerts: list[dict[str, Any]] = []
    for entry in sources:
        if entry["freshness"] == RecordFreshness.STALE.value:
            alerts.append(
                {
                    "level": "warning",
                    "source": entry["source"],
                    "metric": None,
                    "message": f"No recent data from source {entry['source']!r}",
                }
            )
    for entry in metrics:
        threshold = alert_thresholds.get(entry["metric"])
        if threshold is not None and entry["latest"] > threshold:
            alerts.append(
                {
                    "level": "critical",
                    "source": None,
                    "metric": entry["metric"],
                    "message": (
                        f"Metric {entry['metric']!r} latest value {entry['latest']:g} "
                        f"exceeds threshold {threshold:g}"
                    ),
                }
            )
    return alerts


def build_dashboard_stats(
    records: Sequence[StoredRecord],
    *,
    now_ms: int,
    time_range_ms: int,
    short_window_ms: int,
    long_window_ms: int,
    alert_thresholds: Mapping[str, float] | None = None,
) -> dict[str, Any]:
    """Aggregate records into the dashboard statistics block."""

    frame = build_record_frame(
        records,
        now_ms=now_ms,
        short_window_ms=short_window_ms,
        long_window_ms=long_window_ms,
    )
    metric_frame = build_metric_frame(records, now_ms=now_ms)
    if not metric_frame.empty:
        metric_frame = metric_frame[metric_frame["age_ms"] <= time_range_ms]

    freshness_counts = frame["freshness"].value_counts().to_dict() if not frame.empty else {}
    last_updated = _optional_int(frame["timestamp_ms"].max()) if not frame.empty else None
    newest_age = now_ms - last_updated if last_updated is not None else None
    in_range = 0
    if not frame.empty:
        in_range = int((frame["age_ms"].dropna() <= time_range_ms).sum())

    sources = summarize_sources(
        frame,
        now_ms=now_ms,
        short_window_ms=short_window_ms,
        long_window_ms=long_window_ms,
    )
    metrics = summarize_metrics(metric_frame)

    return {
        "summary": {
            "total_records": int(len(frame)),
            "records_in_range": in_range,
            "unique_sources": int(frame["source"].nunique()) if not frame.empty else 0,
            "last_updated": last_updated,
        },
        "retention": {
            "short_window_ms": short_window_ms,
            "long_window_ms": long_window_ms,
            **{
                freshness.value: int(freshness_counts.get(freshness.value, 0))
                for freshness in RecordFreshness
            },
        },
        "system_health": {
            "status": _system_health(
                newest_age,
                short_window_ms=short_window_ms,
                long_window_ms=long_window_ms,
            ),
            "last_record_age_ms": newest_age,
        },
        "sources": sources,
        "metrics": metrics,
        "alerts": build_alerts(sources, metrics, alert_thresholds=alert_thresholds or {}),
    }
