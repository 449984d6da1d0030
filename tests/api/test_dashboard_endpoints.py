# Tests for the monitoring dashboard route: collect, fetch, config update, and purge.
# The service runs with a fixed clock so freshness classification is deterministic.

from __future__ import annotations

import json

from tests.api.support import (
    FIXED_NOW_MS,
    HOUR_MS,
    api_test_client,
    build_test_config,
    build_test_service,
)

DASHBOARD_URL = "/api/v1/monitoring/dashboard"


def _record(source: str = "web-vitals", *, age_ms: int = 0, **extra: object) -> dict[str, object]:
    return {
        "source": source,
        "metrics": {"cls": 0.05, "fid": 100, "lcp": 2000},
        "timestamp": FIXED_NOW_MS - age_ms,
        **extra,
    }


def test_collect_accepts_valid_record() -> None:
    service = build_test_service()
    with api_test_client(service=service) as client:
        response = client.post(DASHBOARD_URL, json=_record(environment="production"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Monitoring data received successfully"
    assert payload["data"]["source"] == "web-vitals"
    assert payload["data"]["status"] == "processed"
    assert payload["data"]["processed_at"] == FIXED_NOW_MS
    assert payload["request_id"]
    assert service.store.count() == 1


def test_collect_does_not_restrict_source_values() -> None:
    with api_test_client() as client:
        response = client.post(DASHBOARD_URL, json=_record("invalid-source"))

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_collect_rejects_missing_fields() -> None:
    service = build_test_service()
    with api_test_client(service=service) as client:
        response = client.post(DASHBOARD_URL, json={"metrics": {"cls": 0.05}})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"] == "Invalid monitoring data format"
    assert payload["error_code"] == "MONITORING_INVALID_FORMAT"
    assert service.store.count() == 0


def test_collect_rejects_json_array() -> None:
    with api_test_client() as client:
        response = client.post(DASHBOARD_URL, json=[])

    assert response.status_code == 400


def test_collect_invalid_json_is_server_error() -> None:
    with api_test_client() as client:
        empty = client.post(
            DASHBOARD_URL, content=b"", headers={"Content-Type": "application/json"}
        )
        garbage = client.post(
            DASHBOARD_URL, content=b"invalid json", headers={"Content-Type": "application/json"}
        )

    for response in (empty, garbage):
        assert response.status_code == 500
        payload = response.json()
        assert payload["success"] is False
        assert payload["error"] == "Internal server error"
        assert payload["error_code"] == "MONITORING_PROCESS_FAILED"


def test_collect_ignores_content_type() -> None:
    with api_test_client() as client:
        response = client.post(
            DASHBOARD_URL,
            content=json.dumps(_record()).encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )

    assert response.status_code == 200


def test_fetch_dashboard_defaults_and_cache_header() -> None:
    with api_test_client() as client:
        response = client.get(DASHBOARD_URL)

    assert response.status_code == 200
    assert "max-age=30" in response.headers["Cache-Control"]
    data = response.json()["data"]
    assert data["source"] == "all"
    assert data["time_range"] == "1h"
    assert data["environment"] == "production"
    assert data["summary"]["total_records"] == 0
    assert data["system_health"]["status"] == "no_data"
    assert data["alerts"] == []
    assert data["retention"]["long_window_ms"] == 86_400_000
    assert data["retention"]["short_window_ms"] == 7_200_000


def test_fetch_dashboard_reflects_collected_records() -> None:
    with api_test_client() as client:
        client.post(DASHBOARD_URL, json=_record("web-vitals", age_ms=10 * 60 * 1000))
        client.post(DASHBOARD_URL, json=_record("performance", age_ms=3 * HOUR_MS))
        client.post(DASHBOARD_URL, json=_record("error", age_ms=30 * HOUR_MS))
        response = client.get(DASHBOARD_URL, params={"time_range": "24h"})

    data = response.json()["data"]
    assert data["time_range"] == "24h"
    assert data["summary"]["total_records"] == 3
    assert data["summary"]["records_in_range"] == 2
    assert data["summary"]["unique_sources"] == 3
    assert data["retention"]["recent"] == 1
    assert data["retention"]["current"] == 1
    assert data["retention"]["stale"] == 1
    assert data["system_health"]["status"] == "healthy"
    assert [alert["source"] for alert in data["alerts"]] == ["error"]

    metrics = {entry["metric"]: entry for entry in data["metrics"]}
    assert metrics["lcp"]["count"] == 2
    assert metrics["lcp"]["mean"] == 2000.0


def test_fetch_dashboard_filters_source_and_environment() -> None:
    with api_test_client() as client:
        client.post(DASHBOARD_URL, json=_record("web-vitals", environment="staging"))
        client.post(DASHBOARD_URL, json=_record("web-vitals", environment="production"))
        client.post(DASHBOARD_URL, json=_record("performance"))
        response = client.get(
            DASHBOARD_URL, params={"source": "web-vitals", "environment": "staging"}
        )

    data = response.json()["data"]
    assert data["source"] == "web-vitals"
    assert data["environment"] == "staging"
    assert data["summary"]["total_records"] == 1


def test_fetch_dashboard_rejects_unknown_time_range() -> None:
    with api_test_client() as client:
        response = client.get(DASHBOARD_URL, params={"time_range": "3w"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_TIME_RANGE"


def test_update_config_merges_partial_changes() -> None:
    with api_test_client() as client:
        first = client.put(DASHBOARD_URL, json={"refresh_interval_ms": 5000})
        second = client.put(DASHBOARD_URL, json={"alert_thresholds": {"lcp": 2500}})

    assert first.status_code == 200
    assert first.json()["message"] == "Dashboard configuration updated successfully"
    data = second.json()["data"]
    assert data["refresh_interval_ms"] == 5000
    assert data["alert_thresholds"] == {"lcp": 2500.0}
    assert data["error_sample_rate"] == 1.0


def test_update_config_rejects_invalid_values() -> None:
    with api_test_client() as client:
        bad_rate = client.put(DASHBOARD_URL, json={"performance_sample_rate": 1.5})
        unknown = client.put(DASHBOARD_URL, json={"theme": "dark"})

    assert bad_rate.status_code == 422
    assert bad_rate.json()["error_code"] == "VALIDATION_ERROR"
    assert unknown.status_code == 422


def test_threshold_alert_after_config_update() -> None:
    with api_test_client() as client:
        client.put(DASHBOARD_URL, json={"alert_thresholds": {"lcp": 1500}})
        client.post(DASHBOARD_URL, json=_record())
        response = client.get(DASHBOARD_URL)

    alerts = response.json()["data"]["alerts"]
    assert len(alerts) == 1
    assert alerts[0]["level"] == "critical"
    assert alerts[0]["metric"] == "lcp"


def test_purge_stale_keeps_recent_records() -> None:
    service = build_test_service()
    with api_test_client(service=service) as client:
        client.post(DASHBOARD_URL, json=_record(age_ms=HOUR_MS))
        client.post(DASHBOARD_URL, json=_record(age_ms=25 * HOUR_MS))
        response = client.delete(DASHBOARD_URL)

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Monitoring data purged successfully"
    assert payload["data"]["scope"] == "stale"
    assert payload["data"]["purged_count"] == 1
    assert payload["data"]["remaining_count"] == 1
    assert payload["data"]["cutoff_ms"] == FIXED_NOW_MS - 86_400_000


def test_purge_all_for_one_source() -> None:
    service = build_test_service()
    with api_test_client(service=service) as client:
        client.post(DASHBOARD_URL, json=_record("web-vitals"))
        client.post(DASHBOARD_URL, json=_record("error"))
        response = client.delete(DASHBOARD_URL, params={"scope": "all", "source": "error"})

    data = response.json()["data"]
    assert data["purged_count"] == 1
    assert data["cutoff_ms"] is None
    assert [item.record.source for item in service.store.list_records()] == ["web-vitals"]


def test_dashboard_limits_store_size_from_config() -> None:
    config = build_test_config(max_stored_records=2)
    service = build_test_service(config=config)
    with api_test_client(config=config, service=service) as client:
        for index in range(3):
            client.post(DASHBOARD_URL, json=_record(f"agent-{index}"))

    assert [item.record.source for item in service.store.list_records()] == ["agent-1", "agent-2"]
