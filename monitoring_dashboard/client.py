# This file implements the HTTP client agents use to talk to the monitoring dashboard API.
# It normalizes envelope parsing and converts transport failures into one clear exception type.
# Records are checked with the same presence-only validator the server applies before sending.

from __future__ import annotations

from typing import Any

import requests

from monitoring_dashboard.monitoring.records import validate_monitoring_data

DASHBOARD_PATH = "/monitoring/dashboard"


class ApiUnavailableError(RuntimeError):
    """Raised when the API cannot be reached or responds with server errors."""


class MonitoringDashboardClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int = 8,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def send_record(self, record: dict[str, Any]) -> dict[str, Any]:
        """POST one monitoring record and return the collect result."""

        if not validate_monitoring_data(record):
            raise ValueError("Record must contain 'source', 'metrics', and 'timestamp'.")
        payload = self._request_json("POST", DASHBOARD_PATH, json_body=record)
        return dict(payload.get("data") or {})

    def get_dashboard(
        self,
        *,
        source: str = "all",
        time_range: str | None = None,
        environment: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"source": source}
        if time_range:
            params["time_range"] = time_range
        if environment:
            params["environment"] = environment
        payload = self._request_json("GET", DASHBOARD_PATH, params=params)
        return dict(payload.get("data") or {})

    def update_config(self, **changes: Any) -> dict[str, Any]:
        payload = self._request_json("PUT", DASHBOARD_PATH, json_body=changes)
        return dict(payload.get("data") or {})

    def purge(self, *, scope: str = "stale", source: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"scope": scope}
        if source:
            params["source"] = source
        payload = self._request_json("DELETE", DASHBOARD_PATH, params=params)
        return dict(payload.get("data") or {})

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApiUnavailableError(f"API request failed for {url}: {exc}") from exc

        if response.status_code >= 500:
            raise ApiUnavailableError(
                f"API request failed with status {response.status_code} for {url}"
            )
        if response.status_code >= 400:
            raise ValueError(
                f"API request was rejected with status {response.status_code} for {url}: "
                f"{_error_message(response)}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiUnavailableError(f"API did not return valid JSON for {url}") from exc

        if not isinstance(payload, dict):
            raise ApiUnavailableError(f"Unexpected payload shape from {url}")
        return payload


def _error_message(response: Any) -> str:
    try:
        body = response.json()
    except ValueError:
        return "no error body"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "no error body"
