# Compares the monitoring dashboard OpenAPI schema against the last committed snapshot.
# Breaking changes (removed paths, schemas, required fields, properties) fail the check
# unless the API version path changed as well. The snapshot is refreshed on every run.
# ruff: noqa: E402

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from monitoring_dashboard.api.api_config import get_api_config
from monitoring_dashboard.api.app import app
from monitoring_dashboard.api.schema_versions import detect_breaking_schema_changes

DEFAULT_SNAPSHOT_DIR = Path("reports/api/contract_checks")


def build_snapshot() -> dict[str, Any]:
    config = get_api_config()
    openapi_schema = app.openapi()
    return {
        "api_version_path": config.api_version_path,
        "schema_version": config.schema_version,
        "generated_at": datetime.now(tz=UTC).isoformat(),
        "paths": openapi_schema.get("paths", {}),
        "components": openapi_schema.get("components", {}),
    }


def render_report(current: dict[str, Any], previous: dict[str, Any] | None, findings: list[str]) -> str:
    lines = [
        "# Monitoring Dashboard API Contract Report",
        "",
        f"Generated at: {current['generated_at']}",
        f"API version path: `{current['api_version_path']}`",
        f"Schema version: `{current['schema_version']}`",
        "",
    ]
    if previous is None:
        lines.append("No previous snapshot; this run created the baseline.")
    elif findings:
        lines.append("## Breaking changes")
        lines.append("")
        lines.extend(f"- {item}" for item in findings)
    else:
        lines.append("No breaking changes detected.")
    return "\n".join(lines) + "\n"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check the API contract against the last snapshot")
    parser.add_argument("--snapshot-dir", type=Path, default=DEFAULT_SNAPSHOT_DIR)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    snapshot_path = args.snapshot_dir / "latest_contract_snapshot.json"
    report_path = args.snapshot_dir / "contract_diff_report.md"
    args.snapshot_dir.mkdir(parents=True, exist_ok=True)

    current = build_snapshot()
    previous = (
        json.loads(snapshot_path.read_text(encoding="utf-8")) if snapshot_path.exists() else None
    )
    findings = (
        detect_breaking_schema_changes(previous_snapshot=previous, current_snapshot=current)
        if previous is not None
        else []
    )

    report_path.write_text(render_report(current, previous, findings), encoding="utf-8")
    snapshot_path.write_text(json.dumps(current, indent=2, sort_keys=True), encoding="utf-8")

    version_unchanged = previous is not None and previous.get("api_version_path") == current["api_version_path"]
    if findings and version_unchanged:
        print("Breaking contract changes detected without an API version bump:")
        for item in findings:
            print(f"- {item}")
        return 1

    print(f"Contract check complete; report written to {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
