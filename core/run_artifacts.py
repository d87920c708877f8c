"""Run report helpers for CLI parse runs."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Mapping

DEFAULT_REPORT_DIR = "output/run_reports"


def summarize_counts(per_file: Mapping[str, Mapping[str, int]]) -> dict[str, int]:
    """Sum per-category fact counts across files."""
    totals: dict[str, int] = {}
    for counts in per_file.values():
        for category, count in counts.items():
            totals[category] = totals.get(category, 0) + count
    return totals


def build_run_report(
    request_id: str,
    parsed: Mapping[str, Mapping[str, int]],
    errors: Mapping[str, str],
    elapsed_seconds: float,
) -> dict[str, Any]:
    """Assemble the JSON-serialisable report for one run.

    Args:
        request_id: Correlation ID shared with the run's log lines.
        parsed: File -> per-category fact counts for successful files.
        errors: File -> error message for failed files.
        elapsed_seconds: Wall time of the run.
    """
    return {
        "request_id": request_id,
        "status": "failed" if errors else "ok",
        "files_parsed": len(parsed),
        "files_failed": len(errors),
        "totals": summarize_counts(parsed),
        "parsed": {path: dict(counts) for path, counts in parsed.items()},
        "errors": dict(errors),
        "elapsed_seconds": round(elapsed_seconds, 3),
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
    }


def write_run_report(report: Mapping[str, Any], output_dir: str = DEFAULT_REPORT_DIR) -> str:
    """Write ``report`` as ``<request_id>.json`` under ``output_dir``; return the path."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{report.get('request_id', 'run')}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, sort_keys=True)
    return path
