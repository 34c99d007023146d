"""
Reading Locust stats CSV files.

Locust writes one row per endpoint plus a final ``Aggregated`` row that
summarises all traffic.  The helpers here find that row and pull the
metrics out of it, tolerating the column-name differences between
Locust versions (``95%`` vs ``95%ile``, ``Name``/``Type`` placement) and
values with a trailing ``%``.

In-process runs write their results through Locust's own ``StatsCSV``
writer, so they and files produced by ``locust --csv`` are parsed by one
code path.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from api_automation.performance.exceptions import ParseFailure
from api_automation.performance.results import PerformanceTestResult, ScenarioType

logger = logging.getLogger(__name__)

AGGREGATED = "Aggregated"

P95_CANDIDATES = ("95%", "95%ile", "95th percentile", "p95")
P99_CANDIDATES = ("99%", "99%ile", "99th percentile", "p99")
P50_CANDIDATES = ("50%", "50%ile", "Median Response Time")


def load_aggregated_row(stats_path: Path) -> dict[str, str]:
    """
    Find and return the ``Aggregated`` summary row of a stats CSV.

    Raises:
        ParseFailure: If the file is unreadable or has no aggregated row.
    """
    try:
        with stats_path.open("r", encoding="utf-8", newline="") as handle:
            rows = list(csv.DictReader(handle))
    except OSError as exc:
        raise ParseFailure(f"Unable to read stats CSV {stats_path}: {exc}") from exc
    logger.debug("Read %d stats rows from %s", len(rows), stats_path)

    for row in rows:
        if row.get("Name") == AGGREGATED or row.get("Type") == AGGREGATED:
            return row

    raise ParseFailure("Could not find 'Aggregated' row in stats CSV")


def parse_float(value: Any, field_name: str) -> float:
    """
    Coerce a CSV cell to ``float``, stripping ``%`` suffixes if present.

    Raises:
        ParseFailure: If the value is missing, empty, or non-numeric.
    """
    if value is None:
        raise ParseFailure(f"Missing field: {field_name}")

    text = str(value).strip().replace("%", "")
    if text == "":
        raise ParseFailure(f"Empty value for field: {field_name}")

    try:
        return float(text)
    except ValueError as exc:
        raise ParseFailure(f"Non-numeric value for {field_name}: {value}") from exc


def _first_of(row: dict[str, str], candidates: tuple[str, ...], label: str) -> float:
    for candidate in candidates:
        if candidate in row and row[candidate] not in (None, "", "N/A"):
            return parse_float(row[candidate], candidate)
    raise ParseFailure(f"Could not find {label} column in stats CSV")


def extract_p95_ms(row: dict[str, str]) -> float:
    return _first_of(row, P95_CANDIDATES, "p95")


def compute_error_rate_percent(row: dict[str, str]) -> float:
    """
    Compute ``Failure Count / Request Count x 100`` for a stats row.

    Raises:
        ParseFailure: If the counts are missing or no request was recorded.
    """
    request_count = parse_float(row.get("Request Count"), "Request Count")
    failure_count = parse_float(row.get("Failure Count"), "Failure Count")

    if request_count <= 0:
        raise ParseFailure("Request Count must be > 0 for threshold checks")

    return (failure_count / request_count) * 100.0


def result_from_stats_csv(
    stats_path: Path,
    *,
    test_name: str,
    start_time: datetime,
    end_time: datetime,
    test_type: ScenarioType = ScenarioType.LOCUST,
) -> PerformanceTestResult:
    """Build an unevaluated result record from a stats CSV's aggregated row."""
    row = load_aggregated_row(stats_path)

    total = int(parse_float(row.get("Request Count"), "Request Count"))
    failed = int(parse_float(row.get("Failure Count"), "Failure Count"))

    return PerformanceTestResult(
        test_name=test_name,
        test_type=test_type,
        start_time=start_time,
        end_time=end_time,
        duration_seconds=max(int((end_time - start_time).total_seconds()), 0),
        total_requests=total,
        successful_requests=total - failed,
        failed_requests=failed,
        error_rate=compute_error_rate_percent(row),
        throughput=parse_float(row.get("Requests/s"), "Requests/s"),
        average_response_time=round(parse_float(row.get("Average Response Time"), "Average Response Time")),
        min_response_time=round(parse_float(row.get("Min Response Time") or 0, "Min Response Time")),
        max_response_time=round(parse_float(row.get("Max Response Time") or 0, "Max Response Time")),
        p50_response_time=round(_first_of(row, P50_CANDIDATES, "p50")),
        p95_response_time=round(extract_p95_ms(row)),
        p99_response_time=round(_first_of(row, P99_CANDIDATES, "p99")),
        report_path=str(stats_path),
    )
