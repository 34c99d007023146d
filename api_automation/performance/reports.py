"""
Performance report generation.

Turns a session's results into three artifacts:

- **HTML**: a human-readable dashboard rendered from the Jinja2
  templates in ``api_automation/performance/templates/``
- **JSON**: the raw records, suitable for reloading with
  :meth:`PerformanceTestResult.from_dict`
- **CSV**: one row per result for spreadsheets and trend tooling

Every artifact is written as ``{reports_directory}/{name}_{timestamp}.{ext}``.
The ``render_*`` methods are pure and return the document text; the
``generate_*`` methods add the file handling.

Key Concepts Demonstrated:
- Package-data templates rendered through Jinja2 with autoescaping
- Separation of rendering from I/O for testability
- Wrapping low-level I/O errors in a domain exception
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from api_automation.performance.exceptions import ReportGenerationFailure
from api_automation.performance.results import PerformanceTestResult, PerformanceTestSummary
from api_automation.utils.templates import TemplateLoader, format_decimal, format_number, safe

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
GENERATION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

CSV_HEADER = [
    "Test Name",
    "Type",
    "Status",
    "Start Time",
    "Duration (s)",
    "Total Requests",
    "Successful",
    "Failed",
    "Error Rate (%)",
    "Throughput (req/s)",
    "Avg Response (ms)",
    "P95 (ms)",
    "P99 (ms)",
]

SUMMARY_REPORT = "performance_summary"
DATA_REPORT = "performance_data"
EXPORT_REPORT = "performance_export"

EXCELLENT_PASS_RATE = 90.0
WARNING_PASS_RATE = 70.0

RECOMMENDATIONS = {
    "success": (
        "Excellent Performance:",
        "System is performing well within acceptable thresholds. "
        "Consider establishing this as your performance baseline.",
    ),
    "warning": (
        "Performance Concerns:",
        "Some tests are failing thresholds. "
        "Review failed tests and consider optimizing critical paths.",
    ),
    "danger": (
        "Performance Issues:",
        "Significant performance degradation detected. "
        "Immediate investigation and optimization required.",
    ),
}


def recommendation_level(pass_rate: float) -> str:
    """Map a pass rate to ``success`` (>= 90), ``warning`` (>= 70) or ``danger``."""
    if pass_rate >= EXCELLENT_PASS_RATE:
        return "success"
    if pass_rate >= WARNING_PASS_RATE:
        return "warning"
    return "danger"


class PerformanceReportGenerator:
    """
    Writes HTML, JSON and CSV reports for a list of results.

    Args:
        reports_directory: Output directory; created when a report is written.
    """

    def __init__(self, reports_directory: str | Path) -> None:
        self.reports_dir = Path(reports_directory)
        self.templates = TemplateLoader("api_automation.performance")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_html(self, summary: PerformanceTestSummary) -> str:
        results = summary.results
        total_requests = sum(result.total_requests for result in results)
        overall_success_rate = (
            sum(result.success_rate for result in results) / len(results) if results else 0.0
        )
        peak_throughput = max((result.throughput for result in results), default=0.0)

        level = recommendation_level(summary.pass_rate)
        title, message = RECOMMENDATIONS[level]

        failed_section = ""
        if summary.failed_tests > 0:
            failed_section = self._failed_tests_section(results)

        variables = {
            "GENERATION_TIME": datetime.now().strftime(GENERATION_TIME_FORMAT),
            "TOTAL_TESTS": summary.total_tests,
            "PASSED_TESTS": summary.passed_tests,
            "FAILED_TESTS": summary.failed_tests,
            "PASS_RATE": format_decimal(summary.pass_rate, 1),
            "AVG_THROUGHPUT": format_decimal(summary.average_throughput, 1),
            "AVG_P95": format_decimal(summary.average_p95_response_time, 0),
            "AVG_ERROR_RATE": format_decimal(summary.average_error_rate, 2),
            "TOTAL_REQUESTS": format_number(total_requests),
            "OVERALL_SUCCESS_RATE": format_decimal(overall_success_rate, 1),
            "PEAK_THROUGHPUT": format_decimal(peak_throughput, 1),
            "BASELINE_STATUS": "ESTABLISHED" if summary.passed_tests > 0 else "NEEDS ATTENTION",
            "TEST_RESULTS_ROWS": safe(self._result_rows(results)),
            "FAILED_TESTS_SECTION": safe(failed_section),
            "RECOMMENDATION_CLASS": f"recommendation-{level}",
            "RECOMMENDATION_TITLE": title,
            "RECOMMENDATION_TEXT": message,
        }
        return self.templates.render("performance-report.html", variables)

    def _result_rows(self, results: Sequence[PerformanceTestResult]) -> str:
        rows = []
        for result in results:
            rows.append(
                self.templates.render(
                    "test-result-row.html",
                    {
                        "TEST_NAME": result.test_name,
                        "TEST_TYPE": result.test_type.value,
                        "STATUS_CLASS": "status-passed" if result.passed else "status-failed",
                        "STATUS_TEXT": "PASSED" if result.passed else "FAILED",
                        "DURATION": result.duration_seconds,
                        "TOTAL_REQUESTS": format_number(result.total_requests),
                        "SUCCESS_RATE": format_decimal(result.success_rate, 2),
                        "THROUGHPUT": format_decimal(result.throughput, 2),
                        "AVG_RESPONSE_TIME": result.average_response_time,
                        "P95_RESPONSE_TIME": result.p95_response_time,
                        "P99_RESPONSE_TIME": result.p99_response_time,
                        "ERROR_RATE": format_decimal(result.error_rate, 2),
                    },
                )
            )
        return "\n".join(rows)

    def _failed_tests_section(self, results: Sequence[PerformanceTestResult]) -> str:
        rows = []
        for result in results:
            if result.passed:
                continue
            rows.append(
                self.templates.render(
                    "failed-test-row.html",
                    {
                        "TEST_NAME": result.test_name,
                        "FAILURE_REASON": result.failure_reason or "Threshold exceeded",
                        "ERROR_RATE": format_decimal(result.error_rate, 2),
                        "P95_RESPONSE_TIME": result.p95_response_time,
                        "THROUGHPUT": format_decimal(result.throughput, 2),
                    },
                )
            )
        return self.templates.render("failed-tests-section.html", {"FAILED_TEST_ROWS": safe("\n".join(rows))})

    @staticmethod
    def render_json(results: Sequence[PerformanceTestResult]) -> str:
        return json.dumps([result.to_dict() for result in results], indent=2)

    @staticmethod
    def render_csv(results: Sequence[PerformanceTestResult]) -> str:
        """Render *results* as CSV: a header line plus exactly one line per result."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for result in results:
            writer.writerow(
                [
                    result.test_name,
                    result.test_type.value,
                    "PASSED" if result.passed else "FAILED",
                    result.start_time.isoformat(),
                    result.duration_seconds,
                    result.total_requests,
                    result.successful_requests,
                    result.failed_requests,
                    f"{result.error_rate:.2f}",
                    f"{result.throughput:.2f}",
                    result.average_response_time,
                    result.p95_response_time,
                    result.p99_response_time,
                ]
            )
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def report_path(self, name: str, extension: str) -> Path:
        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        return self.reports_dir / f"{name}_{timestamp}.{extension}"

    def _write(self, name: str, extension: str, content: str, label: str) -> Path:
        path = self.report_path(name, extension)
        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to generate %s performance report: %s", label, exc)
            raise ReportGenerationFailure(f"{label} report generation failed: {exc}") from exc

        logger.info("%s performance report generated: %s", label, path)
        return path

    def generate_html_report(self, summary: PerformanceTestSummary, name: str) -> Path:
        return self._write(name, "html", self.render_html(summary), "HTML")

    def generate_json_report(self, results: Sequence[PerformanceTestResult], name: str) -> Path:
        return self._write(name, "json", self.render_json(results), "JSON")

    def generate_csv_report(self, results: Sequence[PerformanceTestResult], name: str) -> Path:
        return self._write(name, "csv", self.render_csv(results), "CSV")

    def generate_all(self, summary: PerformanceTestSummary, prefix: str = "") -> list[Path]:
        """
        Write the standard summary (HTML), data (JSON) and export (CSV) reports.

        Args:
            summary: Session summary; its ``results`` feed the JSON and CSV.
            prefix: Optional name prefix, joined to each report name with ``_``.
        """

        def named(base: str) -> str:
            return f"{prefix}_{base}" if prefix else base

        results = list(summary.results)
        return [
            self.generate_html_report(summary, named(SUMMARY_REPORT)),
            self.generate_json_report(results, named(DATA_REPORT)),
            self.generate_csv_report(results, named(EXPORT_REPORT)),
        ]
