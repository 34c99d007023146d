"""
Unit tests for HTML, JSON and CSV report generation.
"""

import json
import re
from unittest.mock import patch

import pytest

from api_automation.performance.exceptions import ReportGenerationFailure
from api_automation.performance.reports import (
    CSV_HEADER,
    PerformanceReportGenerator,
    recommendation_level,
)
from api_automation.performance.results import PerformanceTestResult, ScenarioType, summarize


pytestmark = pytest.mark.unit


@pytest.fixture
def generator(reports_dir):
    return PerformanceReportGenerator(reports_dir)


@pytest.fixture
def mixed_results(make_result):
    return [
        make_result(test_name="load_ok", passed=True, total_requests=1200, successful_requests=1200, failed_requests=0),
        make_result(test_name="stress_ok", test_type=ScenarioType.STRESS, passed=True, throughput=42.0),
        make_result(
            test_name="spike_bad",
            test_type=ScenarioType.SPIKE,
            passed=False,
            p95_response_time=2600,
            failure_reason="P95 response time 2600ms exceeds threshold 2000ms.",
        ),
    ]


# -----------------------------------------------------------------------------
# CSV
# -----------------------------------------------------------------------------

def test_csv_has_header_plus_one_line_per_result(generator, mixed_results):
    # Act
    lines = generator.render_csv(mixed_results).splitlines()

    # Assert
    assert len(lines) == len(mixed_results) + 1
    assert lines[0] == ",".join(CSV_HEADER)
    for line in lines:
        assert len(line.split(",")) == 13


def test_csv_row_formatting(generator, make_result):
    result = make_result(passed=True, error_rate=0.5, throughput=15.0)

    row = generator.render_csv([result]).splitlines()[1].split(",")

    assert row == [
        "load_test_10u_60s_20240501_120000",
        "LOAD",
        "PASSED",
        "2024-05-01T12:00:00",
        "60",
        "1000",
        "995",
        "5",
        "0.50",
        "15.00",
        "400",
        "1500",
        "2500",
    ]


def test_csv_for_empty_session_is_header_only(generator):
    assert generator.render_csv([]).splitlines() == [",".join(CSV_HEADER)]


# -----------------------------------------------------------------------------
# JSON
# -----------------------------------------------------------------------------

def test_json_round_trips_results(generator, mixed_results):
    # Act
    payload = json.loads(generator.render_json(mixed_results))
    restored = [PerformanceTestResult.from_dict(item) for item in payload]

    # Assert
    assert restored == mixed_results


def test_json_is_indented(generator, make_result):
    assert "\n  {" in generator.render_json([make_result()])


# -----------------------------------------------------------------------------
# HTML
# -----------------------------------------------------------------------------

def test_html_contains_summary_figures(generator, mixed_results):
    html = generator.render_html(summarize(mixed_results))

    assert "66.7%" in html
    assert "ESTABLISHED" in html
    assert "3,200" in html
    assert "42.0 req/s" in html
    assert "recommendation-danger" in html


def test_html_lists_every_result(generator, mixed_results):
    html = generator.render_html(summarize(mixed_results))

    for result in mixed_results:
        assert result.test_name in html
    assert html.count('class="status-passed"') == 2
    assert html.count('class="status-failed"') == 1


def test_html_failed_section_only_when_failures(generator, make_result):
    passing = generator.render_html(summarize([make_result(passed=True)]))
    failing = generator.render_html(summarize([make_result(passed=False, failure_reason="too slow")]))

    assert 'id="failed-tests"' not in passing
    assert 'id="failed-tests"' in failing
    assert "too slow" in failing


def test_html_failed_row_defaults_reason(generator, make_result):
    html = generator.render_html(summarize([make_result(passed=False)]))

    assert "Threshold exceeded" in html


def test_html_escapes_test_names(generator, make_result):
    html = generator.render_html(summarize([make_result(test_name="<script>alert(1)</script>", passed=True)]))

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_html_for_empty_session(generator):
    html = generator.render_html(summarize([]))

    assert "NEEDS ATTENTION" in html
    assert "recommendation-danger" in html
    assert 'id="failed-tests"' not in html


@pytest.mark.parametrize(
    "pass_rate, level",
    [(100.0, "success"), (90.0, "success"), (89.9, "warning"), (70.0, "warning"), (69.9, "danger"), (0.0, "danger")],
)
def test_recommendation_tiers(pass_rate, level):
    assert recommendation_level(pass_rate) == level


# -----------------------------------------------------------------------------
# Writing
# -----------------------------------------------------------------------------

def test_generate_reports_write_timestamped_files(generator, reports_dir, mixed_results):
    # Act
    html_path = generator.generate_html_report(summarize(mixed_results), "nightly")
    json_path = generator.generate_json_report(mixed_results, "nightly")
    csv_path = generator.generate_csv_report(mixed_results, "nightly")

    # Assert
    for path, extension in ((html_path, "html"), (json_path, "json"), (csv_path, "csv")):
        assert path.parent == reports_dir
        assert re.fullmatch(rf"nightly_\d{{8}}_\d{{6}}\.{extension}", path.name)
        assert path.read_text(encoding="utf-8")


def test_generate_all_writes_standard_artifacts(generator, mixed_results):
    paths = generator.generate_all(summarize(mixed_results), "ci")

    names = [path.name for path in paths]
    assert names[0].startswith("ci_performance_summary_") and names[0].endswith(".html")
    assert names[1].startswith("ci_performance_data_") and names[1].endswith(".json")
    assert names[2].startswith("ci_performance_export_") and names[2].endswith(".csv")


def test_write_failure_raises_report_generation_failure(generator, make_result):
    with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
        with pytest.raises(ReportGenerationFailure, match="disk full"):
            generator.generate_csv_report([make_result()], "broken")
