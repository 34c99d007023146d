"""
Performance-test orchestration.

Runs load, stress and spike scenarios through k6 and pre-authored plans
through an in-process Locust engine, gates each result on configured
latency, error-rate and throughput thresholds, and renders HTML/JSON/CSV
reports for the session.

Typical use::

    from api_automation.performance import PerformanceReportGenerator, PerformanceTestManager

    manager = PerformanceTestManager()
    result = manager.run_load_test("https://jsonplaceholder.typicode.com", users=10, duration_seconds=60)
    PerformanceReportGenerator(manager.config.reports_directory).generate_all(manager.summarize())
"""

from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import (
    ConfigurationFailure,
    ExecutionFailure,
    ExecutorFailure,
    ParseFailure,
    PerformanceError,
    ReportGenerationFailure,
)
from api_automation.performance.manager import PerformanceTestManager
from api_automation.performance.reports import PerformanceReportGenerator
from api_automation.performance.results import (
    PerformanceTestResult,
    PerformanceTestSummary,
    ScenarioType,
    summarize,
)
from api_automation.performance.thresholds import apply_thresholds, evaluate

__all__ = [
    "ConfigurationFailure",
    "ExecutionFailure",
    "ExecutorFailure",
    "ParseFailure",
    "PerformanceConfig",
    "PerformanceError",
    "PerformanceReportGenerator",
    "PerformanceTestManager",
    "PerformanceTestResult",
    "PerformanceTestSummary",
    "ScenarioType",
    "apply_thresholds",
    "evaluate",
    "summarize",
]
