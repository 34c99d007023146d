"""
Performance-test orchestration.

:class:`PerformanceTestManager` owns one session: it generates scenario
scripts, hands them to an executor, gates each result against the
configured thresholds and keeps the evaluated records in order.  A
threshold breach is recorded on the result and never raised; only
infrastructure failures (script cannot be written, engine cannot run)
abort the single scenario, and in that case nothing is appended to the
history.

Everything runs on the caller's thread and blocks until the engine
finishes, so the history list needs no locking.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from api_automation.log_utils import log_performance_metric
from api_automation.performance import scripts
from api_automation.performance.config import PerformanceConfig
from api_automation.performance.k6_runner import K6TestRunner
from api_automation.performance.locust_runner import LocustTestRunner, create_test_properties
from api_automation.performance.results import (
    PerformanceTestResult,
    PerformanceTestSummary,
    ScenarioType,
    summarize,
)
from api_automation.performance.thresholds import apply_thresholds

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def current_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class PerformanceTestManager:
    """
    Runs load, stress, spike and plan scenarios and accumulates their results.

    Args:
        config: Session configuration; loaded from file/environment when omitted.
        k6_runner: Script-driven executor (defaults to :class:`K6TestRunner`).
        locust_runner: Plan-driven executor, created on first plan run
            when not supplied.
    """

    def __init__(
        self,
        config: PerformanceConfig | None = None,
        k6_runner: K6TestRunner | None = None,
        locust_runner: LocustTestRunner | None = None,
    ) -> None:
        self.config = config or PerformanceConfig.load()
        self.k6_runner = k6_runner or K6TestRunner(self.config)
        self._locust_runner = locust_runner
        self._results: list[PerformanceTestResult] = []

        self.config.reports_path.mkdir(parents=True, exist_ok=True)

        logger.info("PerformanceTestManager initialized")
        logger.info("Reports directory: %s", self.config.reports_directory)
        logger.info("Performance thresholds: %s", self.config.describe())

    @property
    def locust_runner(self) -> LocustTestRunner:
        if self._locust_runner is None:
            self._locust_runner = LocustTestRunner(self.config)
        return self._locust_runner

    # ------------------------------------------------------------------
    # Scenario runs
    # ------------------------------------------------------------------

    def run_load_test(self, base_url: str, users: int, duration_seconds: int) -> PerformanceTestResult:
        """
        Ramp up to *users*, hold for *duration_seconds*, ramp down.

        Returns:
            The evaluated result, tagged ``LOAD``.
        """
        logger.info(
            "Starting load test - Users: %s, Duration: %ss, URL: %s", users, duration_seconds, base_url
        )
        content = scripts.load_test_script(base_url, users, duration_seconds, self.config)
        result = self._run_script(
            content,
            "load_test_script.js",
            f"load_test_{users}u_{duration_seconds}s_{current_timestamp()}",
            ScenarioType.LOAD,
        )

        log_performance_metric("Load Test Throughput", result.throughput, "req/s")
        log_performance_metric("Load Test P95", result.p95_response_time, "ms")
        log_performance_metric("Load Test Error Rate", result.error_rate, "%")
        return result

    def run_stress_test(self, base_url: str, max_users: int, duration_seconds: int) -> PerformanceTestResult:
        """Mixed three-endpoint traffic at *max_users*; tagged ``STRESS``."""
        logger.info(
            "Starting stress test - Max Users: %s, Duration: %ss, URL: %s",
            max_users,
            duration_seconds,
            base_url,
        )
        content = scripts.stress_test_script(base_url, max_users, duration_seconds, self.config)
        result = self._run_script(
            content,
            "stress_test_script.js",
            f"stress_test_{max_users}u_{duration_seconds}s_{current_timestamp()}",
            ScenarioType.STRESS,
        )

        log_performance_metric("Stress Test Peak Throughput", result.throughput, "req/s")
        log_performance_metric("Stress Test P99", result.p99_response_time, "ms")
        return result

    def run_spike_test(self, base_url: str, spike_users: int, spike_duration_seconds: int) -> PerformanceTestResult:
        """Baseline, sudden spike, hold, recovery and ramp-down; tagged ``SPIKE``."""
        logger.info(
            "Starting spike test - Spike Users: %s, Duration: %ss, URL: %s",
            spike_users,
            spike_duration_seconds,
            base_url,
        )
        content = scripts.spike_test_script(base_url, spike_users, spike_duration_seconds, self.config)
        result = self._run_script(
            content,
            "spike_test_script.js",
            f"spike_test_{spike_users}u_{spike_duration_seconds}s_{current_timestamp()}",
            ScenarioType.SPIKE,
        )

        log_performance_metric("Spike Test Recovery Time", result.average_response_time, "ms")
        return result

    def run_plan_test(
        self,
        plan_path: str | Path,
        base_url: str,
        users: int,
        duration_seconds: int,
        ramp_up: int | None = None,
    ) -> PerformanceTestResult:
        """Run a Locust plan file through the plan-driven executor."""
        logger.info(
            "Starting plan test - Plan: %s, Users: %s, Duration: %ss, URL: %s",
            plan_path,
            users,
            duration_seconds,
            base_url,
        )
        test_name = f"plan_test_{Path(plan_path).stem}_{users}u_{duration_seconds}s_{current_timestamp()}"
        properties = create_test_properties(base_url, users, duration_seconds, ramp_up)

        raw = self.locust_runner.execute(plan_path, test_name, properties)
        result = self._record(raw)

        log_performance_metric("Plan Test Throughput", result.throughput, "req/s")
        log_performance_metric("Plan Test P95", result.p95_response_time, "ms")
        return result

    def _run_script(
        self,
        content: str,
        filename: str,
        test_name: str,
        scenario_type: ScenarioType,
    ) -> PerformanceTestResult:
        script_path = scripts.save_script(content, filename, self.config.reports_directory)
        raw = self.k6_runner.execute(script_path, test_name)
        return self._record(raw.with_type(scenario_type))

    def _record(self, raw: PerformanceTestResult) -> PerformanceTestResult:
        result = apply_thresholds(raw, self.config)
        self._results.append(result)
        return result

    # ------------------------------------------------------------------
    # Session history
    # ------------------------------------------------------------------

    def all_results(self) -> list[PerformanceTestResult]:
        """Return a copy of the session history in execution order."""
        return list(self._results)

    def summarize(self) -> PerformanceTestSummary:
        logger.info("Generating performance test summary for %d tests", len(self._results))
        return summarize(self._results)
