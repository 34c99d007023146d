"""
Threshold evaluation for performance results.

Two layers are provided:

- :func:`evaluate` / :func:`apply_thresholds`: the gate used by the
  orchestrator.  Every check runs, and each violated one contributes a
  clause to the failure reason, so a single report line explains all the
  problems with a run rather than only the first.
- ``assert_*`` helpers: the same comparisons as plain assertions for use
  inside pytest tests, raising :class:`AssertionError` with a readable
  message.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from api_automation.log_utils import log_validation_pass
from api_automation.performance.config import PerformanceConfig
from api_automation.performance.results import PerformanceTestResult

logger = logging.getLogger(__name__)


class ThresholdOutcome(NamedTuple):
    passed: bool
    reason: str


def evaluate(result: PerformanceTestResult, config: PerformanceConfig) -> ThresholdOutcome:
    """
    Compare *result* against the configured limits.

    Checks, in order: error rate, P95 latency, P99 latency, throughput.
    The reason lists one sentence per violated check and is empty when
    everything passed.  The function is pure: the same inputs always give
    the same outcome.
    """
    clauses: list[str] = []

    if result.error_rate > config.error_rate_threshold:
        clauses.append(
            f"Error rate {result.error_rate}% exceeds threshold {config.error_rate_threshold}%."
        )
    if result.p95_response_time > config.p95_threshold_ms:
        clauses.append(
            f"P95 response time {result.p95_response_time}ms exceeds threshold "
            f"{config.p95_threshold_ms}ms."
        )
    if result.p99_response_time > config.p99_threshold_ms:
        clauses.append(
            f"P99 response time {result.p99_response_time}ms exceeds threshold "
            f"{config.p99_threshold_ms}ms."
        )
    if result.throughput < config.minimum_throughput:
        clauses.append(
            f"Throughput {result.throughput} req/s below minimum {config.minimum_throughput} req/s."
        )

    return ThresholdOutcome(passed=not clauses, reason=" ".join(clauses))


def apply_thresholds(result: PerformanceTestResult, config: PerformanceConfig) -> PerformanceTestResult:
    """
    Return a copy of *result* with the threshold verdict set.

    Meant to be called once on a freshly executed record.  If the executor
    already attached a failure reason (a degraded run), the record stays
    failed and that reason is kept ahead of any threshold clauses.
    """
    outcome = evaluate(result, config)
    passed = outcome.passed
    reason = outcome.reason

    if result.failure_reason:
        passed = False
        reason = f"{result.failure_reason} {reason}".strip()

    if passed:
        logger.info("Performance test %s passed all thresholds", result.test_name)
    else:
        logger.error("Performance test %s failed: %s", result.test_name, reason)

    return result.with_outcome(passed, reason)


# ---------------------------------------------------------------------------
# Assertion helpers
# ---------------------------------------------------------------------------

_PERCENTILE_FIELDS = {
    "avg": "average_response_time",
    "average": "average_response_time",
    "p50": "p50_response_time",
    "median": "p50_response_time",
    "p95": "p95_response_time",
    "p99": "p99_response_time",
    "max": "max_response_time",
}


def response_time_for(result: PerformanceTestResult, percentile: str) -> int:
    """
    Return the latency of *result* selected by *percentile*.

    Raises:
        ValueError: If *percentile* is not one of avg/average, p50/median,
            p95, p99 or max.
    """
    field_name = _PERCENTILE_FIELDS.get(percentile.lower())
    if field_name is None:
        raise ValueError(f"Unsupported percentile: {percentile}")
    return getattr(result, field_name)


def assert_response_time(result: PerformanceTestResult, max_response_ms: int, percentile: str) -> None:
    actual = response_time_for(result, percentile)
    if actual > max_response_ms:
        raise AssertionError(f"{percentile} response time {actual}ms should be <= {max_response_ms}ms")
    log_validation_pass(f"{percentile} response time", f"<= {max_response_ms}ms", f"{actual}ms")


def assert_throughput(result: PerformanceTestResult, min_throughput: float) -> None:
    if result.throughput < min_throughput:
        raise AssertionError(
            f"Throughput {result.throughput:.2f} req/s should be >= {min_throughput:.2f} req/s"
        )
    log_validation_pass("Throughput", f">= {min_throughput} req/s", f"{result.throughput} req/s")


def assert_error_rate(result: PerformanceTestResult, max_error_rate: float) -> None:
    if result.error_rate > max_error_rate:
        raise AssertionError(f"Error rate {result.error_rate:.2f}% should be <= {max_error_rate:.2f}%")
    log_validation_pass("Error rate", f"<= {max_error_rate}%", f"{result.error_rate}%")


def assert_success_rate(result: PerformanceTestResult, min_success_rate: float) -> None:
    actual = result.success_rate
    if actual < min_success_rate:
        raise AssertionError(f"Success rate {actual:.2f}% should be >= {min_success_rate:.2f}%")
    log_validation_pass("Success rate", f">= {min_success_rate}%", f"{actual}%")


def assert_performance_thresholds(result: PerformanceTestResult, config: PerformanceConfig) -> None:
    """Assert all four configured limits (P95, P99, error rate, throughput)."""
    assert_response_time(result, config.p95_threshold_ms, "p95")
    assert_response_time(result, config.p99_threshold_ms, "p99")
    assert_error_rate(result, config.error_rate_threshold)
    assert_throughput(result, config.minimum_throughput)
    logger.info("All performance thresholds validated successfully")


def assert_no_degradation(
    current: PerformanceTestResult,
    baseline: PerformanceTestResult,
    max_degradation_percent: float,
) -> None:
    """
    Assert *current* is not more than *max_degradation_percent* worse than *baseline*.

    Throughput may drop and P95 latency may grow by at most the given
    percentage of the baseline value.  A baseline metric of zero gives no
    reference point, so that comparison is skipped.
    """
    if baseline.throughput > 0:
        throughput_change = (current.throughput - baseline.throughput) / baseline.throughput * 100
        if throughput_change < -max_degradation_percent:
            raise AssertionError(
                f"Throughput degradation {-throughput_change:.2f}% should not exceed "
                f"{max_degradation_percent:.2f}%"
            )
    else:
        logger.warning("Baseline throughput is zero; skipping throughput comparison")

    if baseline.p95_response_time > 0:
        latency_change = (
            (current.p95_response_time - baseline.p95_response_time)
            / baseline.p95_response_time
            * 100
        )
        if latency_change > max_degradation_percent:
            raise AssertionError(
                f"P95 response time degradation {latency_change:.2f}% should not exceed "
                f"{max_degradation_percent:.2f}%"
            )
    else:
        logger.warning("Baseline P95 is zero; skipping response time comparison")

    log_validation_pass(
        "Performance comparison", f"within {max_degradation_percent}% degradation", "validated"
    )
