"""
Result records for performance-test runs and their session summary.

:class:`PerformanceTestResult` is the measured outcome of one scenario.
Executors build it once when a run finishes; the threshold step then
produces an evaluated copy via :meth:`PerformanceTestResult.with_outcome`.
Records are frozen; history held by the orchestrator is shared with
report writers as-is.

:func:`summarize` reduces a list of records into a
:class:`PerformanceTestSummary`.  The summary is always recomputed from
the records and never stored on its own.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ScenarioType(str, Enum):
    """Kind of scenario a result was produced by."""

    LOAD = "LOAD"
    STRESS = "STRESS"
    SPIKE = "SPIKE"
    VOLUME = "VOLUME"
    K6 = "K6"
    LOCUST = "LOCUST"


@dataclass(frozen=True)
class PerformanceTestResult:
    """
    Measurements of one executed scenario.

    Attributes:
        test_name: Scenario name, unique within a session by convention.
        test_type: Scenario kind.
        start_time: Wall-clock time the engine was started.
        end_time: Wall-clock time the engine finished.
        duration_seconds: Whole seconds between start and end.
        total_requests: Requests issued by the engine.
        successful_requests: Requests that succeeded.
        failed_requests: Requests that failed.
        error_rate: Failure percentage (0-100) as reported by the engine.
            Not guaranteed to equal ``failed / total * 100``.
        throughput: Requests per second.
        average_response_time: Mean latency in ms.
        min_response_time: Fastest response in ms.
        max_response_time: Slowest response in ms.
        p50_response_time: Median latency in ms.
        p95_response_time: 95th-percentile latency in ms.
        p99_response_time: 99th-percentile latency in ms.
        passed: Threshold verdict; ``False`` until evaluated.
        failure_reason: Human-readable explanation when not passed.
        report_path: Where the engine's raw results were written.
        custom_metrics: Free-form extra metrics reported by the engine.
    """

    test_name: str
    test_type: ScenarioType
    start_time: datetime
    end_time: datetime
    duration_seconds: int = 0
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    error_rate: float = 0.0
    throughput: float = 0.0
    average_response_time: int = 0
    min_response_time: int = 0
    max_response_time: int = 0
    p50_response_time: int = 0
    p95_response_time: int = 0
    p99_response_time: int = 0
    passed: bool = False
    failure_reason: str = ""
    report_path: str = ""
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        """Percentage of successful requests; ``0.0`` when nothing was sent."""
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests * 100

    def with_outcome(self, passed: bool, reason: str) -> "PerformanceTestResult":
        """Return a copy carrying the threshold verdict."""
        return dataclasses.replace(self, passed=passed, failure_reason=reason)

    def with_type(self, test_type: ScenarioType) -> "PerformanceTestResult":
        return dataclasses.replace(self, test_type=test_type)

    @classmethod
    def empty(
        cls,
        test_name: str,
        test_type: ScenarioType,
        start_time: datetime,
        end_time: datetime,
        reason: str,
    ) -> "PerformanceTestResult":
        """
        Build the zero-valued record used when a run produced no usable results.

        The error rate is pinned to 100% and the record is marked failed,
        so a degraded run can never be mistaken for a passing one.
        """
        return cls(
            test_name=test_name,
            test_type=test_type,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=_seconds_between(start_time, end_time),
            error_rate=100.0,
            passed=False,
            failure_reason=reason,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise into JSON-compatible primitives."""
        data = dataclasses.asdict(self)
        data["test_type"] = self.test_type.value
        data["start_time"] = self.start_time.isoformat()
        data["end_time"] = self.end_time.isoformat()
        data["custom_metrics"] = dict(self.custom_metrics)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PerformanceTestResult":
        """Inverse of :meth:`to_dict`; unknown keys are ignored."""
        known = {f.name for f in dataclasses.fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values["test_type"] = ScenarioType(values["test_type"])
        values["start_time"] = datetime.fromisoformat(values["start_time"])
        values["end_time"] = datetime.fromisoformat(values["end_time"])
        values["custom_metrics"] = dict(values.get("custom_metrics") or {})
        return cls(**values)


@dataclass(frozen=True)
class PerformanceTestSummary:
    """Session-wide reduction over all recorded results."""

    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    average_throughput: float = 0.0
    average_p95_response_time: float = 0.0
    average_error_rate: float = 0.0
    results: tuple[PerformanceTestResult, ...] = ()

    @property
    def pass_rate(self) -> float:
        """Percentage of passed tests; ``0.0`` for an empty session."""
        if self.total_tests == 0:
            return 0.0
        return self.passed_tests / self.total_tests * 100


def summarize(results: Iterable[PerformanceTestResult]) -> PerformanceTestSummary:
    """
    Reduce *results* into counts and unweighted averages.

    Averages are plain arithmetic means over records, not weighted by
    request volume, and are ``0.0`` when there are no records.
    """
    records = tuple(results)
    total = len(records)
    passed = sum(1 for record in records if record.passed)

    return PerformanceTestSummary(
        total_tests=total,
        passed_tests=passed,
        failed_tests=total - passed,
        average_throughput=_mean(record.throughput for record in records),
        average_p95_response_time=_mean(record.p95_response_time for record in records),
        average_error_rate=_mean(record.error_rate for record in records),
        results=records,
    )


def _mean(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def _seconds_between(start: datetime, end: datetime) -> int:
    return max(int((end - start).total_seconds()), 0)
