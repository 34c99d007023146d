"""
Script-driven executor backed by the k6 command-line tool.

The runner invokes ``k6 run`` as a blocking subprocess and reads the
end-of-test summary that k6 writes with ``--summary-export``.  Its
failure policy is strict: if k6 cannot be started or exits with an
error, the scenario fails with :class:`ExecutorFailure` and nothing is
recorded.  The one non-zero exit that still counts as a completed run is
k6's "thresholds crossed" status, because threshold verdicts are
decided by this framework, not by the engine.

No timeout is applied: the script's own stage durations bound the run.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import ConfigurationFailure, ExecutorFailure, ParseFailure
from api_automation.performance.results import PerformanceTestResult, ScenarioType

logger = logging.getLogger(__name__)

# k6 exits with 99 when script-level thresholds were crossed but the test ran to completion.
K6_EXIT_THRESHOLDS_FAILED = 99


class K6TestRunner:
    """
    Runs k6 scripts and converts their summary into result records.

    Args:
        config: Session configuration (binary name and reports directory).
    """

    def __init__(self, config: PerformanceConfig) -> None:
        self.config = config
        self.reports_dir = config.reports_path

    def _resolve_binary(self) -> str:
        binary = shutil.which(self.config.k6_binary)
        if binary is None:
            raise ConfigurationFailure(
                f"k6 binary '{self.config.k6_binary}' not found; install k6 or set K6_BINARY"
            )
        return binary

    def results_file(self, test_name: str) -> Path:
        return self.reports_dir / f"{test_name}_k6_results.json"

    def summary_file(self, test_name: str) -> Path:
        return self.reports_dir / f"{test_name}_k6_summary.json"

    def build_command(
        self,
        binary: str,
        script_path: str | Path,
        test_name: str,
        properties: Mapping[str, Any] | None = None,
    ) -> list[str]:
        """
        Assemble the ``k6 run`` argument list.

        Properties become ``-e KEY=VALUE`` environment options so scripts
        can read them through ``__ENV``.
        """
        command = [
            binary,
            "run",
            "--out",
            f"json={self.results_file(test_name)}",
            "--summary-export",
            str(self.summary_file(test_name)),
        ]
        for key, value in (properties or {}).items():
            command.extend(["-e", f"{key}={value}"])
        command.append(str(script_path))

        logger.debug("k6 command: %s", " ".join(command))
        return command

    def execute(
        self,
        script_path: str | Path,
        test_name: str,
        properties: Mapping[str, Any] | None = None,
    ) -> PerformanceTestResult:
        """
        Run one k6 script to completion and return its measurements.

        Args:
            script_path: Path of the generated k6 script.
            test_name: Scenario name; also used to name output files.
            properties: Optional ``__ENV`` values passed to the script.

        Returns:
            An unevaluated result record typed ``K6``.  If the summary
            cannot be parsed, a zero-valued failed record is returned.

        Raises:
            ConfigurationFailure: If the k6 binary is not installed.
            ExecutorFailure: If k6 cannot be started or exits with an error.
        """
        logger.info("Starting k6 test: %s with script: %s", test_name, script_path)
        binary = self._resolve_binary()

        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExecutorFailure(f"Cannot create reports directory {self.reports_dir}: {exc}") from exc

        command = self.build_command(binary, script_path, test_name, properties)
        start_time = datetime.now()
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.error("k6 test %s could not be started: %s", test_name, exc)
            raise ExecutorFailure(f"k6 could not be started: {exc}") from exc
        end_time = datetime.now()

        output = completed.stdout or ""
        for line in output.splitlines():
            logger.debug("k6 output: %s", line)

        if completed.returncode == K6_EXIT_THRESHOLDS_FAILED:
            logger.warning("k6 reported crossed script thresholds for %s", test_name)
        elif completed.returncode != 0:
            logger.error("k6 test failed with exit code: %s", completed.returncode)
            logger.error("k6 output: %s", output)
            raise ExecutorFailure(
                f"k6 test failed with exit code: {completed.returncode}",
                exit_code=completed.returncode,
                output=output,
            )

        try:
            result = parse_k6_summary(
                self.summary_file(test_name),
                test_name=test_name,
                start_time=start_time,
                end_time=end_time,
                report_path=str(self.results_file(test_name)),
            )
        except ParseFailure as exc:
            logger.error("Failed to parse k6 results for %s: %s", test_name, exc)
            return PerformanceTestResult.empty(
                test_name,
                ScenarioType.K6,
                start_time,
                end_time,
                reason=f"Could not parse k6 results: {exc}",
            )

        logger.info("k6 test completed: %s", test_name)
        return result


def parse_k6_summary(
    summary_path: Path,
    *,
    test_name: str,
    start_time: datetime,
    end_time: datetime,
    report_path: str = "",
) -> PerformanceTestResult:
    """
    Build a result record from a k6 ``--summary-export`` file.

    Reads ``http_reqs`` (count and rate), ``http_req_failed`` (failure
    fraction with pass/fail counts) and the ``http_req_duration`` trend.
    ``checks`` and ``iterations`` are kept as custom metrics when present.

    Raises:
        ParseFailure: If the file is missing, not JSON, or lacks the
            request metrics.
    """
    try:
        with summary_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        raise ParseFailure(f"Unreadable k6 summary {summary_path}: {exc}") from exc

    metrics = data.get("metrics") if isinstance(data, dict) else None
    if not isinstance(metrics, dict):
        raise ParseFailure(f"k6 summary {summary_path} has no metrics section")

    reqs = _metric(metrics, "http_reqs")
    duration = _metric(metrics, "http_req_duration")
    failed = metrics.get("http_req_failed") or {}

    total_requests = int(_number(reqs, "count"))
    throughput = _number(reqs, "rate")

    failed_requests = int(_number(failed, "passes", default=0))
    if "value" in failed:
        error_rate = _number(failed, "value") * 100
    elif total_requests:
        error_rate = failed_requests / total_requests * 100
    else:
        error_rate = 0.0
    successful_requests = int(_number(failed, "fails", default=total_requests - failed_requests))

    custom_metrics: dict[str, Any] = {}
    for name in ("checks", "iterations", "errors"):
        if isinstance(metrics.get(name), dict):
            custom_metrics[name] = metrics[name]

    return PerformanceTestResult(
        test_name=test_name,
        test_type=ScenarioType.K6,
        start_time=start_time,
        end_time=end_time,
        duration_seconds=max(int((end_time - start_time).total_seconds()), 0),
        total_requests=total_requests,
        successful_requests=successful_requests,
        failed_requests=failed_requests,
        error_rate=error_rate,
        throughput=throughput,
        average_response_time=_ms(duration, "avg"),
        min_response_time=_ms(duration, "min"),
        max_response_time=_ms(duration, "max"),
        p50_response_time=_ms(duration, "med"),
        p95_response_time=_ms(duration, "p(95)"),
        p99_response_time=_ms(duration, "p(99)"),
        report_path=report_path,
        custom_metrics=custom_metrics,
    )


def _metric(metrics: dict[str, Any], name: str) -> dict[str, Any]:
    value = metrics.get(name)
    if not isinstance(value, dict):
        raise ParseFailure(f"k6 summary is missing metric: {name}")
    return value


def _number(metric: dict[str, Any], key: str, default: float | None = None) -> float:
    value = metric.get(key, default)
    if value is None:
        raise ParseFailure(f"k6 metric is missing field: {key}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ParseFailure(f"Non-numeric k6 value for {key}: {value!r}") from exc


def _ms(metric: dict[str, Any], key: str) -> int:
    return int(round(_number(metric, key, default=0.0)))
