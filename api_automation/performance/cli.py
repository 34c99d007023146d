"""
Command-line entry point for performance runs (``api-perf``).

Usage::

    api-perf load --url https://jsonplaceholder.typicode.com --users 10 --duration 60
    api-perf stress --users 50 --duration 120
    api-perf spike --users 100 --duration 30
    api-perf plan --plan api_automation/performance/plans/api_load.py --users 5 --duration 30
    api-perf check --stats target/performance-reports/plan_test_..._results.csv

Every run subcommand executes one scenario, writes the HTML/JSON/CSV
reports and prints a short summary.  ``check`` re-evaluates an existing
Locust stats CSV against the configured thresholds without running
anything.

Exit codes (three-state so CI can tell a slow system from a broken run):

- ``0`` all thresholds met
- ``1`` at least one threshold breached
- ``2`` configuration, execution or report error
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from api_automation import configure_logging
from api_automation.config import get_config
from api_automation.log_utils import log_config_info
from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import PerformanceError
from api_automation.performance.locust_stats import result_from_stats_csv
from api_automation.performance.manager import PerformanceTestManager
from api_automation.performance.reports import PerformanceReportGenerator
from api_automation.performance.results import PerformanceTestResult
from api_automation.performance.thresholds import evaluate

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_THRESHOLD_BREACH = 1
EXIT_ERROR = 2

DEFAULT_PLAN = Path(__file__).parent / "plans" / "api_load.py"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="api-perf",
        description="Run API performance scenarios and gate them on thresholds.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to performance YAML config (default: $PERF_CONFIG_FILE or config/performance.yml)",
    )
    parser.add_argument(
        "--report-name",
        default="",
        help="Prefix for generated report files",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("load", "Ramp up, hold and ramp down at a fixed user count"),
        ("stress", "Mixed endpoint traffic at a high user count"),
        ("spike", "Sudden burst of users followed by recovery"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--url", default=None, help="Target base URL (default: BASE_URL)")
        sub.add_argument("--users", type=int, default=None, help="Virtual users")
        sub.add_argument("--duration", type=int, default=None, help="Duration in seconds")

    plan = subparsers.add_parser("plan", help="Run a Locust plan file")
    plan.add_argument("--plan", type=Path, default=DEFAULT_PLAN, help="Path to the locustfile")
    plan.add_argument("--url", default=None, help="Target base URL (default: BASE_URL)")
    plan.add_argument("--users", type=int, default=None, help="Virtual users")
    plan.add_argument("--duration", type=int, default=None, help="Duration in seconds")
    plan.add_argument("--ramp-up", type=int, default=None, help="Seconds to spawn all users")

    check = subparsers.add_parser("check", help="Check a Locust stats CSV against thresholds")
    check.add_argument("--stats", required=True, type=Path, help="Path to Locust *_stats.csv file")

    return parser


def _or_default(value: int | None, default: int) -> int:
    return default if value is None else value


def _run_scenario(args: argparse.Namespace, config: PerformanceConfig) -> PerformanceTestResult:
    api_config = get_config()
    base_url = args.url or api_config.BASE_URL
    log_config_info(api_config.ENVIRONMENT, base_url, api_config.REQUEST_TIMEOUT)
    manager = PerformanceTestManager(config)

    if args.command == "load":
        result = manager.run_load_test(
            base_url,
            _or_default(args.users, config.load_users),
            _or_default(args.duration, config.load_duration_seconds),
        )
    elif args.command == "stress":
        result = manager.run_stress_test(
            base_url,
            _or_default(args.users, config.stress_users),
            _or_default(args.duration, config.stress_duration_seconds),
        )
    elif args.command == "spike":
        result = manager.run_spike_test(
            base_url,
            _or_default(args.users, config.spike_users),
            _or_default(args.duration, config.spike_duration_seconds),
        )
    else:
        result = manager.run_plan_test(
            args.plan,
            base_url,
            _or_default(args.users, config.load_users),
            _or_default(args.duration, config.load_duration_seconds),
            ramp_up=args.ramp_up,
        )

    reports = PerformanceReportGenerator(config.reports_directory)
    for path in reports.generate_all(manager.summarize(), args.report_name):
        print(f"Report: {path}")
    return result


def _check_stats(args: argparse.Namespace, config: PerformanceConfig) -> PerformanceTestResult:
    now = datetime.now()
    result = result_from_stats_csv(args.stats, test_name=args.stats.stem, start_time=now, end_time=now)
    outcome = evaluate(result, config)
    return result.with_outcome(outcome.passed, outcome.reason)


def print_result(result: PerformanceTestResult, config: PerformanceConfig) -> None:
    """Print a human-readable results table to stdout for CI logs."""
    rows = (
        ("Error rate (%)", result.error_rate, config.error_rate_threshold, result.error_rate <= config.error_rate_threshold),
        ("P95 latency (ms)", result.p95_response_time, config.p95_threshold_ms, result.p95_response_time <= config.p95_threshold_ms),
        ("P99 latency (ms)", result.p99_response_time, config.p99_threshold_ms, result.p99_response_time <= config.p99_threshold_ms),
        ("Throughput (req/s)", result.throughput, config.minimum_throughput, result.throughput >= config.minimum_throughput),
    )

    print(f"Performance Threshold Check: {result.test_name}")
    print("-" * 60)
    print(f"{'Metric':<22}{'Actual':>12}{'Limit':>14}{'Status':>12}")
    print("-" * 60)
    for label, actual, limit, ok in rows:
        print(f"{label:<22}{actual:>12.2f}{limit:>14.2f}{'PASS' if ok else 'FAIL':>12}")
    print("-" * 60)
    print(f"Overall: {'PASS' if result.passed else 'FAIL'}")
    if result.failure_reason:
        print(f"Reason: {result.failure_reason}")


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for ``api-perf``.

    Returns:
        ``EXIT_PASS`` (0) if all thresholds are met,
        ``EXIT_THRESHOLD_BREACH`` (1) if any are exceeded, or
        ``EXIT_ERROR`` (2) when the run could not be completed.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = PerformanceConfig.load(args.config)
        if args.command == "check":
            result = _check_stats(args, config)
        else:
            result = _run_scenario(args, config)
    except PerformanceError as exc:
        logger.error("Performance run failed: %s", exc)
        print(f"Performance run failed: {exc}", file=sys.stderr)
        return EXIT_ERROR

    print_result(result, config)
    return EXIT_PASS if result.passed else EXIT_THRESHOLD_BREACH


if __name__ == "__main__":
    raise SystemExit(main())
