"""
Plan-driven executor backed by the Locust engine.

A *plan* is a pre-authored locustfile: a Python module declaring one or
more concrete ``locust.User`` subclasses.  The runner loads the plan,
starts an in-process Locust runner for the requested users and duration,
then writes the aggregated statistics to a stats CSV and parses it into
a result record.

Importing Locust is heavyweight (it applies gevent monkey patching to the
whole process), so the engine is initialised lazily on first use and at
most once per runner, guarded by a lock so concurrent first calls cannot
both perform the import.

Failure policy differs from :class:`~api_automation.performance.k6_runner.K6TestRunner`:
a missing plan or a crashing engine raises :class:`ExecutorFailure`, but
a run that leaves no usable results is returned as a zero-valued failed
record instead of an exception.
"""

from __future__ import annotations

import csv
import importlib.util
import inspect
import logging
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import ModuleType, SimpleNamespace
from typing import Any

from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import ConfigurationFailure, ExecutorFailure, ParseFailure
from api_automation.performance.locust_stats import result_from_stats_csv
from api_automation.performance.results import PerformanceTestResult, ScenarioType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocustEngine:
    """Handles to the Locust/gevent objects the runner needs once loaded."""

    environment_cls: Any
    user_cls: type
    gevent: ModuleType
    stats_csv_cls: Any
    percentiles: tuple[float, ...]


def _numeric_property(props: Mapping[str, Any], key: str, default: Any, cast: type) -> Any:
    value = props.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationFailure(f"Locust property {key} must be numeric, got {value!r}") from exc


def create_test_properties(
    base_url: str,
    users: int,
    duration: int,
    ramp_up: int | None = None,
) -> dict[str, str]:
    """
    Build the property overrides understood by :meth:`LocustTestRunner.execute`.

    Args:
        base_url: Host the plan's users send requests to.
        users: Number of concurrent virtual users.
        duration: Run time in seconds once the runner has started.
        ramp_up: Optional seconds over which all users are spawned.
    """
    props = {
        "base.url": base_url,
        "users": str(users),
        "duration": str(duration),
    }
    if ramp_up is not None:
        props["ramp.up"] = str(ramp_up)
    return props


class LocustTestRunner:
    """
    Runs Locust plan files synchronously and collects their stats.

    Args:
        config: Session configuration (spawn rate, flush delay, reports dir).
    """

    def __init__(self, config: PerformanceConfig) -> None:
        self.config = config
        self.reports_dir = config.reports_path
        self._engine: LocustEngine | None = None
        self._init_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Engine lifecycle
    # ------------------------------------------------------------------

    def _load_engine(self) -> LocustEngine:
        """Import Locust and gevent.  Called at most once per runner."""
        try:
            import gevent
            from locust import User
            from locust.env import Environment
            from locust.stats import PERCENTILES_TO_REPORT, StatsCSV
        except ImportError as exc:
            raise ConfigurationFailure(f"Locust is not available: {exc}") from exc

        return LocustEngine(
            environment_cls=Environment,
            user_cls=User,
            gevent=gevent,
            stats_csv_cls=StatsCSV,
            percentiles=tuple(PERCENTILES_TO_REPORT),
        )

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def engine(self) -> LocustEngine:
        """Return the loaded engine, initialising it on first use."""
        if self._engine is not None:
            return self._engine

        with self._init_lock:
            if self._engine is None:
                logger.info("Initializing Locust engine")
                self._engine = self._load_engine()
                logger.info("Locust engine initialized successfully")
        return self._engine

    # ------------------------------------------------------------------
    # Plan loading
    # ------------------------------------------------------------------

    def load_user_classes(self, plan_path: Path, engine: LocustEngine) -> list[type]:
        """
        Import *plan_path* and return its concrete ``User`` subclasses.

        Raises:
            ExecutorFailure: If the plan cannot be imported or declares no
                runnable user classes.
        """
        module_name = f"locust_plan_{plan_path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, plan_path)
        if spec is None or spec.loader is None:
            raise ExecutorFailure(f"Cannot load test plan: {plan_path}")

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise ExecutorFailure(f"Test plan {plan_path} failed to import: {exc}") from exc

        user_classes = [
            obj
            for _, obj in inspect.getmembers(module, inspect.isclass)
            if issubclass(obj, engine.user_cls)
            and obj is not engine.user_cls
            and not getattr(obj, "abstract", False)
        ]
        if not user_classes:
            raise ExecutorFailure(f"Test plan {plan_path} defines no runnable Locust users")

        logger.debug(
            "Loaded user classes from %s: %s", plan_path, [cls.__name__ for cls in user_classes]
        )
        return user_classes

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def results_file(self, test_name: str) -> Path:
        return self.reports_dir / f"{test_name}_results.csv"

    def write_results(self, engine: LocustEngine, environment: Any, results_file: Path) -> None:
        """Write the run's request stats with Locust's own stats CSV writer."""
        results_file.parent.mkdir(parents=True, exist_ok=True)
        with results_file.open("w", encoding="utf-8", newline="") as handle:
            engine.stats_csv_cls(environment, engine.percentiles).requests_csv(csv.writer(handle))
        logger.debug("Wrote Locust stats to %s", results_file)

    def run_settings(self, props: Mapping[str, Any]) -> tuple[int, float, float]:
        """
        Resolve users, duration and spawn rate from run properties.

        A ``ramp.up`` of zero or less falls back to the configured spawn
        rate.

        Raises:
            ConfigurationFailure: If a value is non-numeric, or users or
                duration is not positive.
        """
        users = _numeric_property(props, "users", self.config.load_users, int)
        duration = _numeric_property(props, "duration", self.config.load_duration_seconds, float)
        if users <= 0:
            raise ConfigurationFailure(f"Locust property users must be positive, got {users}")
        if duration <= 0:
            raise ConfigurationFailure(f"Locust property duration must be positive, got {duration}")

        ramp_up = _numeric_property(props, "ramp.up", 0, float)
        spawn_rate = users / ramp_up if ramp_up > 0 else self.config.locust_spawn_rate
        return users, duration, spawn_rate

    def execute(
        self,
        plan_path: str | Path,
        test_name: str,
        properties: Mapping[str, Any] | None = None,
    ) -> PerformanceTestResult:
        """
        Run a Locust plan to completion and return its measurements.

        Recognised properties are ``base.url``, ``users``, ``duration``
        and ``ramp.up``; every property is also exposed to the plan's users
        as ``environment.parsed_options.<key>`` with dots replaced by
        underscores.

        Returns:
            An unevaluated result record typed ``LOCUST``.  When the run
            produced no usable results, a zero-valued failed record.

        Raises:
            ConfigurationFailure: If Locust is not installed or a run
                property is invalid.
            ExecutorFailure: If the plan is missing or invalid, or the
                engine crashes.
        """
        logger.info("Starting Locust test: %s with plan: %s", test_name, plan_path)
        engine = self.engine()

        plan = Path(plan_path)
        if not plan.is_file():
            raise ExecutorFailure(f"Test plan file not found: {plan}")

        user_classes = self.load_user_classes(plan, engine)
        props = {str(key): value for key, value in (properties or {}).items()}
        for key, value in props.items():
            logger.debug("Set Locust property: %s = %s", key, value)

        users, duration, spawn_rate = self.run_settings(props)

        options: dict[str, Any] = {"tags": None, "exclude_tags": None}
        options.update({key.replace(".", "_"): value for key, value in props.items()})
        parsed_options = SimpleNamespace(**options)

        results_file = self.results_file(test_name)
        start_time = datetime.now()
        try:
            environment = engine.environment_cls(
                user_classes=user_classes,
                host=props.get("base.url"),
                parsed_options=parsed_options,
            )
            runner = environment.create_local_runner()
            logger.info("Starting Locust execution: %s users at %s/s for %ss", users, spawn_rate, duration)
            runner.start(users, spawn_rate=spawn_rate)
            engine.gevent.spawn_later(duration, runner.quit)
            runner.greenlet.join()
            self.write_results(engine, environment, results_file)
        except Exception as exc:
            logger.error("Locust test failed: %s", test_name)
            raise ExecutorFailure(f"Locust test execution failed: {exc}") from exc
        end_time = datetime.now()

        if self.config.result_flush_seconds > 0:
            time.sleep(self.config.result_flush_seconds)

        result = self.parse_results(results_file, test_name, start_time, end_time)
        logger.info("Locust test completed: %s", test_name)
        return result

    def parse_results(
        self,
        results_file: Path,
        test_name: str,
        start_time: datetime,
        end_time: datetime,
    ) -> PerformanceTestResult:
        """Parse *results_file*, degrading to an empty failed record on any problem."""
        logger.info("Parsing Locust results from: %s", results_file)

        if not results_file.exists() or results_file.stat().st_size == 0:
            logger.warning("Results file is empty or doesn't exist: %s", results_file)
            return PerformanceTestResult.empty(
                test_name, ScenarioType.LOCUST, start_time, end_time, reason="No results generated"
            )

        try:
            return result_from_stats_csv(
                results_file,
                test_name=test_name,
                start_time=start_time,
                end_time=end_time,
            )
        except ParseFailure as exc:
            logger.error("Failed to parse Locust results: %s", exc)
            return PerformanceTestResult.empty(
                test_name,
                ScenarioType.LOCUST,
                start_time,
                end_time,
                reason=f"Could not parse Locust results: {exc}",
            )
