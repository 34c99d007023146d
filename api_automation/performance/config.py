"""
Performance-test configuration.

Holds scenario sizing defaults (users and durations per scenario kind),
threshold limits for pass/fail gating, engine settings and the reports
directory.  The configuration is read once per session and is immutable
afterwards.

Values are resolved with the following precedence (highest first):

1. keyword overrides passed to :meth:`PerformanceConfig.load`
2. environment variables (e.g. ``PERF_P95_THRESHOLD_MS``)
3. the YAML file named by ``PERF_CONFIG_FILE`` (default
   :file:`config/performance.yml`), when it exists
4. built-in defaults
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from api_automation.performance.exceptions import ConfigurationFailure

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config/performance.yml")

# field name -> (YAML section, YAML key, environment variable)
_SOURCES: dict[str, tuple[str, str, str]] = {
    "load_users": ("load", "users", "PERF_LOAD_USERS"),
    "load_duration_seconds": ("load", "duration", "PERF_LOAD_DURATION"),
    "stress_users": ("stress", "users", "PERF_STRESS_USERS"),
    "stress_duration_seconds": ("stress", "duration", "PERF_STRESS_DURATION"),
    "spike_users": ("spike", "users", "PERF_SPIKE_USERS"),
    "spike_duration_seconds": ("spike", "duration", "PERF_SPIKE_DURATION"),
    "p95_threshold_ms": ("thresholds", "p95_ms", "PERF_P95_THRESHOLD_MS"),
    "p99_threshold_ms": ("thresholds", "p99_ms", "PERF_P99_THRESHOLD_MS"),
    "error_rate_threshold": ("thresholds", "error_rate_percent", "PERF_ERROR_RATE_THRESHOLD"),
    "minimum_throughput": ("thresholds", "min_throughput", "PERF_MIN_THROUGHPUT"),
    "k6_binary": ("k6", "binary", "K6_BINARY"),
    "locust_spawn_rate": ("locust", "spawn_rate", "LOCUST_SPAWN_RATE"),
    "result_flush_seconds": ("locust", "result_flush_seconds", "LOCUST_RESULT_FLUSH_SECONDS"),
    "reports_directory": ("reports", "dir", "PERF_REPORTS_DIR"),
}


@dataclass(frozen=True)
class PerformanceConfig:
    """
    Session-scoped performance settings.

    Attributes:
        load_users: Default virtual users for load tests.
        load_duration_seconds: Default steady-state duration for load tests.
        stress_users: Default peak users for stress tests.
        stress_duration_seconds: Default duration at stress level.
        spike_users: Default users at the top of a spike.
        spike_duration_seconds: Default time held at the spike.
        p95_threshold_ms: Maximum acceptable 95th-percentile latency.
        p99_threshold_ms: Maximum acceptable 99th-percentile latency.
        error_rate_threshold: Maximum acceptable error rate in percent.
        minimum_throughput: Minimum acceptable requests per second.
        k6_binary: Name or path of the k6 executable.
        locust_spawn_rate: Users started per second by the Locust engine.
        result_flush_seconds: Pause after a Locust run before reading results.
        reports_directory: Where scripts, raw results and reports are written.
    """

    load_users: int = 10
    load_duration_seconds: int = 60
    stress_users: int = 50
    stress_duration_seconds: int = 120
    spike_users: int = 100
    spike_duration_seconds: int = 30
    p95_threshold_ms: int = 2000
    p99_threshold_ms: int = 5000
    error_rate_threshold: float = 1.0
    minimum_throughput: float = 10.0
    k6_binary: str = "k6"
    locust_spawn_rate: float = 10.0
    result_flush_seconds: float = 2.0
    reports_directory: str = "target/performance-reports"

    @property
    def reports_path(self) -> Path:
        return Path(self.reports_directory)

    @classmethod
    def load(cls, path: str | Path | None = None, **overrides: Any) -> "PerformanceConfig":
        """
        Build a configuration from file, environment and explicit overrides.

        Args:
            path: YAML file to read.  When ``None``, ``PERF_CONFIG_FILE`` or
                the default location is used, and a missing file is not an
                error.  An explicitly given path must exist.
            **overrides: Field values that win over every other source.

        Raises:
            ConfigurationFailure: If the file cannot be read or a value has
                the wrong type.
        """
        explicit = path is not None
        if path is None:
            path = os.environ.get("PERF_CONFIG_FILE", str(DEFAULT_CONFIG_FILE))
        file_values = _read_yaml(Path(path), required=explicit)

        raw: dict[str, Any] = {}
        for name, (section, key, env_var) in _SOURCES.items():
            section_values = file_values.get(section) or {}
            if isinstance(section_values, dict) and key in section_values:
                raw[name] = section_values[key]
            env_value = os.environ.get(env_var, "").strip()
            if env_value:
                raw[name] = env_value
        raw.update(overrides)

        return cls(**_coerce(raw))

    def describe(self) -> str:
        return (
            f"P95<={self.p95_threshold_ms}ms, P99<={self.p99_threshold_ms}ms, "
            f"errors<={self.error_rate_threshold}%, throughput>={self.minimum_throughput} req/s"
        )


def _read_yaml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationFailure(f"Performance config file not found: {path}")
        return {}

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationFailure(f"Unable to read performance config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationFailure(f"Performance config {path} must be a mapping")
    logger.debug("Loaded performance config from %s", path)
    return data


def _coerce(raw: dict[str, Any]) -> dict[str, Any]:
    """Convert raw file/env values to each field's declared type."""
    types = {f.name: f.type for f in dataclasses.fields(PerformanceConfig)}
    values: dict[str, Any] = {}
    for name, value in raw.items():
        if name not in types:
            raise ConfigurationFailure(f"Unknown performance setting: {name}")
        target = types[name]
        try:
            if target == "int":
                values[name] = int(float(value))
            elif target == "float":
                values[name] = float(value)
            else:
                values[name] = str(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ConfigurationFailure(
                f"Performance setting {name} must be numeric, got {value!r}"
            ) from exc
    return values
