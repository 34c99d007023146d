"""
Unit tests for the API and performance configuration layers.
"""

import pytest

from api_automation.config import Config, ProductionConfig, get_config
from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import ConfigurationFailure


pytestmark = pytest.mark.unit

PERF_ENV_VARS = [
    "PERF_CONFIG_FILE",
    "PERF_LOAD_USERS",
    "PERF_P95_THRESHOLD_MS",
    "PERF_ERROR_RATE_THRESHOLD",
    "PERF_REPORTS_DIR",
    "K6_BINARY",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate each test from the caller's environment and working directory."""
    for name in PERF_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "performance.yml"
    path.write_text(
        "load:\n"
        "  users: 25\n"
        "thresholds:\n"
        "  p95_ms: 1500\n"
        "  error_rate_percent: 0.5\n"
        "reports:\n"
        "  dir: build/perf\n",
        encoding="utf-8",
    )
    return path


# -----------------------------------------------------------------------------
# API configuration
# -----------------------------------------------------------------------------

def test_get_config_by_name():
    assert get_config("production") is ProductionConfig
    assert get_config("unknown") is Config


def test_get_config_reads_api_env(monkeypatch):
    monkeypatch.setenv("API_ENV", "testing")

    assert get_config().ENVIRONMENT == "testing"


# -----------------------------------------------------------------------------
# Performance configuration
# -----------------------------------------------------------------------------

def test_defaults_without_file():
    config = PerformanceConfig.load()

    assert config == PerformanceConfig()
    assert config.p95_threshold_ms == 2000
    assert config.p99_threshold_ms == 5000
    assert config.error_rate_threshold == 1.0
    assert config.minimum_throughput == 10.0
    assert config.reports_directory == "target/performance-reports"


def test_yaml_values_override_defaults(config_file):
    config = PerformanceConfig.load(config_file)

    assert config.load_users == 25
    assert config.p95_threshold_ms == 1500
    assert config.error_rate_threshold == 0.5
    assert config.reports_directory == "build/perf"
    assert config.stress_users == 50


def test_config_file_from_environment(monkeypatch, config_file):
    monkeypatch.setenv("PERF_CONFIG_FILE", str(config_file))

    assert PerformanceConfig.load().load_users == 25


def test_environment_overrides_yaml(monkeypatch, config_file):
    monkeypatch.setenv("PERF_P95_THRESHOLD_MS", "1800")
    monkeypatch.setenv("K6_BINARY", "/opt/k6/bin/k6")

    config = PerformanceConfig.load(config_file)

    assert config.p95_threshold_ms == 1800
    assert config.k6_binary == "/opt/k6/bin/k6"


def test_keyword_overrides_win(monkeypatch, config_file):
    monkeypatch.setenv("PERF_LOAD_USERS", "40")

    config = PerformanceConfig.load(config_file, load_users=3)

    assert config.load_users == 3


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigurationFailure, match="not found"):
        PerformanceConfig.load(tmp_path / "missing.yml")


def test_non_numeric_value_is_an_error(monkeypatch):
    monkeypatch.setenv("PERF_ERROR_RATE_THRESHOLD", "low")

    with pytest.raises(ConfigurationFailure, match="error_rate_threshold"):
        PerformanceConfig.load()


@pytest.mark.parametrize("value", ["inf", "-inf", "nan"])
def test_non_finite_integer_is_an_error(monkeypatch, value):
    monkeypatch.setenv("PERF_LOAD_USERS", value)

    with pytest.raises(ConfigurationFailure, match="load_users"):
        PerformanceConfig.load()


def test_non_mapping_file_is_an_error(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(ConfigurationFailure, match="must be a mapping"):
        PerformanceConfig.load(path)


def test_unknown_override_is_an_error():
    with pytest.raises(ConfigurationFailure, match="Unknown performance setting"):
        PerformanceConfig.load(max_users=5)


def test_describe_lists_limits():
    assert PerformanceConfig().describe() == (
        "P95<=2000ms, P99<=5000ms, errors<=1.0%, throughput>=10.0 req/s"
    )
