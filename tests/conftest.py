"""
Shared pytest fixtures for the API automation test suite.

Fixtures follow the Arrange-Act-Assert (AAA) pattern and keep tests
isolated: every performance fixture writes into its own ``tmp_path``
and HTTP tests talk to an in-process stub server, never the internet.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Factory fixtures for result records
- Live server fixture backed by a werkzeug thread
"""

import os
import threading
from datetime import datetime, timedelta

import pytest
from werkzeug.serving import make_server

# Set testing environment before importing the framework
os.environ.setdefault("API_ENV", "testing")

from api_automation.config import TestingConfig
from api_automation.performance.config import PerformanceConfig
from api_automation.performance.results import PerformanceTestResult, ScenarioType
from api_automation.services import PostService, UserService
from tests.stub_api import create_stub_app


# -----------------------------------------------------------------------------
# Performance Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def reports_dir(tmp_path):
    """Directory performance artifacts are written to for one test."""
    return tmp_path / "reports"


@pytest.fixture
def perf_config(reports_dir):
    """
    Performance configuration with default thresholds.

    The Locust flush delay is disabled so plan runs do not sleep.
    """
    return PerformanceConfig(reports_directory=str(reports_dir), result_flush_seconds=0.0)


@pytest.fixture
def make_result():
    """
    Factory for result records with healthy default metrics.

    Defaults sit comfortably inside the default thresholds, so tests only
    override the fields they care about.

    Usage:
        def test_something(make_result):
            result = make_result(p95_response_time=2500)
    """

    def _make_result(**overrides):
        start = datetime(2024, 5, 1, 12, 0, 0)
        values = {
            "test_name": "load_test_10u_60s_20240501_120000",
            "test_type": ScenarioType.LOAD,
            "start_time": start,
            "end_time": start + timedelta(seconds=60),
            "duration_seconds": 60,
            "total_requests": 1000,
            "successful_requests": 995,
            "failed_requests": 5,
            "error_rate": 0.5,
            "throughput": 15.0,
            "average_response_time": 400,
            "min_response_time": 50,
            "max_response_time": 3000,
            "p50_response_time": 350,
            "p95_response_time": 1500,
            "p99_response_time": 2500,
        }
        values.update(overrides)
        return PerformanceTestResult(**values)

    return _make_result


# -----------------------------------------------------------------------------
# HTTP Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def stub_app():
    """Flask application impersonating the JSONPlaceholder API."""
    return create_stub_app()


@pytest.fixture(scope="session")
def live_server(stub_app):
    """
    Serve the stub API on a free local port for the whole session.

    Yields:
        str: Base URL of the running server.
    """
    server = make_server("127.0.0.1", 0, stub_app, threaded=True)
    server_thread = threading.Thread(target=server.serve_forever)
    server_thread.daemon = True
    server_thread.start()

    yield f"http://127.0.0.1:{server.server_port}"

    server.shutdown()
    server_thread.join(timeout=5)


@pytest.fixture
def post_service(live_server):
    with PostService(base_url=live_server, config_class=TestingConfig) as service:
        yield service


@pytest.fixture
def user_service(live_server):
    with UserService(base_url=live_server, config_class=TestingConfig) as service:
        yield service
