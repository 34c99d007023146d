"""
Unit tests for the framework log helpers.
"""

import logging
from unittest.mock import patch

import pytest

from api_automation import LOG_FORMAT, configure_logging
from api_automation.config import ProductionConfig
from api_automation.log_utils import (
    log_api_error,
    log_api_request,
    log_config_info,
    log_performance_metric,
)


pytestmark = pytest.mark.unit


def test_slow_request_logs_warning(caplog):
    with caplog.at_level(logging.DEBUG, logger="api_automation"):
        log_api_request("GET", "/posts", 200, 2500)

    assert "Slow API response: GET /posts took 2500ms" in caplog.text


def test_fast_request_logs_debug_only(caplog):
    with caplog.at_level(logging.DEBUG, logger="api_automation"):
        log_api_request("GET", "/posts", 200, 120)

    assert [record.levelno for record in caplog.records] == [logging.DEBUG]


def test_custom_slow_threshold(caplog):
    with caplog.at_level(logging.WARNING, logger="api_automation"):
        log_api_request("POST", "/posts", 201, 600, slow_threshold_ms=500)

    assert "took 600ms" in caplog.text


def test_error_and_metric_go_to_results_logger(caplog):
    with caplog.at_level(logging.INFO, logger="api_automation.results"):
        log_api_error("DELETE", "/posts/1", 500, "boom")
        log_performance_metric("Load Test P95", 1200, "ms")

    results = [record for record in caplog.records if record.name == "api_automation.results"]
    assert [record.getMessage() for record in results] == [
        "API Error: DELETE /posts/1 -> 500 - boom",
        "PERFORMANCE METRIC: Load Test P95 = 1200 ms",
    ]


def test_config_info(caplog):
    with caplog.at_level(logging.INFO, logger="api_automation"):
        log_config_info("testing", "http://127.0.0.1:5001", 5.0)

    assert "Environment: testing, Base URL: http://127.0.0.1:5001, Timeout: 5.0s" in caplog.text


def test_configure_logging_uses_environment_class_level(monkeypatch):
    # Arrange
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("API_ENV", "production")
    monkeypatch.setattr(ProductionConfig, "LOG_LEVEL", "WARNING")

    # Act
    with patch("logging.basicConfig") as basic_config:
        configure_logging()

    # Assert
    basic_config.assert_called_once_with(level=logging.WARNING, format=LOG_FORMAT)


def test_configure_logging_env_var_wins(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("API_ENV", "production")

    with patch("logging.basicConfig") as basic_config:
        configure_logging()

    basic_config.assert_called_once_with(level=logging.ERROR, format=LOG_FORMAT)
