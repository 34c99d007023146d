"""
Framework-level log helpers.

Small wrappers that give API calls, validations and performance metrics a
consistent one-line shape in the logs, so CI output can be grepped the same
way regardless of which suite produced it.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger("api_automation")
results_logger = logging.getLogger("api_automation.results")

SLOW_REQUEST_MS = 2000


def log_config_info(environment: str, base_url: str, timeout: float) -> None:
    """Log the effective configuration once at session start."""
    logger.info(
        "Configuration loaded - Environment: %s, Base URL: %s, Timeout: %ss",
        environment,
        base_url,
        timeout,
    )


def log_api_request(
    method: str,
    endpoint: str,
    status_code: int,
    response_time_ms: int,
    slow_threshold_ms: int = SLOW_REQUEST_MS,
) -> None:
    """Log a completed API call, escalating to WARNING for slow responses."""
    logger.debug("API %s %s -> %s (%sms)", method, endpoint, status_code, response_time_ms)
    if response_time_ms > slow_threshold_ms:
        logger.warning(
            "Slow API response: %s %s took %sms", method, endpoint, response_time_ms
        )


def log_api_error(method: str, endpoint: str, status_code: int | None, error: str) -> None:
    """Log a failed API call to both the framework and results loggers."""
    logger.error("API Error: %s %s -> %s - %s", method, endpoint, status_code, error)
    results_logger.error("API Error: %s %s -> %s - %s", method, endpoint, status_code, error)


def log_performance_metric(name: str, value: Any, unit: str) -> None:
    """Log a single named performance metric."""
    results_logger.info("PERFORMANCE METRIC: %s = %s %s", name, value, unit)


def log_validation_pass(validation: str, expected: Any, actual: Any) -> None:
    """Log a passed validation at DEBUG level."""
    logger.debug("Validation passed: %s - Expected: %s, Actual: %s", validation, expected, actual)
