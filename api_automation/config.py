"""
Configuration classes for the API under test.

Centralises the environment-dependent settings of the HTTP layer (base
URL, timeouts, log level) into a small class hierarchy.  The base
``Config`` class defines defaults that point at the public
JSONPlaceholder API, while subclasses override only what differs per
environment.  Performance thresholds live separately in
:mod:`api_automation.performance.config`.
"""

from __future__ import annotations

import os


class Config:
    """
    Base configuration with defaults for the public demo API.

    Attributes:
        BASE_URL: Root URL of the REST service under test.
        REQUEST_TIMEOUT: Seconds to wait for a response before giving up.
        SLOW_REQUEST_MS: Responses slower than this are logged as warnings.
        LOG_LEVEL: Root log level used by :func:`api_automation.configure_logging`.
    """

    ENVIRONMENT: str = "default"
    BASE_URL: str = os.environ.get("BASE_URL", "https://jsonplaceholder.typicode.com")
    REQUEST_TIMEOUT: float = float(os.environ.get("REQUEST_TIMEOUT", "30"))
    SLOW_REQUEST_MS: int = int(os.environ.get("SLOW_REQUEST_MS", "2000"))
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """
    Testing environment configuration.

    Points at a local stub server by default so that unit and integration
    suites never leave the machine.
    """

    ENVIRONMENT: str = "testing"
    BASE_URL: str = os.environ.get("TEST_BASE_URL", "http://127.0.0.1:5001")
    REQUEST_TIMEOUT: float = float(os.environ.get("REQUEST_TIMEOUT", "5"))


class ProductionConfig(Config):
    """Configuration for runs against a deployed environment."""

    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": Config,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Look up and return the configuration class for the given environment.

    Args:
        env: Environment name (``"development"``, ``"testing"``,
            ``"production"``).  When ``None``, falls back to the ``API_ENV``
            environment variable.

    Returns:
        The configuration class (not an instance) for the environment.
    """
    if env is None:
        env = os.environ.get("API_ENV", "default")
    return config.get(env, config["default"])
