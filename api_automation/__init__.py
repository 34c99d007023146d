"""
API automation and performance-testing framework.

Sub-packages:

- :mod:`.services`: thin HTTP service clients for the REST API under test
- :mod:`.utils`: synthetic test data, response validation, template rendering
- :mod:`.performance`: k6/Locust orchestration, threshold gates and reports

Logging follows the standard-library pattern used across the project:
every module owns ``logger = logging.getLogger(__name__)`` and the
entry points call :func:`configure_logging` once.
"""

from __future__ import annotations

import logging
import os

from api_automation.config import get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure root logging for CLI runs and test sessions.

    Args:
        level: Log level name or number.  When ``None``, the ``LOG_LEVEL``
            environment variable is consulted, then the ``LOG_LEVEL`` of the
            active :func:`~api_automation.config.get_config` class.
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL") or get_config().LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
