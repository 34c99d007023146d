"""
Exception hierarchy for performance-test orchestration.

Only infrastructure problems are exceptions.  A run that completes but
breaches a threshold is an ordinary, recorded outcome on the result
record and never raises.
"""

from __future__ import annotations


class PerformanceError(Exception):
    """Base class for all performance-testing failures."""


class ConfigurationFailure(PerformanceError):
    """A required tool, engine or configuration value is missing or invalid."""


class ExecutionFailure(PerformanceError):
    """A single scenario could not be executed (e.g. its script could not be written)."""


class ExecutorFailure(ExecutionFailure):
    """
    The external load engine could not run the scenario.

    Attributes:
        exit_code: Process exit status, when a process was started.
        output: Combined stdout/stderr captured from the process, if any.
    """

    def __init__(self, message: str, exit_code: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class ParseFailure(PerformanceError):
    """Raw engine results were unreadable or malformed."""


class ReportGenerationFailure(PerformanceError):
    """A report artifact could not be written."""
