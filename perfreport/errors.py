"""Exceptions raised by the report engine."""
from __future__ import annotations

MISSING_IDENTIFIER_MESSAGE = (
    "label cannot be empty, please ensure your test plan names every "
    "sample properly: skipping sample"
)


class PerfReportError(Exception):
    """Base class for report engine errors."""


class InvalidPercentileError(PerfReportError, ValueError):
    def __init__(self, percentage: float) -> None:
        super().__init__(f"percentage must be a value between 0 and 1 (inclusive), got {percentage!r}")
        self.percentage = percentage


class BaselineAlreadySetError(PerfReportError, RuntimeError):
    pass


class ConfigError(PerfReportError, ValueError):
    pass


class DuplicateReportError(PerfReportError, ValueError):
    pass
