"""Exceptions raised by the forecast engine."""

from __future__ import annotations


class ForecastError(Exception):
    """Base class for forecast engine errors."""


class ForecastConfigError(ForecastError, ValueError):
    """Raised when a forecast configuration is rejected before computation."""


class ForecastTimeoutError(ForecastError, TimeoutError):
    """Raised when an orchestration exceeds its time budget."""


class SnapshotPersistenceError(ForecastError):
    """Raised by a snapshot store when a read or write fails."""
