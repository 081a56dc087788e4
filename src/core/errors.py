"""Tickstats exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class TickStatsError(Exception):
    """Base exception for all tickstats failures."""


class TickStatsConfigError(TickStatsError):
    """Raised for invalid runtime configuration."""


class TickStatsIngestError(TickStatsError):
    """Raised for source reading and ingest failures."""


class TickParseError(TickStatsIngestError):
    """Raised when a numeric tick field cannot be parsed."""


class TickFormatError(TickStatsIngestError):
    """Raised when a date or time tick field does not match its format."""


class TickStatsTransformError(TickStatsError):
    """Raised for transform pipeline failures."""


class JoinMismatchError(TickStatsTransformError):
    """Raised when daily tables disagree on the set of dates."""


class TickStatsStoreError(TickStatsError):
    """Raised for run store and versioning failures."""


class TickStatsDependencyError(TickStatsError):
    """Raised when an optional runtime dependency is missing."""


class TickStatsRunSpecError(TickStatsError):
    """Raised for invalid or unsupported run-spec configuration."""
