"""Structured error hierarchy for metricsdoc."""

from __future__ import annotations

from metricsdoc_common.errors.codes import ErrorCode
from metricsdoc_common.errors.exceptions import (
    ConfigurationError,
    MetricsDocError,
    ParseFailureError,
    SettingsError,
    SourceRootError,
    UnresolvedSymbolError,
    UnsupportedValueShapeError,
)

__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "MetricsDocError",
    "ParseFailureError",
    "SettingsError",
    "SourceRootError",
    "UnresolvedSymbolError",
    "UnsupportedValueShapeError",
]
