"""Generate stability-annotated metrics documentation from Go metric declarations."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:  # pragma: no cover - populated at install time
    __version__ = version("metricsdoc")
except PackageNotFoundError:  # pragma: no cover - development fallback
    __version__ = "0.0.0-dev"
