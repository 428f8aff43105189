"""Shared plumbing for metricsdoc: errors, structured logging, settings and filesystem helpers."""

from __future__ import annotations

__all__: list[str] = []
