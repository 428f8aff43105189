"""Shared pytest configuration for the metricsdoc test suite."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo ``setup_logging`` calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``METRICSDOC_*`` variables from the developer shell out of tests."""
    for name in ("METRICSDOC_LOG_LEVEL", "METRICSDOC_LOG_FORMAT", "METRICSDOC_CATALOG_PATH"):
        monkeypatch.delenv(name, raising=False)
