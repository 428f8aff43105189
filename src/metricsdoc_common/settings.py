"""Runtime settings with typed configuration and fail-fast validation.

Settings come from ``METRICSDOC_*`` environment variables; keyword overrides
(typically CLI options) win over the environment.

Examples
--------
>>> from metricsdoc_common.settings import load_settings
>>> settings = load_settings(log_level="DEBUG")
>>> settings.log_level
'DEBUG'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from metricsdoc_common.errors import SettingsError
from metricsdoc_common.logging import get_logger

__all__ = ["MetricsDocSettings", "load_settings"]

logger = get_logger(__name__)


class MetricsDocSettings(BaseSettings):
    """Runtime configuration for the metrics documentation generator (``METRICSDOC_*``)."""

    model_config = SettingsConfigDict(env_prefix="METRICSDOC_", extra="forbid")

    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_format: Literal["json", "text"] = Field(
        default="json", description="Diagnostic format written to stderr"
    )
    catalog_path: Path | None = Field(
        default=None,
        description="Catalog file replacing the bundled metricsdoc/data/catalog.yaml",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            msg = f"unknown log level '{value}'"
            raise ValueError(msg)
        return normalized


def load_settings(**overrides: object) -> MetricsDocSettings:
    """Load :class:`MetricsDocSettings`, dropping overrides that are None.

    Parameters
    ----------
    **overrides : object
        Explicit values that take precedence over the environment. ``None``
        values are ignored so unset CLI options fall through to the
        environment and defaults.

    Returns
    -------
    MetricsDocSettings
        Validated settings.

    Raises
    ------
    SettingsError
        If validation fails.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return MetricsDocSettings(**values)  # type: ignore[arg-type]
    except Exception as exc:
        msg = f"Configuration validation failed: {exc}"
        logger.exception(
            "Settings validation failed",
            extra={"operation": "settings", "error_type": type(exc).__name__},
        )
        raise SettingsError(
            msg,
            cause=exc,
            context={"validation_error": str(exc)},
        ) from exc
