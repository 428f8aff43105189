"""Structured logging helpers with correlation IDs.

This module provides :class:`LoggerAdapter` for structured logging with the
fields ``correlation_id``, ``operation`` and ``status``, a JSON formatter, and
module-level loggers with ``NullHandler`` so that importing the library never
configures output on its own. The CLI calls :func:`setup_logging` once.

Examples
--------
>>> from metricsdoc_common.logging import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Parsing source root", extra={"operation": "walk", "root": "pkg"})
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping
    from types import TracebackType
    from typing import TextIO

__all__ = [
    "JsonFormatter",
    "LoggerAdapter",
    "get_logger",
    "setup_logging",
    "with_fields",
]

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_STRUCTURED_FIELDS = ("correlation_id", "operation", "status", "duration_ms")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as one JSON object per line with timestamp, level,
    logger name, message, the structured fields and any JSON-compatible extra
    fields. ``correlation_id`` falls back to the context variable when the
    record does not carry one.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format. May include extra fields in ``record.__dict__``.

        Returns
        -------
        str
            JSON-encoded log entry.
        """
        data: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for field in _STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value
        if "correlation_id" not in data:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                data["correlation_id"] = ctx_correlation_id
        for key, value in record.__dict__.items():
            if (
                key not in _RESERVED_ATTRS
                and key not in data
                and not key.startswith("_")
                and value is not None
                and isinstance(value, (str, int, float, bool, list, dict))
            ):
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class LoggerAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter that injects structured context fields.

    Fields bound at construction (see :func:`with_fields`) are merged into
    every record without overriding per-call ``extra`` values. ``operation``
    defaults to ``"unknown"`` and ``status`` is inferred from the level when
    the caller does not provide them.

    Parameters
    ----------
    logger : logging.Logger
        Base logger instance to wrap.
    extra : Mapping[str, object] | None, optional
        Structured fields to inject into log entries. Defaults to None.
    """

    logger: logging.Logger

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        """Merge bound fields and the context correlation ID into ``extra``.

        Parameters
        ----------
        msg : Any
            Log message.
        kwargs : MutableMapping[str, Any]
            Keyword arguments from the logging call, including ``extra``.

        Returns
        -------
        tuple[Any, MutableMapping[str, Any]]
            Message and kwargs with the merged ``extra`` mapping.
        """
        extra = dict(kwargs.get("extra") or {})
        for key, value in (self.extra or {}).items():
            extra.setdefault(key, value)
        if "correlation_id" not in extra:
            ctx_correlation_id = _correlation_id.get()
            if ctx_correlation_id is not None:
                extra["correlation_id"] = ctx_correlation_id
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level: int, msg: object, *args: object, **kwargs: Any) -> None:
        """Log ``msg`` at ``level`` with structured fields."""
        if not self.isEnabledFor(level):
            return
        msg, kwargs = self.process(msg, kwargs)
        self._ensure_operation_and_status(kwargs["extra"], level)
        self.logger.log(level, msg, *args, **kwargs)

    @staticmethod
    def _ensure_operation_and_status(extra: dict[str, Any], level: int) -> None:
        if "operation" not in extra:
            extra["operation"] = "unknown"
        if "status" not in extra:
            if level >= logging.ERROR:
                extra["status"] = "error"
            elif level >= logging.WARNING:
                extra["status"] = "warning"
            else:
                extra["status"] = "success"


def get_logger(name: str) -> LoggerAdapter:
    """Get a logger adapter with structured logging support.

    Parameters
    ----------
    name : str
        Logger name (typically ``__name__`` from the calling module).

    Returns
    -------
    LoggerAdapter
        Logger adapter with structured context injection.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return LoggerAdapter(logger, {})


def setup_logging(
    level: int | str = logging.INFO,
    *,
    json_format: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger.

    Diagnostics go to ``stderr`` unless ``stream`` is given, so they never
    interleave with generated output.

    Parameters
    ----------
    level : int | str, optional
        Logging level threshold. Defaults to ``logging.INFO``.
    json_format : bool, optional
        Emit JSON lines via :class:`JsonFormatter` when True, plain text
        otherwise. Defaults to True.
    stream : TextIO | None, optional
        Destination stream. Defaults to ``sys.stderr``.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)


class _WithFieldsContext(AbstractContextManager[LoggerAdapter]):
    """Context manager implementation for :func:`with_fields`."""

    def __init__(
        self, logger: logging.Logger | LoggerAdapter, fields: Mapping[str, object]
    ) -> None:
        self._logger = logger
        self._fields = dict(fields)
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> LoggerAdapter:
        base_logger = (
            self._logger.logger if isinstance(self._logger, LoggerAdapter) else self._logger
        )
        correlation_id = self._fields.get("correlation_id")
        if isinstance(correlation_id, str):
            self._token = _correlation_id.set(correlation_id)
        return LoggerAdapter(base_logger, dict(self._fields))

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _correlation_id.reset(self._token)
        del exc_type, exc_value, exc_tb


def with_fields(
    logger: logging.Logger | LoggerAdapter,
    **fields: object,
) -> AbstractContextManager[LoggerAdapter]:
    """Context manager for attaching structured fields to log entries.

    Parameters
    ----------
    logger : logging.Logger | LoggerAdapter
        Base logger to wrap (may already be an adapter).
    **fields : object
        Structured fields injected into every log entry inside the context.
        A string ``correlation_id`` is also published to the context variable
        and restored on exit.

    Returns
    -------
    AbstractContextManager[LoggerAdapter]
        Context manager yielding a :class:`LoggerAdapter` with bound fields.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> with with_fields(logger, correlation_id="run-1", operation="generate") as log:
    ...     log.info("Generating metrics document")
    """
    return _WithFieldsContext(logger, fields)
