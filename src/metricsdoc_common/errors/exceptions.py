"""Typed exception hierarchy for the metrics documentation generator.

Every failure the pipeline can raise inherits from :class:`MetricsDocError`,
which carries a stable :class:`~metricsdoc_common.errors.codes.ErrorCode`,
a log level and a free-form context mapping. All of them are fatal: the CLI
turns them into a diagnostic on stderr and a nonzero exit status.

Examples
--------
>>> from metricsdoc_common.errors import UnresolvedSymbolError
>>> try:
...     raise UnresolvedSymbolError("metrics.FooSubsystem")
... except UnresolvedSymbolError as e:
...     assert e.context["identifier"] == "metrics.FooSubsystem"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from metricsdoc_common.errors.codes import ErrorCode

__all__ = [
    "ConfigurationError",
    "MetricsDocError",
    "ParseFailureError",
    "SettingsError",
    "SourceRootError",
    "UnresolvedSymbolError",
    "UnsupportedValueShapeError",
]


class MetricsDocError(Exception):
    """Base exception for all metricsdoc errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode, optional
        Stable error code. Defaults to ``ErrorCode.RUNTIME_ERROR``.
    log_level : int, optional
        Level used when the error is logged. Defaults to ``logging.ERROR``.
    cause : Exception | None, optional
        Underlying exception, chained as ``__cause__``. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional structured details. Defaults to None.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    log_level : int
        Logging level for error logging.
    context : dict[str, object]
        Additional context dictionary for error details.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.RUNTIME_ERROR,
        log_level: int = logging.ERROR,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.log_level = log_level
        self.context: dict[str, object] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return formatted error string.

        Returns
        -------
        str
            Formatted error string (e.g.,
            ``"UnresolvedSymbolError[unresolved-symbol]: no identifier mapping exists for 'X'"``).
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class ParseFailureError(MetricsDocError):
    """A Go source file could not be parsed.

    Parameters
    ----------
    message : str
        Description of the syntax problem.
    path : str
        File that failed to parse.
    line : int | None, optional
        1-based line of the first offending node. Defaults to None.
    column : int | None, optional
        1-based column of the first offending node. Defaults to None.
    cause : Exception | None, optional
        Underlying exception (for example an ``OSError``). Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str,
        line: int | None = None,
        column: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        location = path if line is None else f"{path}:{line}:{column}"
        super().__init__(
            f"error parsing {location}: {message}",
            code=ErrorCode.PARSE_FAILURE,
            cause=cause,
            context={"path": path, "line": line, "column": column},
        )
        self.path = path
        self.line = line
        self.column = column


class UnresolvedSymbolError(MetricsDocError):
    """A metric field references an identifier absent from the symbol table.

    The identifier is kept on the exception so the maintainer knows which
    entry to add to the catalog.
    """

    def __init__(self, identifier: str, *, path: str | None = None) -> None:
        message = f"no identifier mapping exists for '{identifier}'"
        if path:
            message += f" (in {path})"
        super().__init__(
            message,
            code=ErrorCode.UNRESOLVED_SYMBOL,
            context={"identifier": identifier, "path": path},
        )
        self.identifier = identifier


class UnsupportedValueShapeError(MetricsDocError):
    """An expression has a shape the scanner or resolver does not support."""

    def __init__(self, shape: str, text: str, *, path: str | None = None) -> None:
        message = f"unsupported value {shape} {text}"
        if path:
            message += f" (in {path})"
        super().__init__(
            message,
            code=ErrorCode.UNSUPPORTED_VALUE_SHAPE,
            context={"shape": shape, "text": text, "path": path},
        )
        self.shape = shape
        self.text = text


class SourceRootError(MetricsDocError):
    """A source root does not exist or is not a directory."""

    def __init__(self, root: str) -> None:
        super().__init__(
            f"source root '{root}' is not a directory",
            code=ErrorCode.SOURCE_ROOT_NOT_FOUND,
            context={"root": root},
        )
        self.root = root


class ConfigurationError(MetricsDocError):
    """The catalog or the Tree-sitter grammar could not be loaded.

    Parameters
    ----------
    message : str
        Human-readable error message.
    cause : Exception | None, optional
        Underlying exception. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context (for example the catalog path). Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.CONFIGURATION_ERROR,
            cause=cause,
            context=context,
        )


class SettingsError(MetricsDocError):
    """Runtime settings failed validation."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.SETTINGS_ERROR,
            cause=cause,
            context=context,
        )
