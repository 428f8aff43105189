"""Error code registry for metricsdoc failures.

Codes are stable kebab-case identifiers. They appear in log records and in the
``str()`` form of every :class:`~metricsdoc_common.errors.MetricsDocError`, so
they must not be renamed once released.

Examples
--------
>>> from metricsdoc_common.errors.codes import ErrorCode
>>> ErrorCode.UNRESOLVED_SYMBOL.value
'unresolved-symbol'
"""

from __future__ import annotations

from enum import StrEnum

__all__ = ["ErrorCode"]


class ErrorCode(StrEnum):
    """Stable error codes for metricsdoc exceptions.

    Attributes
    ----------
    PARSE_FAILURE
        A Go source file could not be parsed into a syntax tree.
    UNRESOLVED_SYMBOL
        A metric field references an identifier missing from the symbol table.
    UNSUPPORTED_VALUE_SHAPE
        A metric field (or called function) has an expression shape the
        resolver does not understand.
    SOURCE_ROOT_NOT_FOUND
        A source root passed on the command line is not a directory.
    CONFIGURATION_ERROR
        The catalog or the Tree-sitter grammar could not be loaded.
    SETTINGS_ERROR
        Runtime settings failed validation.
    RUNTIME_ERROR
        Any other failure.
    """

    PARSE_FAILURE = "parse-failure"
    UNRESOLVED_SYMBOL = "unresolved-symbol"
    UNSUPPORTED_VALUE_SHAPE = "unsupported-value-shape"
    SOURCE_ROOT_NOT_FOUND = "source-root-not-found"
    CONFIGURATION_ERROR = "configuration-error"
    SETTINGS_ERROR = "settings-error"
    RUNTIME_ERROR = "runtime-error"
