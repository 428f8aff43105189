"""Tree-sitter utilities for parsing Go source."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from importlib import import_module
from typing import TYPE_CHECKING, Final

from tree_sitter import Language, Parser

from metricsdoc_common.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node, Tree

GO_PACKAGE: Final[str] = "tree_sitter_go"
"""Importable package exposing the Go grammar's ``language()`` factory."""

COMMENT: Final[str] = "comment"


@cache
def load_go_language() -> Language:
    """Load the Tree-sitter Go grammar.

    Returns
    -------
    Language
        Instantiated Tree-sitter ``Language`` ready for parsing.

    Raises
    ------
    ConfigurationError
        If the grammar package is missing or does not implement the expected
        ``language`` callable.
    """
    try:
        module = import_module(GO_PACKAGE)
    except ModuleNotFoundError as exc:  # pragma: no cover - configuration error
        message = f"Tree-sitter package '{GO_PACKAGE}' is not installed."
        raise ConfigurationError(message, cause=exc) from exc
    try:
        factory = module.language
    except AttributeError as exc:  # pragma: no cover - configuration error
        message = f"Tree-sitter package '{GO_PACKAGE}' does not expose a 'language()' factory."
        raise ConfigurationError(message, cause=exc) from exc
    return Language(factory())


def parse_bytes(lang: Language, data: bytes) -> Tree:
    """Parse a byte buffer with the supplied Tree-sitter language.

    Parameters
    ----------
    lang : Language
        Instantiated Tree-sitter grammar.
    data : bytes
        UTF-8 encoded source code to parse.

    Returns
    -------
    Tree
        Parsed syntax tree for the provided source buffer.
    """
    parser = Parser()
    parser.language = lang
    return parser.parse(data)


@dataclass(frozen=True, slots=True)
class SyntaxProblem:
    """Location of the first ``ERROR`` or ``MISSING`` node in a tree (1-based)."""

    line: int
    column: int
    message: str


def first_syntax_problem(tree: Tree) -> SyntaxProblem | None:
    """Return the first syntax error in document order, or None for a clean tree."""
    root = tree.root_node
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            row, column = node.start_point
            return SyntaxProblem(row + 1, column + 1, f"missing {node.type}")
        if node.type == "ERROR":
            row, column = node.start_point
            lines = node_text(node).splitlines()
            snippet = lines[0] if lines else ""
            return SyntaxProblem(row + 1, column + 1, f"syntax error near {snippet!r}")
        stack.extend(child for child in reversed(node.children) if child.has_error)
    row, column = root.start_point
    return SyntaxProblem(row + 1, column + 1, "syntax error")


def node_text(node: Node) -> str:
    """Return the source text spanned by ``node``."""
    text = node.text
    return text.decode("utf-8", "ignore") if text is not None else ""


def named_children(node: Node) -> Iterator[Node]:
    """Yield named children of ``node``, skipping comments."""
    for child in node.named_children:
        if child.type != COMMENT:
            yield child


def first_named_child(node: Node) -> Node | None:
    """Return the first non-comment named child of ``node``."""
    return next(named_children(node), None)
