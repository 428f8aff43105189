"""Resolve metric option values to strings.

Supported shapes:

* string literals (interpreted and raw) and numeric literals;
* identifiers and package-qualified selectors, looked up in the
  :class:`~metricsdoc.catalog.SymbolTable`;
* ``+`` concatenations of any supported shapes, to any depth;
* parentheses around any of the above.

Anything else raises :class:`~metricsdoc_common.errors.UnsupportedValueShapeError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from metricsdoc.tscore import first_named_child, node_text
from metricsdoc_common.errors import UnresolvedSymbolError, UnsupportedValueShapeError

if TYPE_CHECKING:
    from tree_sitter import Node

    from metricsdoc.catalog import SymbolTable

__all__ = ["ValueResolver", "strip_quotes", "unwrap"]

_STRING_QUOTES: Final[dict[str, str]] = {
    "interpreted_string_literal": '"',
    "raw_string_literal": "`",
}
_NUMERIC_LITERALS: Final[frozenset[str]] = frozenset(
    {"int_literal", "float_literal", "imaginary_literal"}
)
_SYMBOL_SHAPES: Final[frozenset[str]] = frozenset({"identifier", "selector_expression"})
_TRANSPARENT: Final[frozenset[str]] = frozenset({"parenthesized_expression", "literal_element"})
_CONCAT: Final[str] = "+"


def unwrap(node: Node) -> Node:
    """Strip parentheses and literal-element wrappers around ``node``."""
    while node.type in _TRANSPARENT:
        inner = first_named_child(node)
        if inner is None:
            break
        node = inner
    return node


def strip_quotes(value: str) -> str:
    """Remove leading and trailing double quotes."""
    return value.strip('"')


def _is_concatenation(node: Node) -> bool:
    """Return True for a ``+`` binary expression."""
    if node.type != "binary_expression":
        return False
    operator = node.child_by_field_name("operator")
    return operator is not None and node_text(operator) == _CONCAT


class ValueResolver:
    """Resolve option values against a fixed symbol table.

    Parameters
    ----------
    symbols : SymbolTable
        Identifier values for the run.
    path : str | None, optional
        Source file being resolved, used in error messages. Defaults to None.
    """

    def __init__(self, symbols: SymbolTable, path: str | None = None) -> None:
        self.symbols = symbols
        self.path = path

    def for_file(self, path: str) -> ValueResolver:
        """Return a resolver reporting errors against ``path``."""
        return ValueResolver(self.symbols, path)

    def resolve(self, node: Node) -> str:
        """Resolve ``node`` to its string value.

        Concatenations are flattened with an explicit stack, so
        ``"a" + ("b" + "c")`` and ``("a" + "b") + "c"`` both yield ``"abc"``.

        Raises
        ------
        UnresolvedSymbolError
            If an identifier is missing from the symbol table.
        UnsupportedValueShapeError
            If an expression has an unsupported shape.
        """
        parts: list[str] = []
        stack = [node]
        while stack:
            current = unwrap(stack.pop())
            if _is_concatenation(current):
                left = current.child_by_field_name("left")
                right = current.child_by_field_name("right")
                if left is None or right is None:
                    raise UnsupportedValueShapeError(current.type, node_text(current), path=self.path)
                stack.append(right)
                stack.append(left)
                continue
            parts.append(self._resolve_operand(current))
        return "".join(parts)

    def _resolve_operand(self, node: Node) -> str:
        text = node_text(node)
        if node.type in _STRING_QUOTES:
            quote = _STRING_QUOTES[node.type]
            return text.removeprefix(quote).removesuffix(quote)
        if node.type in _NUMERIC_LITERALS:
            return text
        if node.type in _SYMBOL_SHAPES:
            identifier = "".join(text.split())
            try:
                return self.symbols.lookup(identifier)
            except UnresolvedSymbolError:
                raise UnresolvedSymbolError(identifier, path=self.path) from None
        raise UnsupportedValueShapeError(node.type, text, path=self.path)
