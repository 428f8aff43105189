"""Find metric constructor calls in package-level ``var`` declarations.

Only top-level ``var`` declarations are inspected; metrics are package
globals by convention. A call is a constructor when the package qualifier of
the called function is one of the catalog's constructor namespaces. Each
composite-literal argument of such a call (``prometheus.CounterOpts{...}``)
yields one record built from its ``Namespace``, ``Subsystem``, ``Name`` and
``Help`` keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Final

from metricsdoc.records import MetricRecord
from metricsdoc.resolver import strip_quotes, unwrap
from metricsdoc.tscore import first_named_child, named_children, node_text
from metricsdoc_common.errors import UnsupportedValueShapeError
from metricsdoc_common.logging import get_logger

if TYPE_CHECKING:
    from tree_sitter import Node

    from metricsdoc.resolver import ValueResolver
    from metricsdoc.walker import GoFile, GoPackage

__all__ = ["METRIC_FIELDS", "constructor_qualifier", "scan_file", "scan_packages"]

logger = get_logger(__name__)

METRIC_FIELDS: Final[tuple[str, ...]] = ("Namespace", "Subsystem", "Name", "Help")

# Function literals, and type expressions in call position (conversions such
# as []byte(s)), never construct metrics.
_NON_CONSTRUCTORS: Final[frozenset[str]] = frozenset(
    {
        "func_literal",
        "array_type",
        "slice_type",
        "map_type",
        "channel_type",
        "function_type",
        "interface_type",
        "struct_type",
    }
)


def constructor_qualifier(function: Node) -> str:
    """Return the package (or receiver) qualifying a called function.

    Parentheses, pointer dereferences and generic instantiations are
    unwrapped. Function literals and conversion types yield ``""``.

    Parameters
    ----------
    function : Node
        The called expression of a call, or the generic type of an
        instantiated call that the grammar reads as a conversion.

    Returns
    -------
    str
        Package or receiver name, or ``""`` when the call cannot be a
        constructor.

    Raises
    ------
    UnsupportedValueShapeError
        If the called expression has any other shape.
    """
    node = function
    while True:
        kind = node.type
        if kind == "selector_expression":
            operand = node.child_by_field_name("operand")
            return node_text(operand) if operand is not None else ""
        if kind == "qualified_type":
            package = node.child_by_field_name("package")
            return node_text(package) if package is not None else ""
        if kind in {"identifier", "type_identifier"}:
            return node_text(node)
        if kind in _NON_CONSTRUCTORS:
            return ""
        inner: Node | None
        if kind in {"parenthesized_expression", "parenthesized_type", "pointer_type"}:
            inner = first_named_child(node)
        elif kind == "unary_expression" and _operator(node) == "*":
            inner = node.child_by_field_name("operand")
        elif kind == "index_expression":
            inner = node.child_by_field_name("operand")
        elif kind == "generic_type":
            inner = node.child_by_field_name("type")
        else:
            inner = None
        if inner is None:
            raise UnsupportedValueShapeError(f"func expression {kind}", node_text(node))
        node = inner


def _operator(node: Node) -> str:
    operator = node.child_by_field_name("operator")
    return node_text(operator) if operator is not None else ""


def _var_specs(declaration: Node) -> Iterator[Node]:
    """Yield the ``var_spec`` nodes of a single or grouped declaration.

    Parameters
    ----------
    declaration : Node
        A ``var_declaration`` node.

    Yields
    ------
    Node
        Each spec in source order, whether it sits directly under the
        declaration or inside a parenthesized ``var_spec_list``.
    """
    for child in named_children(declaration):
        if child.type == "var_spec":
            yield child
        elif child.type == "var_spec_list":
            yield from (spec for spec in named_children(child) if spec.type == "var_spec")


def _values(spec: Node) -> Iterator[Node]:
    for value in spec.children_by_field_name("value"):
        if value.type == "expression_list":
            yield from named_children(value)
        else:
            yield value


def _call_parts(value: Node) -> tuple[Node, list[Node]] | None:
    """Split a call-shaped initializer into its called expression and arguments.

    ``pkg.New[T](opts)`` with a composite-literal argument is read by the
    grammar as a conversion to the generic type ``pkg.New[T]``; it is treated
    as a call with ``opts`` as its only argument.

    Parameters
    ----------
    value : Node
        Initializer expression of a ``var`` spec.

    Returns
    -------
    tuple[Node, list[Node]] | None
        Called expression and argument nodes, or None when ``value`` is not a
        call.
    """
    if value.type == "call_expression":
        function = value.child_by_field_name("function")
        arguments = value.child_by_field_name("arguments")
        if function is None or arguments is None:
            return None
        return function, list(named_children(arguments))
    if value.type == "type_conversion_expression":
        target = value.child_by_field_name("type")
        operand = value.child_by_field_name("operand")
        if target is not None and operand is not None and target.type == "generic_type":
            return target, [operand]
    return None


def _keyed_pairs(literal: Node) -> Iterator[tuple[str, Node]]:
    """Yield ``(key, value)`` pairs of a keyed composite literal.

    Positional elements are skipped; keys are returned as their source text.
    """
    body = literal.child_by_field_name("body")
    if body is None:
        return
    for element in named_children(body):
        if element.type != "keyed_element":
            continue
        parts = list(named_children(element))
        if len(parts) != 2:
            continue
        key, value = (unwrap(part) for part in parts)
        yield node_text(key).strip(), value


def _record_from_literal(literal: Node, resolver: ValueResolver) -> MetricRecord:
    """Build a record from the metric option keys of ``literal``.

    Parameters
    ----------
    literal : Node
        Composite-literal argument of a constructor call.
    resolver : ValueResolver
        Resolver for the option values.

    Returns
    -------
    MetricRecord
        Record with absent keys left empty.
    """
    fields: dict[str, str] = {}
    for key, value in _keyed_pairs(literal):
        if key not in METRIC_FIELDS:
            continue
        fields[key] = strip_quotes(resolver.resolve(value))
    return MetricRecord(
        namespace=fields.get("Namespace", ""),
        subsystem=fields.get("Subsystem", ""),
        name=fields.get("Name", ""),
        help=fields.get("Help", ""),
    )


def _scan_call(
    function: Node, args: list[Node], namespaces: frozenset[str], resolver: ValueResolver
) -> list[MetricRecord]:
    try:
        qualifier = constructor_qualifier(function)
    except UnsupportedValueShapeError as exc:
        raise UnsupportedValueShapeError(exc.shape, exc.text, path=resolver.path) from None
    if qualifier not in namespaces or not args:
        return []
    return [
        _record_from_literal(arg, resolver) for arg in args if arg.type == "composite_literal"
    ]


def scan_file(
    go_file: GoFile, *, namespaces: frozenset[str], resolver: ValueResolver
) -> list[MetricRecord]:
    """Extract candidate records from one parsed file.

    Parameters
    ----------
    go_file : GoFile
        Parsed source file.
    namespaces : frozenset[str]
        Constructor package qualifiers to accept.
    resolver : ValueResolver
        Resolver for option values.

    Returns
    -------
    list[MetricRecord]
        Records in declaration order.
    """
    file_resolver = resolver.for_file(str(go_file.path))
    records: list[MetricRecord] = []
    for declaration in named_children(go_file.tree.root_node):
        if declaration.type != "var_declaration":
            continue
        for spec in _var_specs(declaration):
            for value in _values(spec):
                call = _call_parts(value)
                if call is None:
                    continue
                function, args = call
                records.extend(_scan_call(function, args, namespaces, file_resolver))
    return records


def scan_packages(
    packages: Iterable[GoPackage], *, namespaces: frozenset[str], resolver: ValueResolver
) -> list[MetricRecord]:
    """Extract candidate records from every file of every package, in order."""
    records: list[MetricRecord] = []
    for package in packages:
        for go_file in package.files:
            records.extend(scan_file(go_file, namespaces=namespaces, resolver=resolver))
    logger.debug(
        "Scanned packages",
        extra={"operation": "scan", "records": len(records)},
    )
    return records
