"""Fixtures for metricsdoc pipeline tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from metricsdoc.catalog import Catalog, load_catalog
from metricsdoc.tscore import load_go_language, named_children, parse_bytes
from metricsdoc.walker import GoFile

if TYPE_CHECKING:
    from tree_sitter import Language, Node, Tree


@pytest.fixture(scope="session")
def go_lang() -> Language:
    return load_go_language()


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def write_go(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing Go source below ``tmp_path``."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def go_file(go_lang: Language) -> Callable[[str], GoFile]:
    """Return a helper parsing Go source into a :class:`GoFile`."""

    def _parse(source: str) -> GoFile:
        tree = parse_bytes(go_lang, source.encode("utf-8"))
        return GoFile(path=Path("metrics.go"), package="metrics", tree=tree)

    return _parse


@pytest.fixture
def value_node(go_lang: Language) -> Callable[[str], Node]:
    """Return a helper yielding the initializer node of ``var x = <expr>``."""
    trees: list[Tree] = []

    def _value(expression: str) -> Node:
        source = f"package p\n\nvar x = {expression}\n"
        tree = parse_bytes(go_lang, source.encode("utf-8"))
        trees.append(tree)
        assert not tree.root_node.has_error, source
        declaration = next(
            node for node in named_children(tree.root_node) if node.type == "var_declaration"
        )
        spec = next(node for node in declaration.named_children if node.type == "var_spec")
        values = spec.child_by_field_name("value")
        assert values is not None
        if values.type == "expression_list":
            return values.named_children[0]
        return values

    return _value
