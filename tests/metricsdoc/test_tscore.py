"""Tests for metricsdoc.tscore module."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metricsdoc.tscore import (
    first_named_child,
    first_syntax_problem,
    load_go_language,
    named_children,
    node_text,
    parse_bytes,
)

if TYPE_CHECKING:
    from tree_sitter import Language


class TestLoadGoLanguage:
    """Tests for load_go_language."""

    def test_is_cached(self) -> None:
        """The grammar is loaded once per process."""
        assert load_go_language() is load_go_language()


class TestFirstSyntaxProblem:
    """Tests for first_syntax_problem."""

    def test_clean_tree(self, go_lang: Language) -> None:
        """A valid file has no problem."""
        tree = parse_bytes(go_lang, b"package p\n\nvar x = 1\n")
        assert first_syntax_problem(tree) is None

    def test_reports_one_based_location(self, go_lang: Language) -> None:
        """Broken input yields a location inside the file, 1-based."""
        tree = parse_bytes(go_lang, b"package p\n\nvar x = (\n")
        problem = first_syntax_problem(tree)
        assert problem is not None
        assert problem.line >= 1
        assert problem.column >= 1
        assert problem.message


class TestNodeHelpers:
    """Tests for node_text and named child helpers."""

    def test_comments_are_skipped(self, go_lang: Language) -> None:
        """Comments never appear among named children."""
        tree = parse_bytes(go_lang, b"// header\npackage p\n")
        kinds = [child.type for child in named_children(tree.root_node)]
        assert "comment" not in kinds
        first = first_named_child(tree.root_node)
        assert first is not None
        assert first.type == "package_clause"
        assert node_text(first) == "package p"
