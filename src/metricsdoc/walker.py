"""Discover and parse Go compilation units under a source root.

Directories are visited in lexicographic order, and so are the files inside
each directory. Every ``.go`` file is parsed; files in the same directory
that declare the same package form one :class:`GoPackage`. Packages whose
name ends in ``_test`` are external test packages and are skipped.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from metricsdoc.tscore import first_syntax_problem, named_children, node_text, parse_bytes
from metricsdoc_common.errors import ParseFailureError, SourceRootError
from metricsdoc_common.fs import read_bytes
from metricsdoc_common.logging import get_logger

if TYPE_CHECKING:
    from tree_sitter import Language, Tree

__all__ = ["GO_SUFFIX", "TEST_PACKAGE_SUFFIX", "GoFile", "GoPackage", "parse_file", "walk_packages"]

logger = get_logger(__name__)

GO_SUFFIX: Final[str] = ".go"
TEST_PACKAGE_SUFFIX: Final[str] = "_test"


@dataclass(frozen=True, slots=True)
class GoFile:
    """A parsed Go source file."""

    path: Path
    package: str
    tree: Tree


@dataclass(frozen=True, slots=True)
class GoPackage:
    """Files of one directory declaring the same package."""

    name: str
    directory: Path
    files: tuple[GoFile, ...]


def _package_name(tree: Tree) -> str | None:
    """Return the identifier of the file's ``package`` clause, or None when absent."""
    for child in named_children(tree.root_node):
        if child.type == "package_clause":
            for ident in named_children(child):
                if ident.type == "package_identifier":
                    return node_text(ident)
    return None


def parse_file(lang: Language, path: Path) -> GoFile:
    """Parse one Go file.

    Raises
    ------
    ParseFailureError
        If the file cannot be read, contains a syntax error, or has no
        ``package`` clause.
    """
    try:
        data = read_bytes(path)
    except OSError as exc:
        raise ParseFailureError(str(exc), path=str(path), cause=exc) from exc
    tree = parse_bytes(lang, data)
    problem = first_syntax_problem(tree)
    if problem is not None:
        raise ParseFailureError(
            problem.message, path=str(path), line=problem.line, column=problem.column
        )
    package = _package_name(tree)
    if package is None:
        raise ParseFailureError("expected 'package' clause", path=str(path), line=1, column=1)
    return GoFile(path=path, package=package, tree=tree)


def _parse_directory(lang: Language, directory: Path, filenames: list[str]) -> list[GoPackage]:
    """Parse the ``.go`` files of one directory and group them by package.

    Parameters
    ----------
    lang : Language
        Go grammar.
    directory : Path
        Directory being visited.
    filenames : list[str]
        File names reported by :func:`os.walk` for ``directory``.

    Returns
    -------
    list[GoPackage]
        One package per declared package name, ordered by name.
    """
    grouped: dict[str, list[GoFile]] = {}
    for filename in sorted(filenames):
        if not filename.endswith(GO_SUFFIX):
            continue
        path = directory / filename
        if not path.is_file():
            continue
        parsed = parse_file(lang, path)
        grouped.setdefault(parsed.package, []).append(parsed)
    return [
        GoPackage(name=name, directory=directory, files=tuple(files))
        for name, files in sorted(grouped.items())
    ]


def walk_packages(lang: Language, root: Path) -> list[GoPackage]:
    """Parse every Go package below ``root``, excluding test packages.

    Parameters
    ----------
    lang : Language
        Go grammar from :func:`metricsdoc.tscore.load_go_language`.
    root : Path
        Directory to scan recursively.

    Returns
    -------
    list[GoPackage]
        Packages in deterministic (lexicographic directory, then package
        name) order.

    Raises
    ------
    SourceRootError
        If ``root`` is not a directory.
    ParseFailureError
        On the first file that fails to parse.
    """
    if not root.is_dir():
        raise SourceRootError(str(root))
    logger.info("Parsing code", extra={"operation": "walk", "root": str(root)})
    packages: list[GoPackage] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for package in _parse_directory(lang, Path(dirpath), filenames):
            if package.name.endswith(TEST_PACKAGE_SUFFIX):
                logger.debug(
                    "Skipping test package",
                    extra={"operation": "walk", "package": package.name, "directory": dirpath},
                )
                continue
            packages.append(package)
    return packages
