"""Versioned configuration catalog describing the scanned codebase's conventions.

The catalog is plain data (``data/catalog.yaml``) validated against
``data/catalog.schema.json``. It holds every table the pipeline depends on:
recognized constructor packages, the symbol table, stability rules, the
subsystem sort order, prefix tables, title rules, the pattern rules for
runtime-generated metrics, and the document preamble.

Examples
--------
>>> from metricsdoc.catalog import load_catalog
>>> catalog = load_catalog()
>>> catalog.symbols.lookup("metrics.Namespace")
'karpenter'
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final, cast

import yaml
from jsonschema import Draft202012Validator

from metricsdoc_common.errors import ConfigurationError, UnresolvedSymbolError
from metricsdoc_common.logging import get_logger

__all__ = [
    "CATALOG_SCHEMA",
    "DEFAULT_CATALOG",
    "KIND_PLACEHOLDER",
    "Catalog",
    "DocumentPreamble",
    "PatternMetric",
    "PatternRule",
    "StabilityRules",
    "SymbolTable",
    "TitleRules",
    "load_catalog",
]

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG: Final[Path] = DATA_DIR / "catalog.yaml"
CATALOG_SCHEMA: Final[Path] = DATA_DIR / "catalog.schema.json"

KIND_PLACEHOLDER: Final[str] = "{kind}"

_MAX_REPORTED_ERRORS = 5


class SymbolTable(Mapping[str, str]):
    """Immutable mapping from source identifiers to their string values.

    Identifiers are either bare (``NodeSubsystem``) or package-qualified
    (``metrics.NodeSubsystem``).
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries or {}))

    def __getitem__(self, identifier: str) -> str:
        return self._entries[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, identifier: str) -> str:
        """Return the value for ``identifier``.

        Raises
        ------
        UnresolvedSymbolError
            If the identifier has no mapping.
        """
        try:
            return self._entries[identifier]
        except KeyError:
            raise UnresolvedSymbolError(identifier) from None


@dataclass(frozen=True, slots=True)
class StabilityRules:
    """Three disjoint sets of subsystems or qualified names."""

    stable: frozenset[str] = frozenset()
    beta: frozenset[str] = frozenset()
    deprecated: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class TitleRules:
    """How raw subsystem tokens become section titles."""

    aliases: Mapping[str, str]
    acronyms: frozenset[str]


@dataclass(frozen=True, slots=True)
class PatternMetric:
    """Name and help templates of one runtime-generated metric."""

    name: str
    help: str


@dataclass(frozen=True, slots=True)
class PatternRule:
    """A family of metrics synthesized per entity kind.

    ``{kind}`` in ``subsystem``, a metric name or a help text is replaced by
    each entry of ``kinds``. A rule without kinds expands exactly once.
    """

    metrics: tuple[PatternMetric, ...]
    namespace: str = ""
    subsystem: str = ""
    kinds: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True, slots=True)
class DocumentPreamble:
    """Front matter and introduction emitted before the generated sections."""

    title: str
    link_title: str
    weight: int
    description: str
    marker: str
    introduction: str


@dataclass(frozen=True, slots=True)
class Catalog:
    """All fixed tables used by one pipeline run."""

    constructor_namespaces: frozenset[str]
    symbols: SymbolTable
    stability: StabilityRules
    subsystem_sort_order: Mapping[str, int]
    excluded_prefixes: tuple[str, ...]
    folded_prefixes: tuple[str, ...]
    titles: TitleRules
    pattern_rules: tuple[PatternRule, ...]
    document: DocumentPreamble


def _read_yaml(path: Path) -> object:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        message = f"Failed to read catalog '{path}': {exc}"
        raise ConfigurationError(message, cause=exc, context={"path": str(path)}) from exc
    except yaml.YAMLError as exc:
        message = f"Failed to parse catalog '{path}': {exc}"
        raise ConfigurationError(message, cause=exc, context={"path": str(path)}) from exc


def _validate(document: object, path: Path) -> None:
    schema = json.loads(CATALOG_SCHEMA.read_text(encoding="utf-8"))
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(document), key=lambda err: list(err.absolute_path))
    if not errors:
        return
    details = [
        f"{'/'.join(str(part) for part in err.absolute_path) or '<root>'}: {err.message}"
        for err in errors[:_MAX_REPORTED_ERRORS]
    ]
    message = f"Catalog '{path}' does not match its schema: " + "; ".join(details)
    raise ConfigurationError(message, context={"path": str(path), "errors": details})


def _check_stability(rules: StabilityRules, path: Path) -> None:
    pairs = (
        ("stable", rules.stable, "beta", rules.beta),
        ("stable", rules.stable, "deprecated", rules.deprecated),
        ("beta", rules.beta, "deprecated", rules.deprecated),
    )
    for left_name, left, right_name, right in pairs:
        overlap = sorted(left & right)
        if overlap:
            message = (
                f"Catalog '{path}' lists {', '.join(overlap)} as both "
                f"{left_name} and {right_name}"
            )
            raise ConfigurationError(message, context={"path": str(path), "overlap": overlap})


def _build_rule(raw: Mapping[str, Any], path: Path) -> PatternRule:
    rule = PatternRule(
        metrics=tuple(PatternMetric(name=m["name"], help=m["help"]) for m in raw["metrics"]),
        namespace=raw.get("namespace", ""),
        subsystem=raw.get("subsystem", ""),
        kinds=tuple(raw.get("kinds", ())),
        description=raw.get("description", ""),
    )
    if not rule.kinds:
        templates = [rule.namespace, rule.subsystem]
        templates.extend(field for metric in rule.metrics for field in (metric.name, metric.help))
        if any(KIND_PLACEHOLDER in template for template in templates):
            message = (
                f"Catalog '{path}' pattern rule '{rule.description or rule.metrics[0].name}' "
                f"uses {KIND_PLACEHOLDER} but lists no kinds"
            )
            raise ConfigurationError(message, context={"path": str(path)})
    return rule


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a catalog file.

    Parameters
    ----------
    path : Path | None, optional
        Catalog to load. Defaults to the bundled :data:`DEFAULT_CATALOG`.

    Returns
    -------
    Catalog
        Immutable catalog.

    Raises
    ------
    ConfigurationError
        If the file cannot be read or parsed, does not match the schema, lists
        a name under more than one stability tier, or has a pattern rule using
        ``{kind}`` without kinds.
    """
    catalog_path = path or DEFAULT_CATALOG
    document = _read_yaml(catalog_path)
    _validate(document, catalog_path)
    raw = cast("dict[str, Any]", document)

    stability = StabilityRules(
        stable=frozenset(raw["stability"]["stable"]),
        beta=frozenset(raw["stability"]["beta"]),
        deprecated=frozenset(raw["stability"]["deprecated"]),
    )
    _check_stability(stability, catalog_path)

    catalog = Catalog(
        constructor_namespaces=frozenset(raw["constructor_namespaces"]),
        symbols=SymbolTable(raw["symbols"]),
        stability=stability,
        subsystem_sort_order=MappingProxyType(dict(raw["subsystem_sort_order"])),
        excluded_prefixes=tuple(raw["excluded_prefixes"]),
        folded_prefixes=tuple(raw["folded_prefixes"]),
        titles=TitleRules(
            aliases=MappingProxyType(dict(raw["titles"]["aliases"])),
            acronyms=frozenset(raw["titles"]["acronyms"]),
        ),
        pattern_rules=tuple(_build_rule(rule, catalog_path) for rule in raw["pattern_rules"]),
        document=DocumentPreamble(**raw["document"]),
    )
    logger.debug(
        "Catalog loaded",
        extra={
            "operation": "load_catalog",
            "path": str(catalog_path),
            "symbols": len(catalog.symbols),
            "pattern_rules": len(catalog.pattern_rules),
        },
    )
    return catalog
