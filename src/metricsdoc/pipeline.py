"""Run the extraction pipeline from source roots to a rendered document."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from metricsdoc.catalog import Catalog
from metricsdoc.normalize import normalize
from metricsdoc.patterns import synthesize
from metricsdoc.records import ClassifiedMetric, MetricRecord
from metricsdoc.render import render_document
from metricsdoc.resolver import ValueResolver
from metricsdoc.scanner import scan_packages
from metricsdoc.tscore import load_go_language
from metricsdoc.walker import walk_packages
from metricsdoc_common.logging import get_logger

__all__ = ["collect_metrics", "generate_document", "scan_roots"]

logger = get_logger(__name__)


def scan_roots(roots: Sequence[Path], catalog: Catalog) -> list[MetricRecord]:
    """Scan every root in order and return the candidate records."""
    lang = load_go_language()
    resolver = ValueResolver(catalog.symbols)
    records: list[MetricRecord] = []
    for root in roots:
        packages = walk_packages(lang, root)
        found = scan_packages(
            packages, namespaces=catalog.constructor_namespaces, resolver=resolver
        )
        logger.info(
            "Scanned source root",
            extra={
                "operation": "scan",
                "root": str(root),
                "packages": len(packages),
                "records": len(found),
            },
        )
        records.extend(found)
    return records


def collect_metrics(roots: Sequence[Path], catalog: Catalog) -> list[ClassifiedMetric]:
    """Scan, synthesize and normalize; the result is unsorted."""
    scanned = scan_roots(roots, catalog)
    synthesized = synthesize(catalog.pattern_rules)
    metrics = normalize(scanned, synthesized, catalog)
    logger.info(
        "Normalized metrics",
        extra={
            "operation": "normalize",
            "scanned": len(scanned),
            "synthesized": len(synthesized),
            "metrics": len(metrics),
        },
    )
    return metrics


def generate_document(roots: Sequence[Path], catalog: Catalog) -> str:
    """Return the markdown document for the metrics declared under ``roots``.

    Nothing is written here; any extraction error propagates before output
    exists.

    Raises
    ------
    metricsdoc_common.errors.MetricsDocError
        On the first parse failure, unresolved symbol, unsupported value
        shape or invalid source root.
    """
    return render_document(collect_metrics(roots, catalog), catalog)
