"""Sort classified metrics and render the markdown document."""

from __future__ import annotations

import io
from collections.abc import Iterable, Mapping

from metricsdoc.catalog import Catalog, DocumentPreamble, TitleRules
from metricsdoc.records import ClassifiedMetric

__all__ = ["render_document", "render_preamble", "sort_metrics", "subsystem_title"]

DEFAULT_PRIORITY = 0


def sort_metrics(
    metrics: Iterable[ClassifiedMetric], sort_order: Mapping[str, int]
) -> list[ClassifiedMetric]:
    """Order metrics by descending subsystem priority, then descending qualified name.

    Unlisted subsystems have priority 0. The sort is stable, so records with
    equal keys keep their input order.
    """
    return sorted(
        metrics,
        key=lambda metric: (
            sort_order.get(metric.record.subsystem, DEFAULT_PRIORITY),
            metric.record.qualified_name,
        ),
        reverse=True,
    )


def subsystem_title(subsystem: str, rules: TitleRules) -> str:
    """Derive the section title of a subsystem.

    Examples
    --------
    >>> from types import MappingProxyType
    >>> rules = TitleRules(MappingProxyType({"nodes": "Nodes"}), frozenset({"aws", "sdk"}))
    >>> subsystem_title("aws_sdk_go", rules)
    'AWS SDK Go'
    >>> subsystem_title("nodes", rules)
    'Nodes'
    """
    alias = rules.aliases.get(subsystem)
    if alias is not None:
        return alias
    return " ".join(
        word.upper() if word in rules.acronyms else word[:1].upper() + word[1:]
        for word in subsystem.split("_")
    )


def render_preamble(document: DocumentPreamble) -> str:
    """Render the front matter, generated-file marker and introduction."""
    return (
        "---\n"
        f'title: "{document.title}"\n'
        f'linkTitle: "{document.link_title}"\n'
        f"weight: {document.weight}\n"
        "\n"
        "description: >\n"
        f"  {document.description}\n"
        "---\n"
        f"<!-- {document.marker} -->\n"
        f"{document.introduction}\n"
    )


def render_document(metrics: Iterable[ClassifiedMetric], catalog: Catalog) -> str:
    """Render the complete markdown document.

    A ``##`` heading is written whenever the subsystem title changes between
    consecutive records; records without a subsystem get no group heading.
    Records whose qualified name is empty are not rendered.
    """
    out = io.StringIO()
    out.write(render_preamble(catalog.document))
    previous_title = ""
    for metric in sort_metrics(metrics, catalog.subsystem_sort_order):
        record = metric.record
        if record.subsystem:
            title = subsystem_title(record.subsystem, catalog.titles)
            if title != previous_title:
                out.write(f"## {title} Metrics\n\n")
                previous_title = title
        qualified_name = record.qualified_name
        if not qualified_name:
            continue
        out.write(f"### `{qualified_name}`\n")
        out.write(f"{record.help}\n")
        out.write(f"- Stability Level: {metric.stability.value}\n\n")
    return out.getvalue()
