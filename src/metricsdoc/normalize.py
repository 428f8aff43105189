"""Merge, deduplicate, filter, fold and classify metric records.

The steps run in a fixed order:

1. scanned records followed by synthesized records;
2. first record wins for each ``(namespace, subsystem, name)``;
3. records whose bare name starts with an excluded prefix are dropped;
4. library metrics exposed without a subsystem (``workqueue_depth``) get
   their known prefix moved into the subsystem (``workqueue`` / ``depth``);
5. each record receives a stability tier.

Folding can produce an identity that already exists, so deduplication is
repeated after step 4.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from metricsdoc.catalog import Catalog, StabilityRules
from metricsdoc.records import ClassifiedMetric, MetricRecord, StabilityTier

__all__ = [
    "classify",
    "deduplicate",
    "exclude_prefixes",
    "fold_prefixes",
    "normalize",
]


def deduplicate(records: Iterable[MetricRecord]) -> list[MetricRecord]:
    """Keep the first record for each identity, preserving order."""
    seen: set[tuple[str, str, str]] = set()
    unique: list[MetricRecord] = []
    for record in records:
        if record.identity in seen:
            continue
        seen.add(record.identity)
        unique.append(record)
    return unique


def exclude_prefixes(records: Iterable[MetricRecord], prefixes: Sequence[str]) -> list[MetricRecord]:
    """Drop records whose bare name starts with any of ``prefixes``."""
    excluded = tuple(prefixes)
    return [record for record in records if not (excluded and record.name.startswith(excluded))]


def fold_prefixes(records: Iterable[MetricRecord], prefixes: Sequence[str]) -> list[MetricRecord]:
    """Move a known ``<prefix>_`` from the name into an empty subsystem.

    A record is folded at most once: after folding its subsystem is no longer
    empty.
    """
    folded: list[MetricRecord] = []
    for record in records:
        if not record.subsystem:
            for prefix in prefixes:
                marker = f"{prefix}_"
                if record.name.startswith(marker):
                    record = replace(record, subsystem=prefix, name=record.name.removeprefix(marker))
                    break
        folded.append(record)
    return folded


def classify(record: MetricRecord, rules: StabilityRules) -> StabilityTier:
    """Return the stability tier of ``record``.

    The subsystem and the qualified name are both matched; deprecated wins
    over stable, which wins over beta. Unlisted records are alpha.
    """
    keys = (record.subsystem, record.qualified_name)
    for tier, names in (
        (StabilityTier.DEPRECATED, rules.deprecated),
        (StabilityTier.STABLE, rules.stable),
        (StabilityTier.BETA, rules.beta),
    ):
        if any(key in names for key in keys):
            return tier
    return StabilityTier.ALPHA


def normalize(
    scanned: Iterable[MetricRecord],
    synthesized: Iterable[MetricRecord],
    catalog: Catalog,
) -> list[ClassifiedMetric]:
    """Run all normalization steps and classify the result.

    Parameters
    ----------
    scanned : Iterable[MetricRecord]
        Records recovered from source, in traversal order.
    synthesized : Iterable[MetricRecord]
        Records expanded from pattern rules.
    catalog : Catalog
        Prefix tables and stability rules.

    Returns
    -------
    list[ClassifiedMetric]
        Unique, classified records in merge order.
    """
    merged = [*scanned, *synthesized]
    records = deduplicate(merged)
    records = exclude_prefixes(records, catalog.excluded_prefixes)
    records = fold_prefixes(records, catalog.folded_prefixes)
    records = deduplicate(records)
    return [ClassifiedMetric(record, classify(record, catalog.stability)) for record in records]
