"""Synthesize metrics that only exist through runtime library conventions.

Some metrics are registered by shared helpers at run time, for example the
operatorpkg status-condition and termination metrics registered once per
resource kind, or client-go request metrics. No constructor call for them is
visible in the scanned source, so the catalog lists them as
:class:`~metricsdoc.catalog.PatternRule` entries and this module expands them.
"""

from __future__ import annotations

from collections.abc import Iterable

from metricsdoc.catalog import KIND_PLACEHOLDER, PatternRule
from metricsdoc.records import MetricRecord
from metricsdoc_common.logging import get_logger

__all__ = ["expand_rule", "synthesize"]

logger = get_logger(__name__)


def _fill(template: str, kind: str | None) -> str:
    return template if kind is None else template.replace(KIND_PLACEHOLDER, kind)


def expand_rule(rule: PatternRule) -> list[MetricRecord]:
    """Expand one rule into records, kind by kind, metric by metric.

    Examples
    --------
    >>> from metricsdoc.catalog import PatternMetric
    >>> rule = PatternRule(
    ...     metrics=(PatternMetric("termination_duration_seconds", "Time for a {kind}."),),
    ...     namespace="operator",
    ...     subsystem="{kind}",
    ...     kinds=("node",),
    ... )
    >>> expand_rule(rule)[0].qualified_name
    'operator_node_termination_duration_seconds'
    """
    kinds: Iterable[str | None] = rule.kinds or (None,)
    return [
        MetricRecord(
            namespace=_fill(rule.namespace, kind),
            subsystem=_fill(rule.subsystem, kind),
            name=_fill(metric.name, kind),
            help=_fill(metric.help, kind),
        )
        for kind in kinds
        for metric in rule.metrics
    ]


def synthesize(rules: Iterable[PatternRule]) -> list[MetricRecord]:
    """Expand every rule, preserving catalog order."""
    records = [record for rule in rules for record in expand_rule(rule)]
    logger.debug("Synthesized pattern metrics", extra={"operation": "synthesize", "records": len(records)})
    return records
