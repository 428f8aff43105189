"""Metric records flowing through the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__ = ["ClassifiedMetric", "MetricRecord", "StabilityTier"]


@dataclass(frozen=True, slots=True)
class MetricRecord:
    """A metric declaration recovered from source or synthesized from a convention.

    ``namespace`` and ``subsystem`` may be empty. Identity is the
    ``(namespace, subsystem, name)`` triple; ``help`` is not part of it.
    """

    namespace: str = ""
    subsystem: str = ""
    name: str = ""
    help: str = ""

    @property
    def identity(self) -> tuple[str, str, str]:
        """Deduplication key."""
        return (self.namespace, self.subsystem, self.name)

    @property
    def qualified_name(self) -> str:
        """Non-empty segments joined with ``_``, as the exporter exposes them.

        Examples
        --------
        >>> MetricRecord("karpenter", "nodes", "created_total").qualified_name
        'karpenter_nodes_created_total'
        >>> MetricRecord(name="workqueue_depth").qualified_name
        'workqueue_depth'
        """
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)


class StabilityTier(StrEnum):
    """How safe a metric is to depend on."""

    ALPHA = "ALPHA"
    BETA = "BETA"
    STABLE = "STABLE"
    DEPRECATED = "DEPRECATED"


@dataclass(frozen=True, slots=True)
class ClassifiedMetric:
    """A normalized record paired with its stability tier."""

    record: MetricRecord
    stability: StabilityTier
