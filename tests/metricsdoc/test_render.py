"""Tests for metricsdoc.render module."""

from __future__ import annotations

from types import MappingProxyType

from metricsdoc.catalog import Catalog, TitleRules
from metricsdoc.records import ClassifiedMetric, MetricRecord, StabilityTier
from metricsdoc.render import render_document, render_preamble, sort_metrics, subsystem_title


def _metric(
    subsystem: str, name: str, tier: StabilityTier = StabilityTier.ALPHA, namespace: str = "karpenter"
) -> ClassifiedMetric:
    return ClassifiedMetric(MetricRecord(namespace, subsystem, name, f"{name} help"), tier)


class TestSortMetrics:
    """Tests for sort_metrics."""

    def test_priority_then_name_descending(self) -> None:
        """Higher priorities lead; names descend within a priority."""
        metrics = [
            _metric("workqueue", "depth"),
            _metric("nodes", "a_total"),
            _metric("nodepools", "limit"),
            _metric("nodes", "b_total"),
            _metric("cloudprovider", "errors_total"),
        ]
        order = {"nodepools": 10, "nodes": 8, "workqueue": -1}
        ordered = [metric.record.qualified_name for metric in sort_metrics(metrics, order)]
        assert ordered == [
            "karpenter_nodepools_limit",
            "karpenter_nodes_b_total",
            "karpenter_nodes_a_total",
            "karpenter_cloudprovider_errors_total",
            "karpenter_workqueue_depth",
        ]


class TestSubsystemTitle:
    """Tests for subsystem_title."""

    RULES = TitleRules(MappingProxyType({"nodeclaim": "Nodeclaims"}), frozenset({"aws", "sdk"}))

    def test_alias(self) -> None:
        assert subsystem_title("nodeclaim", self.RULES) == "Nodeclaims"

    def test_words_and_acronyms(self) -> None:
        assert subsystem_title("cluster_state", self.RULES) == "Cluster State"
        assert subsystem_title("aws_sdk_go", self.RULES) == "AWS SDK Go"


class TestRenderDocument:
    """Tests for render_document with the bundled catalog."""

    def test_preamble_first(self, catalog: Catalog) -> None:
        """The document opens with front matter and the generated marker."""
        document = render_document([], catalog)
        assert document == render_preamble(catalog.document)
        assert document.startswith('---\ntitle: "Metrics"\nlinkTitle: "Metrics"\nweight: 7\n')
        assert f"<!-- {catalog.document.marker} -->\n" in document

    def test_group_headings(self, catalog: Catalog) -> None:
        """Singular and plural subsystems share one heading via aliases."""
        metrics = [
            _metric("nodes", "created_total", StabilityTier.STABLE),
            _metric("node", "event_total", namespace="operator"),
        ]
        body = render_document(metrics, catalog).removeprefix(render_preamble(catalog.document))
        assert body == (
            "## Nodes Metrics\n\n"
            "### `operator_node_event_total`\n"
            "event_total help\n"
            "- Stability Level: ALPHA\n\n"
            "### `karpenter_nodes_created_total`\n"
            "created_total help\n"
            "- Stability Level: STABLE\n\n"
        )

    def test_no_heading_without_subsystem(self, catalog: Catalog) -> None:
        """Subsystem-less metrics lead the document without a heading."""
        metrics = [
            _metric("cloudprovider", "errors_total"),
            ClassifiedMetric(MetricRecord("karpenter", "", "build_info", "Build."), StabilityTier.STABLE),
        ]
        body = render_document(metrics, catalog).removeprefix(render_preamble(catalog.document))
        assert body.startswith("### `karpenter_build_info`\nBuild.\n- Stability Level: STABLE\n\n")
        assert "## Cloudprovider Metrics\n\n### `karpenter_cloudprovider_errors_total`" in body

    def test_empty_records_not_rendered(self, catalog: Catalog) -> None:
        """Records with an empty qualified name produce no entry."""
        metrics = [ClassifiedMetric(MetricRecord(), StabilityTier.ALPHA)]
        assert render_document(metrics, catalog) == render_preamble(catalog.document)
