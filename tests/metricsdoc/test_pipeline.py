"""End-to-end tests for metricsdoc.pipeline module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from metricsdoc.catalog import Catalog
from metricsdoc.pipeline import collect_metrics, generate_document, scan_roots
from metricsdoc.render import render_preamble
from metricsdoc_common.errors import SourceRootError, UnresolvedSymbolError

WriteGo = Callable[[str, str], Path]

NODE_METRICS = dedent(
    """\
    package node

    import (
    \t"github.com/prometheus/client_golang/prometheus"

    \t"sigs.k8s.io/karpenter/pkg/metrics"
    )

    var (
    \tNodesCreatedTotal = prometheus.NewCounterVec(
    \t\tprometheus.CounterOpts{
    \t\t\tNamespace: metrics.Namespace,
    \t\t\tSubsystem: metrics.NodeSubsystem,
    \t\t\tName:      "created_total",
    \t\t\tHelp:      "Number of nodes created in total by Karpenter. Labeled by owning nodepool.",
    \t\t},
    \t\t[]string{"nodepool"},
    \t)
    \tAllocatable = prometheus.NewGaugeVec(
    \t\tprometheus.GaugeOpts{
    \t\t\tNamespace: metrics.Namespace,
    \t\t\tSubsystem: metrics.NodeSubsystem,
    \t\t\tName:      "allocatable",
    \t\t\tHelp:      "Node allocatable are the resources allocatable by nodes.",
    \t\t},
    \t\t[]string{"resource_type"},
    \t)
    )

    func init() {
    \tprometheus.MustRegister(NodesCreatedTotal, Allocatable)
    }
    """
)


def test_end_to_end_document(catalog: Catalog, tmp_path: Path, write_go: WriteGo) -> None:
    """Scanned and synthesized metrics are rendered under their sections."""
    write_go("pkg/controllers/node/metrics.go", NODE_METRICS)
    document = generate_document([tmp_path / "pkg"], catalog)

    assert document.startswith(render_preamble(catalog.document))
    assert "## Nodes Metrics\n\n" in document
    assert (
        "### `karpenter_nodes_created_total`\n"
        "Number of nodes created in total by Karpenter. Labeled by owning nodepool.\n"
        "- Stability Level: STABLE\n\n"
    ) in document
    assert "### `karpenter_nodes_allocatable`\n" in document
    assert "### `operator_node_event_total`\n" in document
    assert "### `operator_status_condition_count`\n" in document
    assert "## Client Go Metrics\n\n### `client_go_request_total`" in document

    nodes_section = document.index("## Nodes Metrics")
    workqueue_like = document.index("## Status Condition Metrics")
    assert nodes_section < workqueue_like
    assert document.count("### `karpenter_nodes_created_total`") == 1


def test_idempotent(catalog: Catalog, tmp_path: Path, write_go: WriteGo) -> None:
    """The same tree renders byte-identically on every run."""
    write_go("pkg/node/metrics.go", NODE_METRICS)
    first = generate_document([tmp_path / "pkg"], catalog)
    second = generate_document([tmp_path / "pkg"], catalog)
    assert first == second


def test_multiple_roots_first_wins(catalog: Catalog, tmp_path: Path, write_go: WriteGo) -> None:
    """Roots are scanned in order and the first declaration keeps its help."""
    write_go("one/metrics.go", NODE_METRICS)
    write_go(
        "two/metrics.go",
        NODE_METRICS.replace("Number of nodes created", "Shadowed text for nodes created"),
    )
    scanned = scan_roots([tmp_path / "one", tmp_path / "two"], catalog)
    assert len(scanned) == 8
    metrics = collect_metrics([tmp_path / "one", tmp_path / "two"], catalog)
    created = [m for m in metrics if m.record.qualified_name == "karpenter_nodes_created_total"]
    assert len(created) == 1
    assert created[0].record.help.startswith("Number of nodes created")


def test_no_duplicate_identities(catalog: Catalog, tmp_path: Path, write_go: WriteGo) -> None:
    """Normalized output holds each identity once."""
    write_go("pkg/node/metrics.go", NODE_METRICS)
    metrics = collect_metrics([tmp_path / "pkg"], catalog)
    identities = [metric.record.identity for metric in metrics]
    assert len(identities) == len(set(identities))


def test_unresolved_symbol_aborts(catalog: Catalog, tmp_path: Path, write_go: WriteGo) -> None:
    """An unmapped identifier fails the whole run."""
    write_go(
        "pkg/foo/metrics.go",
        NODE_METRICS.replace("metrics.NodeSubsystem", "metrics.FooSubsystem"),
    )
    with pytest.raises(UnresolvedSymbolError) as excinfo:
        generate_document([tmp_path / "pkg"], catalog)
    assert excinfo.value.identifier == "metrics.FooSubsystem"


def test_missing_root(catalog: Catalog, tmp_path: Path) -> None:
    with pytest.raises(SourceRootError):
        generate_document([tmp_path / "absent"], catalog)
