"""Tests for the MetricsHook protocol and its wiring.

Covers:
  - Protocol conformance (isinstance, structural subtyping)
  - NoopMetricsHook and resolve_metrics
  - Every documented metric name is emitted somewhere in the source
  - Mapping faults are counted through the configured hook
"""
from __future__ import annotations

import re
from pathlib import Path

import pytest

from draftpress.blocks import BlockMapper
from draftpress.document.tree import Node, NodeKind
from draftpress.observability import metrics as metrics_module
from draftpress.observability.metrics import MetricsHook, NoopMetricsHook, resolve_metrics

SRC_ROOT = Path(metrics_module.__file__).resolve().parents[1]


class TestMetricsHookProtocol:
    def test_noop_is_instance_of_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_recording_hook_is_instance_of_protocol(self, metrics):
        assert isinstance(metrics, MetricsHook)

    def test_partial_class_is_not_instance(self):
        class OnlyIncrement:
            def increment(self, name, value=1, tags=None):
                pass

        assert not isinstance(OnlyIncrement(), MetricsHook)


class TestNoopMetricsHook:
    def test_all_methods_return_none(self):
        hook = NoopMetricsHook()
        assert hook.increment("draftpress.requests_total", tags={"env": "test"}) is None
        assert hook.timing("draftpress.stage_duration_ms", 12.5) is None
        assert hook.gauge("draftpress.in_flight", 3.0) is None

    def test_no_instance_dict(self):
        with pytest.raises(AttributeError):
            NoopMetricsHook().extra = 1


class TestResolveMetrics:
    def test_none_gives_shared_noop(self):
        assert isinstance(resolve_metrics(None), NoopMetricsHook)
        assert resolve_metrics(None) is resolve_metrics(None)

    def test_hook_returned_unchanged(self, metrics):
        assert resolve_metrics(metrics) is metrics


class TestDocumentedNames:
    def _documented(self) -> list[str]:
        return re.findall(r"``(draftpress\.[a-z_]+)``", metrics_module.__doc__)

    def test_docstring_lists_names(self):
        assert len(self._documented()) == 9

    def test_every_documented_name_is_emitted(self):
        source = "\n".join(
            path.read_text(encoding="utf-8")
            for path in SRC_ROOT.rglob("*.py")
            if path.name != "metrics.py"
        )
        missing = [name for name in self._documented() if f'"{name}"' not in source]
        assert missing == []


class TestMappingFaultMetric:
    def test_fault_counted_with_node_kind(self, metrics):
        stray_item = Node(NodeKind.LIST_ITEM, children=(
            Node(NodeKind.PARAGRAPH, children=(Node(NodeKind.TEXT, literal="x"),)),
        ))
        tree = Node(NodeKind.DOCUMENT, children=(stray_item,))

        BlockMapper(metrics=metrics).map(tree, "x")

        assert metrics.increments == [{
            "name": "draftpress.mapping_faults_total",
            "value": 1,
            "tags": {"node_kind": "list_item"},
        }]
